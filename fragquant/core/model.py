# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Transcripts and clusters consumed by the projection and normalization steps.

Transcripts live in a plain list (the arena); a transcript's position in that
list is its identifier. Clusters refer to members by identifier only.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from ..utils.logmath import LOG_0, log_sum


@dataclass
class Transcript:
    """Per-transcript quantities produced by the EM stage.

    ``mass`` and ``log_effective_length`` are in log-space. ``projected_counts``
    is written by :func:`fragquant.core.projection.project_cluster`.
    """
    name: str
    ref_length: int
    unique_count: int = 0
    total_count: int = 0
    mass: float = LOG_0
    log_effective_length: Optional[float] = None
    projected_counts: float = 0.0
    # Snapshot of the counts taken right before projection
    unique_counts: int = field(default=0, repr=False)
    total_counts: int = field(default=0, repr=False)

    def effective_length(self, no_correction=False):
        """Length used for normalization, in log-space.

        Falls back to the reference length when correction is disabled or
        no effective length has been cached.
        """
        if no_correction or self.log_effective_length is None:
            return math.log(self.ref_length)
        return self.log_effective_length

    def refresh_counts(self):
        self.unique_counts = self.unique_count
        self.total_counts = self.total_count


@dataclass
class Cluster:
    """Transcripts connected through shared ambiguous alignments."""
    members: list
    log_mass: float = LOG_0
    num_hits: int = 0

    def __len__(self):
        return len(self.members)

    def __iter__(self):
        return iter(self.members)


TRANSCRIPT_COLUMNS = ['Name', 'Length', 'UniqueCount', 'TotalCount', 'LogMass']

# Names are kept verbatim; only these spellings mark a missing optional value
_MISSING = ['', 'NA', 'NaN', 'nan']


def load_transcripts(filename):
    """Read the transcript table written by the EM stage.

    Required columns are ``Name, Length, UniqueCount, TotalCount, LogMass``;
    ``LogEffectiveLength`` is optional. ``-inf`` in ``LogMass`` means no mass.

    Returns:
        List of :class:`Transcript` in file order.
    """
    df = pd.read_csv(filename, sep='\t', comment='#', dtype={'Name': str},
                     keep_default_na=False, na_values={'LogEffectiveLength': _MISSING})
    missing = [c for c in TRANSCRIPT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f'{filename}: missing columns {missing}')
    if df['Name'].duplicated().any():
        dups = df.loc[df['Name'].duplicated(), 'Name'].tolist()
        raise ValueError(f'{filename}: duplicate transcript names {dups[:5]}')

    has_efflen = 'LogEffectiveLength' in df.columns
    transcripts = []
    for row in df.itertuples(index=False):
        efflen = getattr(row, 'LogEffectiveLength') if has_efflen else None
        if efflen is not None and pd.isna(efflen):
            efflen = None
        transcripts.append(Transcript(
            name=str(row.Name),
            ref_length=int(row.Length),
            unique_count=int(row.UniqueCount),
            total_count=int(row.TotalCount),
            mass=float(row.LogMass),
            log_effective_length=None if efflen is None else float(efflen),
        ))
    return transcripts


def load_clusters(filename, transcripts):
    """Read the cluster table.

    Required columns are ``Members`` (comma separated transcript names) and
    ``NumHits``; ``LogMass`` defaults to the log-sum of the members' masses.

    Returns:
        List of :class:`Cluster` in file order.
    """
    df = pd.read_csv(filename, sep='\t', comment='#', dtype={'Members': str},
                     keep_default_na=False, na_values={'LogMass': _MISSING})
    for c in ['Members', 'NumHits']:
        if c not in df.columns:
            raise ValueError(f'{filename}: missing column {c}')

    name_index = {t.name: i for i, t in enumerate(transcripts)}
    owner = {}
    clusters = []
    for cid, row in enumerate(df.itertuples(index=False)):
        members = []
        for name in str(row.Members).split(','):
            name = name.strip()
            if name not in name_index:
                raise ValueError(f'{filename}: cluster {cid} has unknown transcript "{name}"')
            tid = name_index[name]
            if tid in owner:
                raise ValueError(
                    f'{filename}: transcript "{name}" is in clusters {owner[tid]} and {cid}')
            owner[tid] = cid
            members.append(tid)
        if 'LogMass' in df.columns and not pd.isna(row.LogMass):
            log_mass = float(row.LogMass)
        else:
            log_mass = log_sum(transcripts[i].mass for i in members)
        clusters.append(Cluster(members=members, log_mass=log_mass, num_hits=int(row.NumHits)))
    return clusters
