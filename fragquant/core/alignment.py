# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Library format detection on SAM/BAM records.

Alignment files should be collated or coordinate sorted; each paired
fragment is counted once, at read 1 (or at whichever end aligned, for
orphans).
"""

import logging as lg
from collections import Counter
from dataclasses import dataclass, field

import pandas as pd
import pysam

from .compat import log_align_format_prob
from .errors import InconsistentHeaders
from .libformat import OrphanStatus
from .orientation import hit_type_paired, hit_type_single


def headers_are_consistent(headers):
    """True if all headers list the same references, with the same lengths.

    Args:
        headers: Sequence of ``pysam.AlignmentHeader`` objects.
    """
    if len(headers) <= 1:
        return True
    first = headers[0]
    for h in headers[1:]:
        if h.nreferences != first.nreferences:
            return False
        if tuple(h.references) != tuple(first.references):
            return False
        if tuple(h.lengths) != tuple(first.lengths):
            return False
    return True


def hit_type_for_read(read):
    """Observed library format of a mapped record.

    Returns:
        ``(LibraryFormat, OrphanStatus)``; the status is None for reads from
        a single-end library.

    Raises:
        ValueError: the read is unmapped or its mate maps to another reference.
    """
    if read.is_unmapped:
        raise ValueError(f'Read {read.query_name} is unmapped')
    fwd = not read.is_reverse
    if not read.is_paired:
        return hit_type_single(read.reference_start, fwd), None
    if read.mate_is_unmapped:
        status = OrphanStatus.LeftOrphan if read.is_read1 else OrphanStatus.RightOrphan
        return hit_type_single(read.reference_start, fwd), status
    if read.reference_id != read.next_reference_id:
        raise ValueError(f'Mates of {read.query_name} map to different references')

    own = (read.reference_start, fwd)
    mate = (read.next_reference_start, not read.mate_is_reverse)
    end1, end2 = (own, mate) if read.is_read1 else (mate, own)
    return hit_type_paired(end1[0], end1[1], end2[0], end2[1]), OrphanStatus.Paired


@dataclass
class LibraryFormatCounts:
    """Observed library formats, tallied against an expected format."""
    expected: object
    incompat_prior: float
    counts: Counter = field(default_factory=Counter)
    orphans: Counter = field(default_factory=Counter)
    skipped: Counter = field(default_factory=Counter)
    num_compatible: int = 0

    def add(self, observed, status=None):
        self.counts[observed] += 1
        if status is not None and status != OrphanStatus.Paired:
            self.orphans[status] += 1
        if log_align_format_prob(observed, self.expected, self.incompat_prior) > self.incompat_prior:
            self.num_compatible += 1

    @property
    def num_fragments(self):
        return sum(self.counts.values())

    @property
    def compatible_ratio(self):
        n = self.num_fragments
        return self.num_compatible / n if n else 0.0

    def to_frame(self):
        """One row per observed format, most frequent first."""
        rows = [
            {
                'format': str(fmt),
                'count': n,
                'log_compat_prob': log_align_format_prob(fmt, self.expected, self.incompat_prior),
            }
            for fmt, n in self.counts.most_common()
        ]
        return pd.DataFrame(rows, columns=['format', 'count', 'log_compat_prob'])


def _skip_reason(read):
    if read.is_unmapped:
        return 'unmapped'
    if read.is_secondary:
        return 'secondary'
    if read.is_supplementary:
        return 'supplementary'
    return None


def tally_library_formats(samfiles, expected, incompat_prior, threads=1):
    """Count the observed library format of every primary fragment.

    Args:
        samfiles: Paths to SAM/BAM files sharing one reference set.
        expected: Expected :class:`LibraryFormat`.
        incompat_prior: Log-probability of an incompatible alignment.
        threads: Decompression threads passed to pysam.

    Returns:
        :class:`LibraryFormatCounts`.

    Raises:
        InconsistentHeaders: the files disagree on their references.
    """
    handles = [pysam.AlignmentFile(f, check_sq=False, threads=threads) for f in samfiles]
    try:
        if not headers_are_consistent([sf.header for sf in handles]):
            raise InconsistentHeaders(
                'Alignment files have different reference sequences: {}'.format(', '.join(samfiles)))

        tally = LibraryFormatCounts(expected=expected, incompat_prior=incompat_prior)
        for fname, sf in zip(samfiles, handles):
            lg.info(f'Tallying library formats in {fname}')
            for read in sf.fetch(until_eof=True):
                reason = _skip_reason(read)
                if reason is not None:
                    tally.skipped[reason] += 1
                    continue
                if read.is_paired and not read.mate_is_unmapped:
                    if not read.is_read1:
                        continue
                    if read.reference_id != read.next_reference_id:
                        tally.skipped['discordant'] += 1
                        continue
                observed, status = hit_type_for_read(read)
                tally.add(observed, status)
    finally:
        for sf in handles:
            sf.close()

    lg.debug(f'Skipped records: {dict(tally.skipped)}')
    return tally
