# This file is part of FragQuant.
#
# Licensed under MIT License.

"""TPM and FPKM from projected counts."""

import logging as lg
import math

import numpy as np
import pandas as pd

from .errors import NormalizationError

QUANT_COLUMNS = ['Name', 'Length', 'TPM', 'FPKM', 'NumReads']

_LOG_BILLION = math.log(1e9)
_MILLION = 1e6


def compute_abundances(transcripts, num_mapped_reads, no_effective_length_correction=False):
    """Compute per-transcript TPM and FPKM.

    The denominator of the transcript fractions is reduced over the whole
    transcript set before any per-transcript value is produced.

    Args:
        transcripts: Transcript arena (after projection).
        num_mapped_reads: Number of mapped fragments in the library.
        no_effective_length_correction: Use reference lengths instead of the
            cached effective lengths.

    Returns:
        pandas.DataFrame with columns ``Name, Length, TPM, FPKM, NumReads``
        in transcript order.
    """
    if num_mapped_reads <= 0:
        raise NormalizationError(f'Number of mapped reads must be positive, got {num_mapped_reads}')

    counts = np.array([t.projected_counts for t in transcripts], dtype=np.float64)
    log_lengths = np.array(
        [t.effective_length(no_effective_length_correction) for t in transcripts],
        dtype=np.float64,
    )
    lengths = np.exp(log_lengths)
    log_num_fragments = math.log(num_mapped_reads)

    # Pass 1
    npm = counts / num_mapped_reads
    tfrac_denom = float(np.sum(npm / lengths))

    # Pass 2
    fpkm_factor = np.exp(_LOG_BILLION - log_lengths - log_num_fragments)
    fpkm = np.where(counts > 0, fpkm_factor * counts, 0.0)
    if tfrac_denom > 0:
        tpm = (npm / lengths) / tfrac_denom * _MILLION
    else:
        lg.warning('No projected counts in any transcript; all TPM values are 0')
        tpm = np.zeros_like(counts)

    return pd.DataFrame({
        'Name': [t.name for t in transcripts],
        'Length': [t.ref_length for t in transcripts],
        'TPM': tpm,
        'FPKM': fpkm,
        'NumReads': counts,
    }, columns=QUANT_COLUMNS)
