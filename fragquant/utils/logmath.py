# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Log-space constants and helpers.

All probabilities and masses are stored as natural logarithms. ``LOG_0``
stands for probability zero and doubles as the "no mass" sentinel.
"""

import math

import numpy as np
from scipy.special import logsumexp

LOG_0 = -math.inf
LOG_1 = 0.0
LOG_ONEHALF = math.log(0.5)
# A priori probability of an orphaned end from a paired-end library
LOG_ORPHAN_PROB = math.log(0.1)


def log_sum(values):
    """log(sum(exp(v))) over *values*; ``LOG_0`` for an empty or all-zero input."""
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.size == 0 or np.all(arr == LOG_0):
        return LOG_0
    return float(logsumexp(arr))


def prob_to_log(p):
    """Convert a probability to log-space, mapping 0 to ``LOG_0``."""
    if p < 0 or p > 1:
        raise ValueError(f'Probability must be between 0 and 1, got {p}')
    return LOG_0 if p == 0 else math.log(p)

