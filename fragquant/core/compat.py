# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Compatibility of an observed library format with the expected protocol.

The score is a hand-specified log-likelihood table, evaluated top to bottom.
The first rule whose predicate holds supplies the score:

====  ==========================================  ===========================
rule  condition                                   log-probability
====  ==========================================  ===========================
1a    orphan of a paired library, expected        ``LOG_1``
      strandedness in {U, AS, SA}
1b    orphan, strandedness matches                ``LOG_ORPHAN_PROB``
1c    orphan, strandedness differs                ``incompat_prior``
2     type or orientation differs                 ``incompat_prior``
3a    expected unstranded                         ``LOG_ONEHALF``
3b    strandedness matches                        ``LOG_1``
3c    strandedness differs                        ``incompat_prior``
====  ==========================================  ===========================
"""

import logging as lg

from ..utils.logmath import LOG_0, LOG_1, LOG_ONEHALF, LOG_ORPHAN_PROB
from .errors import UnscorableFormat
from .libformat import ReadStrandedness, ReadType

_NO_ORIENTATION_INFO = frozenset([ReadStrandedness.U, ReadStrandedness.AS, ReadStrandedness.SA])


def _is_orphan(obs, exp):
    return exp.type == ReadType.PAIRED_END and obs.type == ReadType.SINGLE_END


def _structure_differs(obs, exp):
    return obs.type != exp.type or obs.orientation != exp.orientation


def _strand_matches(obs, exp):
    return obs.strandedness == exp.strandedness


# (name, predicate(observed, expected), score(incompat_prior))
COMPAT_RULES = (
    ('orphan_uninformative',
     lambda o, e: _is_orphan(o, e) and e.strandedness in _NO_ORIENTATION_INFO,
     lambda p: LOG_1),
    ('orphan_strand_match',
     lambda o, e: _is_orphan(o, e) and _strand_matches(o, e),
     lambda p: LOG_ORPHAN_PROB),
    ('orphan_strand_mismatch',
     lambda o, e: _is_orphan(o, e),
     lambda p: p),
    ('structure_mismatch',
     _structure_differs,
     lambda p: p),
    ('unstranded',
     lambda o, e: e.strandedness == ReadStrandedness.U,
     lambda p: LOG_ONEHALF),
    ('strand_match',
     _strand_matches,
     lambda p: LOG_1),
    ('strand_mismatch',
     lambda o, e: not _strand_matches(o, e),
     lambda p: p),
)


def match_rule(observed, expected, rules=COMPAT_RULES):
    """Return the first rule applying to *observed* vs *expected*.

    Raises:
        UnscorableFormat: no rule applies.
    """
    for rule in rules:
        if rule[1](observed, expected):
            return rule
    raise UnscorableFormat(observed, expected)


def log_align_format_prob(observed, expected, incompat_prior, rules=COMPAT_RULES):
    """Log-probability of seeing *observed* under the *expected* protocol.

    Args:
        observed: :class:`LibraryFormat` derived from the alignment.
        expected: :class:`LibraryFormat` of the experiment.
        incompat_prior: Log-probability assigned to incompatible alignments.

    Returns:
        float log-probability; ``LOG_0`` if the pair cannot be scored.
    """
    try:
        _name, _pred, score = match_rule(observed, expected, rules)
    except UnscorableFormat as exc:
        lg.warning(str(exc))
        return LOG_0
    return score(incompat_prior)


def is_compatible(observed, expected, incompat_prior):
    """True if *observed* scores strictly better than an incompatible alignment."""
    return log_align_format_prob(observed, expected, incompat_prior) > incompat_prior
