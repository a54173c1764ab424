# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Exception types raised by the quantification core."""


class QuantificationError(Exception):
    """Base class for FragQuant errors."""


class UnclassifiableFragment(QuantificationError):
    """Strand/position data did not match any known library orientation."""

    def __init__(self, end1_start, end1_fwd, end2_start=None, end2_fwd=None):
        self.end1_start = end1_start
        self.end1_fwd = end1_fwd
        self.end2_start = end2_start
        self.end2_fwd = end2_fwd
        super().__init__(
            'Could not associate any known library type with fragment '
            f'(end1={end1_start}{"+" if end1_fwd else "-"}, '
            f'end2={end2_start}{"+" if end2_fwd else "-"})'
        )


class UnscorableFormat(QuantificationError):
    """No compatibility rule matched an observed/expected format pair."""

    def __init__(self, observed, expected):
        self.observed = observed
        self.expected = expected
        super().__init__(f'No compatibility rule for observed={observed!s} expected={expected!s}')


class InfeasibleProjectionInput(QuantificationError):
    """Box constraints of a cluster cannot hold the cluster's total count."""


class NormalizationError(QuantificationError):
    """Abundances cannot be normalized with the given inputs."""


class InconsistentHeaders(QuantificationError):
    """Alignment files disagree on reference names or lengths."""
