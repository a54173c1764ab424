# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Derive the observed library format of an aligned fragment."""

from .errors import UnclassifiableFragment
from .libformat import LibraryFormat, ReadOrientation, ReadStrandedness, ReadType

_PE, _SE = ReadType.PAIRED_END, ReadType.SINGLE_END


def hit_type_paired(end1_start, end1_fwd, end2_start, end2_fwd):
    """Classify a fragment with both ends aligned.

    Args:
        end1_start: Leftmost reference position of end 1.
        end1_fwd: True if end 1 aligned to the forward strand.
        end2_start: Leftmost reference position of end 2.
        end2_fwd: True if end 2 aligned to the forward strand.

    Returns:
        The observed :class:`LibraryFormat`.

    Raises:
        UnclassifiableFragment: strand flags match no known layout.
    """
    if end1_fwd != end2_fwd:
        # Opposite strands: inward (ISF/ISR) or outward (OSF/OSR) facing
        if end1_fwd:
            if end1_start <= end2_start:
                return LibraryFormat(_PE, ReadOrientation.TOWARD, ReadStrandedness.SA)
            return LibraryFormat(_PE, ReadOrientation.AWAY, ReadStrandedness.SA)
        if end2_fwd:
            if end2_start <= end1_start:
                return LibraryFormat(_PE, ReadOrientation.TOWARD, ReadStrandedness.AS)
            return LibraryFormat(_PE, ReadOrientation.AWAY, ReadStrandedness.AS)
    else:
        if end1_fwd:
            return LibraryFormat(_PE, ReadOrientation.SAME, ReadStrandedness.S)
        return LibraryFormat(_PE, ReadOrientation.SAME, ReadStrandedness.A)

    raise UnclassifiableFragment(end1_start, end1_fwd, end2_start, end2_fwd)


def hit_type_single(start, is_forward):
    """Classify a single aligned end (single-end read or orphan)."""
    if is_forward:
        return LibraryFormat(_SE, ReadOrientation.NONE, ReadStrandedness.S)
    return LibraryFormat(_SE, ReadOrientation.NONE, ReadStrandedness.A)


def hit_type(*args):
    """Dispatch on arity: ``(start, fwd)`` or ``(start1, fwd1, start2, fwd2)``."""
    if len(args) == 2:
        return hit_type_single(*args)
    if len(args) == 4:
        return hit_type_paired(*args)
    raise TypeError(f'hit_type() takes 2 or 4 arguments ({len(args)} given)')
