# -*- coding: utf-8 -*-

# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Sequencing library format descriptors.

A :class:`LibraryFormat` describes both the protocol an experiment is
expected to follow and the layout actually observed for an aligned fragment.
Formats have a compact string code (``ISR``, ``IU``, ``SF`` ...)::

    I / O / M   paired ends facing toward / away / on the same strand
    U           unstranded
    SF / SR     stranded, read (1) from the forward / reverse strand
"""

from dataclasses import dataclass
from enum import Enum, IntEnum


class ReadType(IntEnum):
    SINGLE_END = 0
    PAIRED_END = 1


class ReadOrientation(IntEnum):
    SAME = 0
    AWAY = 1
    TOWARD = 2
    NONE = 3


class ReadStrandedness(IntEnum):
    SA = 0  # sense, antisense
    AS = 1  # antisense, sense
    S = 2
    A = 3
    U = 4


class OrphanStatus(Enum):
    """Which end(s) of a fragment aligned. Display only."""
    LeftOrphan = 'left orphan'
    RightOrphan = 'right orphan'
    Paired = 'paired'

    def __str__(self):
        return self.value


@dataclass(frozen=True, order=True)
class LibraryFormat:
    """Immutable {type, orientation, strandedness} triple."""
    type: ReadType
    orientation: ReadOrientation
    strandedness: ReadStrandedness

    def __post_init__(self):
        # Accept plain ints from callers; store enum members
        object.__setattr__(self, 'type', ReadType(self.type))
        object.__setattr__(self, 'orientation', ReadOrientation(self.orientation))
        object.__setattr__(self, 'strandedness', ReadStrandedness(self.strandedness))
        if self.type == ReadType.SINGLE_END and self.orientation != ReadOrientation.NONE:
            raise ValueError(f'Single-end formats have no orientation, got {self.orientation.name}')

    @property
    def format_id(self):
        return int(self.type) | (int(self.orientation) << 1) | (int(self.strandedness) << 3)

    @property
    def is_paired(self):
        return self.type == ReadType.PAIRED_END

    @classmethod
    def from_string(cls, code):
        """Parse a library type code such as ``ISR`` or ``U``."""
        key = code.strip().upper()
        if key not in _FORMATS_BY_CODE:
            raise ValueError(
                f'Unknown library type "{code}". '
                f'Allowed: {", ".join(sorted(_FORMATS_BY_CODE))}'
            )
        return _FORMATS_BY_CODE[key]

    def __str__(self):
        code = _CODES_BY_FORMAT.get(self)
        if code is not None:
            return code
        return f'{self.type.name}/{self.orientation.name}/{self.strandedness.name}'


_PE, _SE = ReadType.PAIRED_END, ReadType.SINGLE_END
_RO, _RS = ReadOrientation, ReadStrandedness

_FORMATS_BY_CODE = {
    'IU': LibraryFormat(_PE, _RO.TOWARD, _RS.U),
    'ISF': LibraryFormat(_PE, _RO.TOWARD, _RS.SA),
    'ISR': LibraryFormat(_PE, _RO.TOWARD, _RS.AS),
    'OU': LibraryFormat(_PE, _RO.AWAY, _RS.U),
    'OSF': LibraryFormat(_PE, _RO.AWAY, _RS.SA),
    'OSR': LibraryFormat(_PE, _RO.AWAY, _RS.AS),
    'MU': LibraryFormat(_PE, _RO.SAME, _RS.U),
    'MSF': LibraryFormat(_PE, _RO.SAME, _RS.S),
    'MSR': LibraryFormat(_PE, _RO.SAME, _RS.A),
    'U': LibraryFormat(_SE, _RO.NONE, _RS.U),
    'SF': LibraryFormat(_SE, _RO.NONE, _RS.S),
    'SR': LibraryFormat(_SE, _RO.NONE, _RS.A),
}
_CODES_BY_FORMAT = {v: k for k, v in _FORMATS_BY_CODE.items()}
