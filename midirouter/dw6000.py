"""Sysex messages and program dump layout for the Korg DW-6000 synthesizer."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, MutableSequence, Sequence

from .sysex import Buf, Cap, Seq, SysexMatcher, SysexSeq, Tag, Val

KORG = 0x42
DW_6000 = 0x04

ID_FORMAT = 0x40
DATA_FORMAT = 0x30

WRITE_OK = 0x21
WRITE_ERR = 0x22

ID_HEADER = bytes([KORG, ID_FORMAT])
DATA_HEADER = bytes([KORG, DATA_FORMAT, DW_6000])

DUMP_SIZE = 26
DUMP_TAG = Tag("dump", DUMP_SIZE)


def id_request_sysex() -> SysexSeq:
    """Device identity request."""
    return SysexSeq([Seq(ID_HEADER)])


def id_matcher() -> SysexMatcher:
    """Matcher for the device identity reply."""
    return SysexMatcher([Seq(ID_HEADER), Val(DW_6000)])


def write_program_sysex(program: int) -> SysexSeq:
    """Store the current edit buffer into a program slot."""
    return SysexSeq([Seq(DATA_HEADER), Val(0x11), Val(program)])


def load_program_sysex(dump: bytes) -> SysexSeq:
    """Send a full program dump to the edit buffer."""
    return SysexSeq([Seq(DATA_HEADER), Buf(bytes(dump))])


def set_parameter_sysex(param: int, value: int) -> SysexSeq:
    """Set one parameter byte of the edit buffer."""
    return SysexSeq([Seq(DATA_HEADER), Val(0x41), Val(param), Val(value)])


def write_matcher() -> SysexMatcher:
    """Matcher for the write acknowledgement."""
    return SysexMatcher([Seq(DATA_HEADER), Cap(Tag.VALUE_U7)])


def dump_request_sysex() -> SysexSeq:
    """Request a dump of the edit buffer."""
    return SysexSeq([Seq(DATA_HEADER), Val(0x10)])


def dump_matcher() -> SysexMatcher:
    """Matcher for a program dump; the bytes are captured under DUMP_TAG."""
    return SysexMatcher([Seq(DATA_HEADER), Val(0x40), Cap(DUMP_TAG)])


@dataclass(frozen=True)
class _Field:
    index: int
    high: int
    low: int

    @property
    def mask(self) -> int:
        return (1 << (self.high - self.low + 1)) - 1


class Dw6Param(enum.Enum):
    """Editable parameters of a DW-6000 program."""

    OSC1_WAVE = enum.auto()
    OSC1_LEVEL = enum.auto()
    OSC1_OCTAVE = enum.auto()
    OSC2_WAVE = enum.auto()
    OSC2_LEVEL = enum.auto()
    OSC2_OCTAVE = enum.auto()
    OSC2_DETUNE = enum.auto()
    INTERVAL = enum.auto()
    NOISE = enum.auto()
    CUTOFF = enum.auto()
    RESONANCE = enum.auto()
    VCF_INT = enum.auto()
    VCF_ATTACK = enum.auto()
    VCF_DECAY = enum.auto()
    VCF_BREAK = enum.auto()
    VCF_SLOPE = enum.auto()
    VCF_SUSTAIN = enum.auto()
    VCF_RELEASE = enum.auto()
    VCA_ATTACK = enum.auto()
    VCA_DECAY = enum.auto()
    VCA_BREAK = enum.auto()
    VCA_SLOPE = enum.auto()
    VCA_SUSTAIN = enum.auto()
    VCA_RELEASE = enum.auto()
    BEND_VCF = enum.auto()
    BEND_OSC = enum.auto()
    ASSIGN_MODE = enum.auto()
    PORTAMENTO = enum.auto()
    MG_FREQ = enum.auto()
    MG_DELAY = enum.auto()
    MG_OSC = enum.auto()
    MG_VCF = enum.auto()
    KBD_TRACK = enum.auto()
    POLARITY = enum.auto()
    CHORUS = enum.auto()

    def max_value(self) -> int:
        """Largest value the parameter accepts."""
        return _MAX_VALUES[self]

    def dump_index(self) -> int:
        """Offset of the byte holding this parameter in a program dump."""
        return _FIELDS[self].index

    def dump_value(self, dump: Sequence[int]) -> int:
        """The whole dump byte holding this parameter."""
        _check_dump(dump)
        return dump[_FIELDS[self].index]


P = Dw6Param

_FIELDS: Dict[Dw6Param, _Field] = {
    P.ASSIGN_MODE: _Field(0, 5, 4),
    P.BEND_OSC: _Field(0, 3, 0),
    P.PORTAMENTO: _Field(1, 4, 0),
    P.OSC1_LEVEL: _Field(2, 4, 0),
    P.OSC2_LEVEL: _Field(3, 4, 0),
    P.NOISE: _Field(4, 4, 0),
    P.CUTOFF: _Field(5, 5, 0),
    P.RESONANCE: _Field(6, 4, 0),
    P.VCF_INT: _Field(7, 4, 0),
    P.VCF_ATTACK: _Field(8, 4, 0),
    P.VCF_DECAY: _Field(9, 4, 0),
    P.VCF_BREAK: _Field(10, 4, 0),
    P.VCF_SLOPE: _Field(11, 4, 0),
    P.VCF_SUSTAIN: _Field(12, 4, 0),
    P.VCF_RELEASE: _Field(13, 4, 0),
    P.VCA_ATTACK: _Field(14, 4, 0),
    P.VCA_DECAY: _Field(15, 4, 0),
    P.VCA_BREAK: _Field(16, 4, 0),
    P.VCA_SLOPE: _Field(17, 4, 0),
    P.BEND_VCF: _Field(18, 5, 5),
    P.VCA_SUSTAIN: _Field(18, 4, 0),
    P.OSC1_OCTAVE: _Field(19, 6, 5),
    P.VCA_RELEASE: _Field(19, 4, 0),
    P.OSC2_OCTAVE: _Field(20, 6, 5),
    P.MG_FREQ: _Field(20, 4, 0),
    P.KBD_TRACK: _Field(21, 6, 5),
    P.MG_DELAY: _Field(21, 4, 0),
    P.POLARITY: _Field(22, 5, 5),
    P.MG_OSC: _Field(22, 4, 0),
    P.CHORUS: _Field(23, 5, 5),
    P.MG_VCF: _Field(23, 4, 0),
    P.OSC1_WAVE: _Field(24, 5, 3),
    P.OSC2_WAVE: _Field(24, 2, 0),
    P.INTERVAL: _Field(25, 5, 3),
    P.OSC2_DETUNE: _Field(25, 2, 0),
}

_MAX_VALUES: Dict[Dw6Param, int] = {
    **dict.fromkeys((P.OSC2_DETUNE, P.INTERVAL, P.OSC1_WAVE, P.OSC2_WAVE), 7),
    **dict.fromkeys((P.ASSIGN_MODE, P.KBD_TRACK, P.OSC1_OCTAVE, P.OSC2_OCTAVE), 3),
    P.CUTOFF: 63,
    **dict.fromkeys(
        (
            P.RESONANCE, P.PORTAMENTO, P.OSC2_LEVEL, P.OSC1_LEVEL, P.NOISE,
            P.MG_FREQ, P.MG_DELAY, P.MG_OSC, P.MG_VCF,
            P.VCF_INT, P.VCF_ATTACK, P.VCF_DECAY, P.VCF_BREAK, P.VCF_SLOPE,
            P.VCF_SUSTAIN, P.VCF_RELEASE,
            P.VCA_ATTACK, P.VCA_DECAY, P.VCA_BREAK, P.VCA_SLOPE,
            P.VCA_SUSTAIN, P.VCA_RELEASE,
        ),
        31,
    ),
    **dict.fromkeys((P.POLARITY, P.CHORUS, P.BEND_VCF), 1),
    P.BEND_OSC: 15,
}

del P


def _check_dump(dump: Sequence[int]) -> None:
    if len(dump) < DUMP_SIZE:
        raise ValueError(f"program dump needs {DUMP_SIZE} bytes, got {len(dump)}")


def get_param_value(param: Dw6Param, dump: Sequence[int]) -> int:
    """Read a parameter's value out of a program dump."""
    _check_dump(dump)
    field = _FIELDS[param]
    return (dump[field.index] >> field.low) & field.mask


def set_param_value(param: Dw6Param, value: int, dump: MutableSequence[int]) -> None:
    """Write a parameter's value into a program dump in place.

    Bits beyond the field's width are dropped; other fields sharing the
    byte are left untouched.
    """
    _check_dump(dump)
    field = _FIELDS[param]
    mask = field.mask << field.low
    current = dump[field.index]
    dump[field.index] = (current & ~mask & 0xFF) | ((value << field.low) & mask)