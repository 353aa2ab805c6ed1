"""Sysex configuration messages for the Arturia BeatStep controller."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Union

from .sysex import Cap, Seq, SysexMatcher, SysexSeq, Tag, Val

ID_FORMAT = 0x40
DATA_FORMAT = 0x30

WRITE_OK = 0x21
WRITE_ERR = 0x22

ARTURIA = bytes([0x00, 0x20])
BEATSTEP = bytes([0x6B, 0x7F])

SET_HEADER = bytes([0x42, 0x02, 0x00])
GET_HEADER = bytes([0x42, 0x01, 0x00])

MODE = 0x01
MIDI_CHANNEL = 0x50
CURVE = 0x41
STEP_NOTE = 0x52
STEP_ENABLED = 0x53
SEQ = 0x50


class MMC(enum.IntEnum):
    """MIDI machine control commands a pad can send."""

    STOP = 1
    PLAY = 2
    DEFERRED_PLAY = 3
    FAST_FORWARD = 4
    REWIND = 5
    RECORD_STROBE = 6
    RECORD_EXIT = 7
    RECORD_READY = 8
    PAUSE = 9
    EJECT = 10
    CHASE = 11
    IN_LIST_RESET = 12


class SwitchMode(enum.IntEnum):
    TOGGLE = 0
    GATE = 1


class PadMode(enum.IntEnum):
    OFF = 0
    MMC = 7
    CC = 8
    CC_SILENT = 1
    NOTE = 9
    PROGRAM_CHANGE = 0x0B


class KnobMode(enum.IntEnum):
    OFF = 0
    CC = 1
    NRPN = 4


class Scale(enum.IntEnum):
    CHROMATIC = 0
    MAJOR = 1
    MINOR = 2
    DORIAN = 3
    MIXOLYDIAN = 4
    HARMONIC_MINOR = 5
    BLUES = 6
    USER = 7


class PlayMode(enum.IntEnum):
    FORWARD = 0
    REVERSE = 1
    ALTERNATING = 2
    RANDOM = 3


class StepSize(enum.IntEnum):
    QUARTER = 0
    EIGHTH = 1
    SIXTEENTH = 2
    THIRTY_SECOND = 3


class Legato(enum.IntEnum):
    OFF = 0
    ON = 1
    RESET = 2


class Behavior(enum.IntEnum):
    ABSOLUTE = 0
    RELATIVE_CENTERED_64 = 1
    RELATIVE_CENTERED_0 = 2
    RELATIVE_CENTERED_16 = 3


class Granularity(enum.IntEnum):
    COARSE = 0x06
    FINE = 0x26


class NRPNType(enum.IntEnum):
    NRPN = 0
    RPN = 1


class Acceleration(enum.IntEnum):
    SLOW = 0
    MEDIUM = 1
    FAST = 2


class VelocityCurve(enum.IntEnum):
    LINEAR = 0
    LOGARITHMIC = 1
    EXPONENTIAL = 2
    FULL = 3


class SeqGlobal(enum.IntEnum):
    """Sequencer-wide settings, addressed under the SEQ parameter."""

    CHANNEL = 1
    TRANSPOSE = 2
    SCALE = 3
    MODE = 4
    STEP_SIZE = 5
    PATTERN_LENGTH = 6
    SWING = 7
    GATE = 8
    LEGATO = 9


@dataclass(frozen=True)
class Pad:
    """One of the pressure-sensitive pads, numbered from 0."""

    number: int

    def control_code(self) -> int:
        return 0x70 + self.number


class PadButton(enum.Enum):
    """Transport and function buttons configurable like pads."""

    START = 0x70
    STOP = 0x58
    CTRL_SEQ = 0x5A
    EXT_SYNC = 0x5B
    RECALL = 0x5C
    STORE = 0x5D
    SHIFT = 0x5E
    CHAN = 0x5F

    def control_code(self) -> int:
        return self.value


@dataclass(frozen=True)
class Knob:
    """One of the rotary encoders, numbered from 0."""

    number: int

    def control_code(self) -> int:
        return 0x20 + self.number


@dataclass(frozen=True)
class JogWheel:
    """The large rotary encoder."""

    def control_code(self) -> int:
        return 0x30


PadControl = Union[Pad, PadButton]
Encoder = Union[Knob, JogWheel]


@dataclass(frozen=True)
class PadOff:
    pad: PadControl


@dataclass(frozen=True)
class PadMMC:
    pad: PadControl
    mmc: MMC


@dataclass(frozen=True)
class PadCC:
    pad: PadControl
    channel: int
    control: int
    on: int
    off: int
    switch: SwitchMode


@dataclass(frozen=True)
class PadCCSilent:
    pad: PadControl
    channel: int
    control: int
    on: int
    off: int
    switch: SwitchMode


@dataclass(frozen=True)
class PadNote:
    pad: PadControl
    channel: int
    note: int
    switch: SwitchMode


@dataclass(frozen=True)
class PadProgramChange:
    pad: PadControl
    channel: int
    program: int
    bank_lsb: int
    bank_msb: int


@dataclass(frozen=True)
class KnobOff:
    encoder: Encoder


@dataclass(frozen=True)
class KnobCC:
    encoder: Encoder
    channel: int
    control: int
    minimum: int
    maximum: int
    behavior: Behavior


@dataclass(frozen=True)
class KnobNRPN:
    encoder: Encoder
    channel: int
    granularity: Granularity
    bank_lsb: int
    bank_msb: int
    nrpn_type: NRPNType


@dataclass(frozen=True)
class GlobalMidiChannel:
    channel: int


@dataclass(frozen=True)
class CVGateChannel:
    channel: int


@dataclass(frozen=True)
class KnobAcceleration:
    acceleration: Acceleration


@dataclass(frozen=True)
class PadVelocityCurve:
    curve: VelocityCurve


@dataclass(frozen=True)
class StepNote:
    step: int
    note: int


@dataclass(frozen=True)
class StepEnabled:
    step: int
    enabled: bool


@dataclass(frozen=True)
class SeqChannel:
    channel: int


@dataclass(frozen=True)
class SeqTranspose:
    """Root note; C5 = 0x3C is untransposed."""

    note: int


@dataclass(frozen=True)
class SeqScale:
    scale: Scale


@dataclass(frozen=True)
class SeqMode:
    mode: PlayMode


@dataclass(frozen=True)
class SeqStepSize:
    size: StepSize


@dataclass(frozen=True)
class SeqPatternLength:
    length: int


@dataclass(frozen=True)
class SeqSwing:
    value: int


@dataclass(frozen=True)
class SeqGate:
    value: int


@dataclass(frozen=True)
class SeqLegato:
    legato: Legato


Param = Union[
    PadOff, PadMMC, PadCC, PadCCSilent, PadNote, PadProgramChange,
    KnobOff, KnobCC, KnobNRPN,
    GlobalMidiChannel, CVGateChannel, KnobAcceleration, PadVelocityCurve,
    StepNote, StepEnabled, SeqChannel, SeqTranspose, SeqScale, SeqMode,
    SeqStepSize, SeqPatternLength, SeqSwing, SeqGate, SeqLegato,
]


class NoModeForParameter(Exception):
    """The parameter does not select a pad or knob mode."""


def mode_code(param: Param) -> int:
    """Mode byte selected by a pad or knob parameter."""
    match param:
        case PadOff() | KnobOff():
            return 0
        case PadMMC():
            return 7
        case PadCC():
            return 8
        case PadCCSilent() | KnobCC():
            return 1
        case PadNote():
            return 9
        case PadProgramChange():
            return 0x0B
        case KnobNRPN():
            return 4
    raise NoModeForParameter(type(param).__name__)


def _parameter_set(param: int, control: int, value: int) -> SysexSeq:
    return SysexSeq(
        [Seq(ARTURIA), Seq(BEATSTEP), Seq(SET_HEADER), Val(param), Val(control), Val(int(value))]
    )


def _settings(ccode: int, mode: int, *values: int) -> List[SysexSeq]:
    """Mode selection followed by settings 0x02, 0x03, ... for one control."""
    return [_parameter_set(MODE, ccode, mode)] + [
        _parameter_set(slot, ccode, value) for slot, value in enumerate(values, start=2)
    ]


def beatstep_set(param: Param) -> List[SysexSeq]:
    """Sysex messages that apply a configuration parameter."""
    match param:
        case PadOff(pad):
            return _settings(pad.control_code(), PadMode.OFF)
        case PadMMC(pad, mmc):
            ccode = pad.control_code()
            return [
                _parameter_set(MODE, ccode, PadMode.MMC),
                _parameter_set(0x03, ccode, mmc),
            ]
        case PadCC(pad, channel, control, on, off, switch):
            return _settings(pad.control_code(), PadMode.CC, channel, control, on, off, switch)
        case PadCCSilent(pad, channel, control, on, off, switch):
            return _settings(
                pad.control_code(), PadMode.CC_SILENT, channel, control, on, off, switch
            )
        case PadNote(pad, channel, note, switch):
            ccode = pad.control_code()
            return [
                _parameter_set(MODE, ccode, PadMode.NOTE),
                _parameter_set(0x02, ccode, channel),
                _parameter_set(0x03, ccode, note),
                _parameter_set(0x06, ccode, switch),
            ]
        case PadProgramChange(pad, channel, program, lsb, msb):
            return _settings(pad.control_code(), PadMode.PROGRAM_CHANGE, channel, program, lsb, msb)
        case KnobOff(encoder):
            return _settings(encoder.control_code(), KnobMode.OFF)
        case KnobCC(encoder, channel, control, minimum, maximum, behavior):
            return _settings(
                encoder.control_code(), KnobMode.CC, channel, control, minimum, maximum, behavior
            )
        case KnobNRPN(encoder, channel, granularity, lsb, msb, nrpn_type):
            return _settings(
                encoder.control_code(), KnobMode.NRPN, channel, granularity, lsb, msb, nrpn_type
            )
        case GlobalMidiChannel(channel):
            return [_parameter_set(MIDI_CHANNEL, 0x0B, channel)]
        case CVGateChannel(channel):
            return [_parameter_set(MIDI_CHANNEL, 0x0C, channel)]
        case KnobAcceleration(acceleration):
            return [_parameter_set(CURVE, 0x04, acceleration)]
        case PadVelocityCurve(curve):
            return [_parameter_set(CURVE, 0x03, curve)]
        case StepNote(step, note):
            return [_parameter_set(STEP_NOTE, step, note)]
        case StepEnabled(step, enabled):
            return [_parameter_set(STEP_ENABLED, step, 1 if enabled else 0)]
        case SeqChannel(channel):
            return [_parameter_set(SEQ, SeqGlobal.CHANNEL, channel)]
        case SeqTranspose(note):
            return [_parameter_set(SEQ, SeqGlobal.TRANSPOSE, note)]
        case SeqScale(scale):
            return [_parameter_set(SEQ, SeqGlobal.SCALE, scale)]
        case SeqMode(mode):
            return [_parameter_set(SEQ, SeqGlobal.MODE, mode)]
        case SeqStepSize(size):
            return [_parameter_set(SEQ, SeqGlobal.STEP_SIZE, size)]
        case SeqPatternLength(length):
            return [_parameter_set(SEQ, SeqGlobal.PATTERN_LENGTH, length)]
        case SeqSwing(value):
            return [_parameter_set(SEQ, SeqGlobal.SWING, value)]
        case SeqGate(value):
            return [_parameter_set(SEQ, SeqGlobal.GATE, value)]
        case SeqLegato(legato):
            return [_parameter_set(SEQ, SeqGlobal.LEGATO, legato)]
    raise TypeError(f"not a BeatStep parameter: {param!r}")


def beatstep_control_get(param: int, control: int) -> SysexSeq:
    """Request the current value of a parameter for a control."""
    return SysexSeq(
        [Seq(ARTURIA), Seq(BEATSTEP), Seq(GET_HEADER), Val(param), Val(control)]
    )


def parameter_match() -> SysexMatcher:
    """Matcher for parameter value replies; three bytes under Tag.VALUE_U7."""
    return SysexMatcher(
        [Seq(ARTURIA), Seq(BEATSTEP), Cap(Tag.VALUE_U7), Cap(Tag.VALUE_U7), Cap(Tag.VALUE_U7)]
    )