"""Drive a Korg DW-6000 from an Arturia BeatStep: knob pages, program
selection, toggles and a software LFO modulating one parameter."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .dw6000 import (
    DUMP_SIZE,
    DUMP_TAG,
    Dw6Param,
    dump_matcher,
    dump_request_sysex,
    get_param_value,
    set_param_value,
    set_parameter_sysex,
)
from .lfo import Lfo, Waveform
from .sysex import SysexMessage, SysexSeq

log = logging.getLogger(__name__)

SHORT_PRESS_MS = 250
LFO_INTERVAL_MS = 50
DUMP_INTERVAL_MS = 250
U7_MAX = 127
PROGRAM_CHANNEL = 1


class KnobPage(enum.IntEnum):
    """Which set of DW-6000 parameters the BeatStep knobs edit."""

    OSC = 0
    ENV = 1
    MOD = 2
    ARP = 3


class TogglePage(enum.IntEnum):
    """Pads that toggle an on/off setting."""

    ARP = 4
    LATCH = 5
    POLARITY = 6
    CHORUS = 7


class Lfo2Dest(enum.IntEnum):
    """Parameters the software LFO can modulate."""

    OSC1_WAVE = 0
    OSC1_LEVEL = 1
    OSC1_OCTAVE = 2
    OSC2_WAVE = 3
    OSC2_LEVEL = 4
    OSC2_OCTAVE = 5
    OSC2_DETUNE = 6
    INTERVAL = 7
    NOISE = 8
    CUTOFF = 9
    RESONANCE = 10
    VCF_INT = 11
    VCF_ATTACK = 12
    VCF_DECAY = 13
    VCF_BREAK = 14
    VCF_SLOPE = 15
    VCF_SUSTAIN = 16
    VCF_RELEASE = 17
    VCA_ATTACK = 18
    VCA_DECAY = 19
    VCA_BREAK = 20
    VCA_SLOPE = 21
    VCA_SUSTAIN = 22
    VCA_RELEASE = 23
    MG_FREQ = 24
    MG_DELAY = 25
    MG_OSC = 26
    MG_VCF = 27

    def to_param(self) -> Dw6Param:
        """The synth parameter this destination modulates."""
        return Dw6Param[self.name]


class CtlParam(enum.Enum):
    """Controller-side settings reachable from the knobs."""

    LFO2_RATE = "lfo2_rate"
    LFO2_WAVE = "lfo2_wave"
    LFO2_DEST = "lfo2_dest"
    LFO2_AMT = "lfo2_amt"


@dataclass(frozen=True)
class ProgramChange:
    """Program change message to send to the synth."""

    channel: int
    program: int

    def __post_init__(self) -> None:
        if not 0 <= self.program <= U7_MAX:
            raise ValueError(f"program out of range: {self.program}")


Outgoing = List[Union[SysexMessage, ProgramChange]]


def note_page(note: int) -> Optional[KnobPage]:
    """Knob page selected by a pad note, if any."""
    try:
        return KnobPage(note)
    except ValueError:
        return None


def toggle_page(note: int) -> Optional[TogglePage]:
    """Toggle assigned to a pad note, if any."""
    try:
        return TogglePage(note)
    except ValueError:
        return None


def note_bank(note: int) -> Optional[int]:
    """Bank selected by notes 8 to 15."""
    quotient, remainder = divmod(note, 8)
    return remainder if quotient == 1 else None


def note_prog(note: int) -> Optional[int]:
    """Program within the bank selected by notes 0 to 7."""
    quotient, remainder = divmod(note, 8)
    return remainder if quotient == 0 else None


_CTL_PARAMS: Dict[int, CtlParam] = {
    9: CtlParam.LFO2_RATE,
    10: CtlParam.LFO2_AMT,
    11: CtlParam.LFO2_WAVE,
    12: CtlParam.LFO2_DEST,
}


def cc_to_ctl_param(cc: int, page: KnobPage) -> Optional[CtlParam]:
    """Controller setting a control change edits on the given page."""
    if page is KnobPage.MOD:
        return _CTL_PARAMS.get(cc)
    return None


P = Dw6Param

_GLOBAL_CC: Dict[int, Dw6Param] = {
    # jog wheel is hardwired to cutoff
    17: P.CUTOFF,
    8: P.RESONANCE,
    18: P.POLARITY,
    19: P.CHORUS,
}

_PAGE_CC: Dict[KnobPage, Dict[int, Dw6Param]] = {
    KnobPage.OSC: {
        1: P.OSC1_LEVEL,
        2: P.OSC1_OCTAVE,
        3: P.OSC1_WAVE,
        4: P.NOISE,
        5: P.BEND_OSC,
        6: P.BEND_VCF,
        7: P.PORTAMENTO,
        9: P.OSC2_LEVEL,
        10: P.OSC2_OCTAVE,
        11: P.OSC2_WAVE,
        12: P.INTERVAL,
        13: P.OSC2_DETUNE,
    },
    KnobPage.ENV: {
        1: P.VCA_ATTACK,
        2: P.VCA_DECAY,
        3: P.VCA_BREAK,
        4: P.VCA_SUSTAIN,
        5: P.VCA_SLOPE,
        6: P.VCA_RELEASE,
        9: P.VCF_ATTACK,
        10: P.VCF_DECAY,
        11: P.VCF_BREAK,
        12: P.VCF_SUSTAIN,
        13: P.VCF_SLOPE,
        14: P.VCF_RELEASE,
        15: P.VCF_INT,
        16: P.KBD_TRACK,
    },
    KnobPage.MOD: {
        1: P.MG_FREQ,
        2: P.MG_DELAY,
        3: P.MG_OSC,
        4: P.MG_VCF,
        5: P.BEND_OSC,
        6: P.BEND_VCF,
        7: P.PORTAMENTO,
    },
    KnobPage.ARP: {},
}

del P


def cc_to_dw_param(cc: int, page: KnobPage) -> Optional[Dw6Param]:
    """Synth parameter a control change edits on the given page."""
    if cc in _GLOBAL_CC:
        return _GLOBAL_CC[cc]
    return _PAGE_CC[page].get(cc)


def param_set_sysex(param: Dw6Param, dump: Sequence[int]) -> SysexSeq:
    """Sysex that sends the dump byte holding a parameter to the synth."""
    return set_parameter_sysex(param.dump_index(), param.dump_value(dump))


def _default_clock() -> int:
    return time.monotonic_ns() // 1_000_000


class Dw6Controller:
    """State machine turning BeatStep input into DW-6000 messages.

    ``send`` is called with a list of outgoing messages for the synth;
    ``clock`` returns the current time in milliseconds.
    """

    def __init__(
        self,
        send: Callable[[Outgoing], None],
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._send = send
        self._clock = clock or _default_clock
        self.current_dump: Optional[bytearray] = None
        # values from the dump before they were modulated
        self.mod_dump: Dict[Dw6Param, int] = {}
        self.base_page = KnobPage.OSC
        # a temporary page released quickly becomes the base page
        self.temp_page: Optional[Tuple[KnobPage, int]] = None
        self.bank: Optional[int] = None
        self.lfo2 = Lfo(self._clock)
        self.lfo2_param: Optional[Lfo2Dest] = None
        self._dump_matcher = dump_matcher()

    def active_page(self) -> KnobPage:
        """The page knobs currently edit."""
        return self.temp_page[0] if self.temp_page is not None else self.base_page

    def _send_param(self, param: Dw6Param) -> None:
        if self.current_dump is not None:
            self._send(list(param_set_sysex(param, self.current_dump)))

    def _toggle_param(self, param: Dw6Param) -> None:
        dump = self.current_dump
        set_param_value(param, get_param_value(param, dump) ^ 1, dump)
        self._send_param(param)

    def _unset_modulated(self, param: Dw6Param) -> None:
        root = self.mod_dump.pop(param, None)
        if root is not None and self.current_dump is not None:
            set_param_value(param, root, self.current_dump)
            self._send_param(param)

    def note_on(self, note: int) -> None:
        """Handle a pad press."""
        bank = note_bank(note)
        prog = note_prog(note)
        if bank is not None:
            self.bank = bank
        elif prog is not None and self.bank is not None:
            self._send([ProgramChange(PROGRAM_CHANNEL, self.bank * 8 + prog)])
        page = note_page(note)
        if page is not None:
            self.temp_page = (page, self._clock())
        toggle = toggle_page(note)
        if toggle is not None and self.current_dump is not None:
            if toggle is TogglePage.POLARITY:
                self._toggle_param(Dw6Param.POLARITY)
            elif toggle is TogglePage.CHORUS:
                self._toggle_param(Dw6Param.CHORUS)

    def note_off(self, note: int) -> None:
        """Handle a pad release."""
        if self.bank == note_bank(note):
            self.bank = None
        if self.temp_page is None:
            return
        temp_page, press_start_ms = self.temp_page
        if note_page(note) == temp_page:
            if self._clock() - press_start_ms < SHORT_PRESS_MS:
                self.base_page = temp_page
            self.temp_page = None

    def control_change(self, cc: int, value: int) -> None:
        """Handle a knob turn."""
        page = self.active_page()
        param = cc_to_dw_param(cc, page)
        if param is not None:
            if param in self.mod_dump:
                self.mod_dump[param] = value
            elif self.current_dump is not None:
                set_param_value(param, value, self.current_dump)
                self._send_param(param)
            else:
                log.info("no dump yet")
            return
        ctl = cc_to_ctl_param(cc, page)
        if ctl is CtlParam.LFO2_RATE:
            base_rate = (value + 1.0) * 0.1
            self.lfo2.rate_hz = max(min(base_rate, 40.0), 0.03)
        elif ctl is CtlParam.LFO2_AMT:
            self.lfo2.amount = value / U7_MAX
        elif ctl is CtlParam.LFO2_WAVE:
            self.lfo2.waveform = Waveform.from_value(min(value, 3))
        elif ctl is CtlParam.LFO2_DEST:
            if self.lfo2_param is not None:
                self._unset_modulated(self.lfo2_param.to_param())
            if self.current_dump is not None:
                try:
                    new_dest = Lfo2Dest(value)
                except ValueError:
                    return
                target = new_dest.to_param()
                self.mod_dump[target] = get_param_value(target, self.current_dump)
                self.lfo2_param = new_dest

    def receive_dump(self, dump: Sequence[int]) -> None:
        """Store a program dump, keeping unmodulated values of modulated params."""
        if len(dump) < DUMP_SIZE:
            raise ValueError(f"program dump needs {DUMP_SIZE} bytes, got {len(dump)}")
        stored = bytearray(dump)
        for param, root in self.mod_dump.items():
            set_param_value(param, root, stored)
        self.current_dump = stored

    def receive_sysex(self, message: SysexMessage) -> bool:
        """Feed a message from the synth; True once a full dump was stored."""
        captured = self._dump_matcher.match_message(message)
        if captured is None or DUMP_TAG not in captured:
            return False
        self.receive_dump(captured[DUMP_TAG])
        return True

    def lfo_tick(self) -> Optional[int]:
        """Apply one LFO step; return the value sent, if any."""
        if self.lfo2_param is None:
            return None
        param = self.lfo2_param.to_param()
        root = self.mod_dump.get(param)
        if root is None:
            return None
        fmax = float(param.max_value())
        fmod = self.lfo2.mod_value(root / fmax) * fmax
        mod_value = int(min(max(fmod, 0.0), fmax))
        if self.current_dump is None:
            return None
        set_param_value(param, mod_value, self.current_dump)
        self._send_param(param)
        return mod_value

    def request_dump(self) -> None:
        """Ask the synth for its current program."""
        self._send(list(dump_request_sysex()))