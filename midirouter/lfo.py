"""Low-frequency oscillator used to modulate synth parameters."""

from __future__ import annotations

import enum
import math
import time
from typing import Callable, Optional

CPU_FREQ = 96_000_000


class Waveform(enum.IntEnum):
    """Shape of the LFO output."""

    TRIANGLE = 0
    SINE = 1
    SAW = 2
    REV_SAW = 3
    SQUARE = 4

    @classmethod
    def from_value(cls, value: int) -> Waveform:
        """Waveform for a raw value; unknown values give TRIANGLE."""
        try:
            return cls(value)
        except ValueError:
            return cls.TRIANGLE


def _default_clock() -> int:
    return time.monotonic_ns() // 1_000_000


def _div(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _mod(a: float, b: float) -> float:
    if b == 0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return math.nan
    return math.fmod(a, b)


def _sin(x: float) -> float:
    return math.sin(x) if math.isfinite(x) else math.nan


def _fract(x: float) -> float:
    return x - math.trunc(x) if math.isfinite(x) else math.nan


def _clamp_unit(x: float) -> float:
    if math.isnan(x):
        return 0.0
    return min(max(x, 0.0), 1.0)


class Lfo:
    """Oscillator whose phase is measured in milliseconds since creation."""

    def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
        self._clock = clock or _default_clock
        self._offset_ms = self._clock()
        self._period = 0.0
        self._amount = 0.0
        self.waveform = Waveform.SINE

    @property
    def amount(self) -> float:
        """Modulation depth between 0 and 1."""
        return self._amount

    @amount.setter
    def amount(self, value: float) -> None:
        self._amount = _clamp_unit(value)

    @property
    def rate_hz(self) -> float:
        return _div(CPU_FREQ, self._period)

    @rate_hz.setter
    def rate_hz(self, rate: float) -> None:
        self._period = _div(CPU_FREQ, rate)

    def mod_value(self, froot: float) -> float:
        """Root value plus the current modulation, clamped to [0, 1]."""
        elapsed = float(self._clock() - self._offset_ms)
        period = self._period
        amount = self._amount
        wave = self.waveform
        if wave is Waveform.TRIANGLE:
            timex = _mod(elapsed, period)
            half = period / 2.0
            modulation = _div(timex, half)
            if timex > half:
                modulation = 1.0 - modulation
            offset = (modulation - 0.5) * 2.0 * amount
        elif wave is Waveform.SINE:
            offset = _sin(_div(elapsed, period)) * amount
        elif wave is Waveform.SQUARE:
            timex = _mod(elapsed, period)
            half = period / 2.0
            offset = (1.0 if timex > half else -1.0) * amount
        elif wave is Waveform.SAW:
            timex = _div(elapsed, period)
            offset = ((1.0 - _fract(timex)) - 0.5) * 2.0 * amount
        else:
            timex = _div(elapsed, period)
            offset = (_fract(timex) - 0.5) * 2.0 * amount
        return _clamp_unit(froot + offset)