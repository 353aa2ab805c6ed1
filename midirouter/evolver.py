"""Sysex patterns for the Sequential Evolver synthesizer."""

from __future__ import annotations

from .sysex import Cap, Seq, SysexMatcher, Tag

SEQUENTIAL = 0x01
EVOLVER = 0x20
PROGRAM_PARAM = bytes([SEQUENTIAL, EVOLVER, 0x01, 0x01])


def program_parameter_matcher() -> SysexMatcher:
    """Matcher for program parameter change messages."""
    return SysexMatcher(
        [
            Seq(PROGRAM_PARAM),
            Cap(Tag.PARAM_ID),
            Cap(Tag.LSB_VALUE_U4),
            Cap(Tag.MSB_VALUE_U4),
        ]
    )