"""MIDI SysEx sequencing, capture and matching, with DW-6000, BeatStep and Evolver support."""

__version__ = "0.1.0"

__all__ = ["beatstep", "dw6000", "dw6_control", "evolver", "lfo", "sysex"]