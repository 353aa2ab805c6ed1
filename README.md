# midirouter

Building and recognising MIDI System Exclusive (SysEx) traffic, and driving a
Korg DW-6000 synthesizer from an Arturia BeatStep controller.

## Modules

- `midirouter.sysex`
  - `SysexMessage` / `SysexKind`: one message of a SysEx sequence
    (`BEGIN`, `CONT`, `END`, `END1`, `END2`, `SINGLE_BYTE`, `EMPTY`, or `OTHER`
    for anything that is not SysEx), carrying its data bytes.
  - `SysexSeq`: an iterator that turns a list of tokens into `SysexMessage`s.
  - `SysexBuffer(capacity)`: gathers incoming SysEx bytes; `capture()` returns
    `SysexCapture.CAPTURED` or `SysexCapture.PENDING` and raises
    `BufferOverflow`, `SpuriousContinuation` or `SpuriousEnd` (all
    `SysexError`) on bad input.
  - `SysexMatcher(pattern)`: `match_message()` returns a dict of `Tag` to
    captured bytes when a complete SysEx message matches the pattern, else `None`.
  - Tokens: `Seq` (fixed bytes), `Val` (one fixed byte), `Buf` (payload sent
    as-is, ignored when matching), `Skip` (ignored bytes), `Cap` (bytes captured
    under a `Tag`).
- `midirouter.lfo`: `Lfo` with `amount`, `rate_hz`, `waveform` and
  `mod_value(froot)`, which adds the current modulation to a root value and
  clamps the result to 0..1. `Waveform` has `TRIANGLE`, `SINE`, `SAW`,
  `REV_SAW` and `SQUARE`; `Waveform.from_value()` falls back to `TRIANGLE`.
  The clock is injectable and counts milliseconds.
- `midirouter.dw6000`: the 26-byte program dump and its packed fields
  (`Dw6Param`, `get_param_value`, `set_param_value`), plus builders for the
  messages the synth understands (`id_request_sysex`, `write_program_sysex`,
  `load_program_sysex`, `set_parameter_sysex`, `dump_request_sysex`) and
  matchers for its replies (`id_matcher`, `write_matcher`, `dump_matcher`).
- `midirouter.beatstep`: pad, knob, global and sequencer settings as
  dataclasses (`PadNote`, `KnobCC`, `SeqScale`, ...), turned into SysEx by
  `beatstep_set()`; `beatstep_control_get()` builds a value request and
  `parameter_match()` a matcher for the reply. `mode_code()` raises
  `NoModeForParameter` for settings that select no pad or knob mode.
- `midirouter.evolver`: `program_parameter_matcher()` for Sequential Evolver
  program parameter messages.
- `midirouter.dw6_control`: `Dw6Controller`, which maps BeatStep pads and
  knobs onto DW-6000 parameters, knob pages, program changes and toggles, and
  modulates one parameter with a software LFO.

## Example

```python
from midirouter.dw6000 import DATA_HEADER, Dw6Param, get_param_value, set_param_value
from midirouter.dw6_control import Dw6Controller
from midirouter.sysex import Buf, Seq, SysexSeq, Val

dump = bytearray(26)
set_param_value(Dw6Param.CUTOFF, 40, dump)
assert get_param_value(Dw6Param.CUTOFF, dump) == 40

sent = []
controller = Dw6Controller(send=sent.extend)

# A dump reply from the synth, fed message by message.
reply = SysexSeq([Seq(DATA_HEADER), Val(0x40), Buf(dump)])
stored = [controller.receive_sysex(message) for message in reply]
assert stored[-1] is True

controller.control_change(17, 20)  # jog wheel edits cutoff
assert get_param_value(Dw6Param.CUTOFF, controller.current_dump) == 20
```

`Dw6Controller(send, clock=None)` calls `send` with a list of outgoing
messages (`SysexMessage` objects or `ProgramChange`), and `clock` returns the
time in milliseconds.

## What it does not do

The package does no MIDI input or output of its own: there are no port,
serial or USB drivers and no command-line program. Messages are handed to and
taken from your code. Nothing runs on a timer either: call
`Dw6Controller.lfo_tick()` and `Dw6Controller.request_dump()` yourself, for
example every `LFO_INTERVAL_MS` (50) and `DUMP_INTERVAL_MS` (250)
milliseconds.

## Tests

```
pip install -e .[test]
pytest
```