import pytest

from midirouter.dw6000 import (
    DATA_HEADER,
    DUMP_SIZE,
    DUMP_TAG,
    ID_HEADER,
    Dw6Param,
    dump_matcher,
    dump_request_sysex,
    get_param_value,
    id_matcher,
    id_request_sysex,
    load_program_sysex,
    set_param_value,
    set_parameter_sysex,
    write_matcher,
    write_program_sysex,
)
from midirouter.sysex import SysexKind, SysexMessage, Tag


def _flatten(seq):
    return b"".join(message.data for message in seq)


def _feed(matcher, seq):
    results = [matcher.match_message(message) for message in seq]
    return results[-1]


@pytest.mark.parametrize("param", list(Dw6Param))
def test_set_get_round_trip_max(param):
    dump = bytearray(DUMP_SIZE)
    set_param_value(param, param.max_value(), dump)
    assert get_param_value(param, dump) == param.max_value()


@pytest.mark.parametrize("param", list(Dw6Param))
def test_value_above_max_is_masked(param):
    dump = bytearray(DUMP_SIZE)
    set_param_value(param, param.max_value() + 1, dump)
    assert get_param_value(param, dump) == 0


@pytest.mark.parametrize("param", list(Dw6Param))
def test_set_only_touches_own_byte_and_field(param):
    dump = bytearray(DUMP_SIZE)
    set_param_value(param, param.max_value(), dump)
    touched = [i for i, b in enumerate(dump) if b]
    assert touched == [param.dump_index()]
    others = [
        p for p in Dw6Param
        if p is not param and p.dump_index() == param.dump_index()
    ]
    for other in others:
        assert get_param_value(other, dump) == 0


def test_shared_byte_fields_are_independent():
    dump = bytearray(DUMP_SIZE)
    set_param_value(Dw6Param.OSC1_WAVE, 5, dump)
    set_param_value(Dw6Param.OSC2_WAVE, 2, dump)
    assert get_param_value(Dw6Param.OSC1_WAVE, dump) == 5
    assert get_param_value(Dw6Param.OSC2_WAVE, dump) == 2
    set_param_value(Dw6Param.OSC2_WAVE, 0, dump)
    assert get_param_value(Dw6Param.OSC1_WAVE, dump) == 5


def test_dump_value_is_whole_byte():
    dump = bytearray(DUMP_SIZE)
    dump[Dw6Param.CHORUS.dump_index()] = 0x3F
    assert Dw6Param.CHORUS.dump_value(dump) == 0x3F
    assert Dw6Param.MG_VCF.dump_value(dump) == 0x3F
    assert get_param_value(Dw6Param.CHORUS, dump) == 1
    assert get_param_value(Dw6Param.MG_VCF, dump) == 31


def test_dump_indices_cover_whole_dump():
    dump = bytearray(DUMP_SIZE)
    for param in Dw6Param:
        set_param_value(param, param.max_value(), dump)
    assert all(byte != 0 for byte in dump)
    assert Dw6Param.ASSIGN_MODE.dump_index() == 0
    assert Dw6Param.CUTOFF.dump_index() == 5
    assert Dw6Param.INTERVAL.dump_index() == DUMP_SIZE - 1


def test_short_dump_rejected():
    with pytest.raises(ValueError):
        get_param_value(Dw6Param.CUTOFF, bytes(DUMP_SIZE - 1))
    with pytest.raises(ValueError):
        set_param_value(Dw6Param.CUTOFF, 1, bytearray(3))


def test_set_parameter_sysex_wire_bytes():
    messages = list(set_parameter_sysex(5, 0x20))
    assert [m.kind for m in messages] == [SysexKind.BEGIN, SysexKind.CONT, SysexKind.END1]
    assert _flatten(messages) == DATA_HEADER + bytes([0x41, 5, 0x20])


def test_dump_request_sysex_wire_bytes():
    messages = list(dump_request_sysex())
    assert messages == [
        SysexMessage(SysexKind.BEGIN, bytes([0x42, 0x30])),
        SysexMessage(SysexKind.END2, bytes([0x04, 0x10])),
    ]


def test_id_request_sysex_wire_bytes():
    messages = list(id_request_sysex())
    assert messages == [
        SysexMessage(SysexKind.BEGIN, ID_HEADER),
        SysexMessage(SysexKind.END),
    ]


def test_write_program_sysex_bytes():
    assert _flatten(write_program_sysex(7)) == DATA_HEADER + bytes([0x11, 7])


def test_load_program_round_trips_through_dump_matcher():
    dump = bytes(range(DUMP_SIZE))
    seq = list(load_program_sysex(bytes([0x40]) + dump))
    assert _flatten(seq) == DATA_HEADER + bytes([0x40]) + dump
    captured = _feed(dump_matcher(), seq)
    assert captured == {DUMP_TAG: dump}


def test_dump_matcher_rejects_other_command():
    seq = list(load_program_sysex(bytes([0x41]) + bytes(DUMP_SIZE)))
    assert _feed(dump_matcher(), seq) is None


def test_id_matcher():
    seq = list(load_program_sysex(b""))
    assert _feed(id_matcher(), [SysexMessage(SysexKind.BEGIN, ID_HEADER),
                                SysexMessage(SysexKind.END1, bytes([0x04]))]) == {}
    assert _feed(id_matcher(), seq) is None


def test_write_matcher_captures_value():
    messages = [
        SysexMessage(SysexKind.BEGIN, DATA_HEADER[:2]),
        SysexMessage(SysexKind.END2, bytes([DATA_HEADER[2], 0x21])),
    ]
    assert _feed(write_matcher(), messages) == {Tag.VALUE_U7: bytes([0x21])}