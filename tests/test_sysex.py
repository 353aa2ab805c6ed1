import pytest

from midirouter.sysex import (
    Buf,
    BufferOverflow,
    Cap,
    Seq,
    Skip,
    SpuriousContinuation,
    SpuriousEnd,
    SysexBuffer,
    SysexCapture,
    SysexKind,
    SysexMatcher,
    SysexMessage,
    SysexSeq,
    Tag,
    Val,
)


def msg(kind, *data):
    return SysexMessage(kind, bytes(data))


def test_tag_size():
    assert Tag.CHANNEL.size() == 1
    assert Tag("dump", 26).size() == 26


def test_message_length_validated():
    with pytest.raises(ValueError):
        SysexMessage(SysexKind.BEGIN, b"\x01")
    with pytest.raises(ValueError):
        SysexMessage(SysexKind.CONT, b"\x01\x02")


def test_val_range_validated():
    with pytest.raises(ValueError):
        Val(256)


def test_seq_begin_end2():
    messages = list(SysexSeq([Seq(b"\x42\x30\x04"), Val(0x10)]))
    assert messages == [
        msg(SysexKind.BEGIN, 0x42, 0x30),
        msg(SysexKind.END2, 0x04, 0x10),
    ]


def test_seq_empty_tokens():
    assert list(SysexSeq([])) == [msg(SysexKind.EMPTY)]


def test_seq_single_byte():
    assert list(SysexSeq([Val(7)])) == [msg(SysexKind.SINGLE_BYTE, 7)]


def test_seq_two_bytes_then_plain_end():
    assert list(SysexSeq([Seq(b"\x01\x02")])) == [
        msg(SysexKind.BEGIN, 1, 2),
        msg(SysexKind.END),
    ]


def test_seq_skip_and_cap_are_not_sent():
    messages = list(SysexSeq([Val(1), Skip(4), Cap(Tag.VALUE_U7), Val(2)]))
    assert messages == [msg(SysexKind.BEGIN, 1, 2), msg(SysexKind.END)]


def test_seq_buf_is_sent():
    payload = bytes(range(10))
    buffer = SysexBuffer(64)
    for message in SysexSeq([Val(0x42), Buf(payload)]):
        buffer.capture(message)
    assert bytes(buffer) == b"\x42" + payload


@pytest.mark.parametrize("length", [3, 4, 5, 6, 7, 8, 20, 31])
def test_seq_round_trip_through_buffer(length):
    payload = bytes(range(length))
    messages = list(SysexSeq([Seq(payload)]))
    assert messages[0].kind is SysexKind.BEGIN
    assert messages[-1].kind in (SysexKind.END, SysexKind.END1, SysexKind.END2)
    assert all(m.kind is SysexKind.CONT for m in messages[1:-1])
    buffer = SysexBuffer(64)
    results = [buffer.capture(m) for m in messages]
    assert results[0] is SysexCapture.PENDING
    assert results[-1] is SysexCapture.CAPTURED
    assert bytes(buffer) == payload


def test_buffer_cont_is_captured():
    buffer = SysexBuffer(8)
    assert buffer.capture(msg(SysexKind.BEGIN, 1, 2)) is SysexCapture.PENDING
    assert buffer.capture(msg(SysexKind.CONT, 3, 4, 5)) is SysexCapture.CAPTURED
    assert bytes(buffer) == bytes([1, 2, 3, 4, 5])


def test_buffer_spurious_continuation():
    with pytest.raises(SpuriousContinuation):
        SysexBuffer(8).capture(msg(SysexKind.CONT, 1, 2, 3))


@pytest.mark.parametrize(
    "message",
    [msg(SysexKind.END), msg(SysexKind.END1, 1), msg(SysexKind.END2, 1, 2)],
)
def test_buffer_spurious_end(message):
    with pytest.raises(SpuriousEnd):
        SysexBuffer(8).capture(message)


def test_buffer_overflow_clears():
    buffer = SysexBuffer(4)
    buffer.capture(msg(SysexKind.BEGIN, 1, 2))
    with pytest.raises(BufferOverflow):
        buffer.capture(msg(SysexKind.CONT, 3, 4, 5))
    assert len(buffer) == 0


def test_buffer_overflow_on_begin():
    with pytest.raises(BufferOverflow):
        SysexBuffer(1).capture(msg(SysexKind.BEGIN, 1, 2))


def test_buffer_single_and_empty_are_captured():
    buffer = SysexBuffer(4)
    assert buffer.capture(msg(SysexKind.SINGLE_BYTE, 9)) is SysexCapture.CAPTURED
    assert bytes(buffer) == b"\x09"
    assert buffer.capture(msg(SysexKind.EMPTY)) is SysexCapture.CAPTURED
    assert bytes(buffer) == b""


def test_buffer_other_message_resets():
    buffer = SysexBuffer(8)
    buffer.capture(msg(SysexKind.BEGIN, 1, 2))
    assert buffer.capture(SysexMessage(SysexKind.OTHER)) is SysexCapture.PENDING
    assert len(buffer) == 0
    with pytest.raises(SpuriousEnd):
        buffer.capture(msg(SysexKind.END))


def test_matcher_captures_value():
    matcher = SysexMatcher([Seq(b"\x42\x30"), Cap(Tag.VALUE_U7)])
    results = [matcher.match_message(m) for m in SysexSeq([Seq(b"\x42\x30"), Val(0x11)])]
    assert results[:-1] == [None] * (len(results) - 1)
    assert results[-1] == {Tag.VALUE_U7: b"\x11"}


def test_matcher_captures_dump():
    dump_tag = Tag("dump", 6)
    payload = bytes(range(6))
    matcher = SysexMatcher([Val(0x42), Skip(2), Cap(dump_tag)])
    results = [matcher.match_message(m) for m in SysexSeq([Val(0x42), Val(0), Val(0), Buf(payload)])]
    assert results[-1] == {dump_tag: payload}


def test_matcher_rejects_mismatch():
    matcher = SysexMatcher([Seq(b"\x42\x30"), Cap(Tag.VALUE_U7)])
    results = [matcher.match_message(m) for m in SysexSeq([Seq(b"\x42\x31"), Val(0x11)])]
    assert results == [None] * len(results)


def test_matcher_rejects_longer_message():
    matcher = SysexMatcher([Seq(b"\x01\x02\x03")])
    results = [matcher.match_message(m) for m in SysexSeq([Seq(b"\x01\x02\x03\x04\x05")])]
    assert results == [None] * len(results)


def test_matcher_interrupted_by_other_message():
    matcher = SysexMatcher([Seq(b"\x01\x02\x03\x04")])
    messages = list(SysexSeq([Seq(b"\x01\x02\x03\x04")]))
    assert matcher.match_message(messages[0]) is None
    assert matcher.match_message(SysexMessage(SysexKind.OTHER)) is None
    assert [matcher.match_message(m) for m in messages[1:]] == [None] * (len(messages) - 1)


def test_matcher_repeats_after_match():
    matcher = SysexMatcher([Val(5), Cap(Tag.PARAM_ID)])
    for _ in range(2):
        results = [matcher.match_message(m) for m in SysexSeq([Val(5), Val(9)])]
        assert results[-1] == {Tag.PARAM_ID: b"\x09"}