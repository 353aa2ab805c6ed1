"""System-exclusive message capture, generation and pattern matching."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterable, Iterator, List, Optional, Union


@dataclass(frozen=True, order=True)
class Tag:
    """Label for a span of bytes captured out of a sysex message."""

    name: str
    length: int = 1

    CHANNEL: ClassVar[Tag]
    VELOCITY: ClassVar[Tag]
    DEVICE_ID: ClassVar[Tag]
    PARAM_ID: ClassVar[Tag]
    CONTROL_ID: ClassVar[Tag]
    VALUE_U7: ClassVar[Tag]
    MSB_VALUE_U4: ClassVar[Tag]
    LSB_VALUE_U4: ClassVar[Tag]

    def size(self) -> int:
        """Number of bytes the tag captures."""
        return self.length


Tag.CHANNEL = Tag("channel")
Tag.VELOCITY = Tag("velocity")
Tag.DEVICE_ID = Tag("device_id")
Tag.PARAM_ID = Tag("param_id")
Tag.CONTROL_ID = Tag("control_id")
Tag.VALUE_U7 = Tag("value_u7")
Tag.MSB_VALUE_U4 = Tag("msb_value_u4")
Tag.LSB_VALUE_U4 = Tag("lsb_value_u4")


class SysexKind(enum.Enum):
    """Position of a message within a sysex sequence."""

    BEGIN = "begin"
    SINGLE_BYTE = "single_byte"
    EMPTY = "empty"
    CONT = "cont"
    END = "end"
    END1 = "end1"
    END2 = "end2"
    OTHER = "other"


_DATA_LENGTH = {
    SysexKind.BEGIN: 2,
    SysexKind.SINGLE_BYTE: 1,
    SysexKind.EMPTY: 0,
    SysexKind.CONT: 3,
    SysexKind.END: 0,
    SysexKind.END1: 1,
    SysexKind.END2: 2,
}


@dataclass(frozen=True)
class SysexMessage:
    """One MIDI message; sysex kinds carry their data bytes."""

    kind: SysexKind
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        expected = _DATA_LENGTH.get(self.kind)
        if expected is not None and len(self.data) != expected:
            raise ValueError(
                f"{self.kind.name} carries {expected} bytes, got {len(self.data)}"
            )


class SysexCapture(enum.Enum):
    """Outcome of feeding a message to a capture buffer."""

    CAPTURED = "captured"
    PENDING = "pending"


class SysexError(Exception):
    """Base error for sysex capture."""


class BufferOverflow(SysexError):
    """The sysex message does not fit in the buffer."""


class SpuriousContinuation(SysexError):
    """A continuation arrived with no sysex in progress."""


class SpuriousEnd(SysexError):
    """An end arrived with no sysex in progress."""


class SysexBuffer:
    """Bounded buffer accumulating the bytes of incoming sysex messages."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self.data = bytearray()

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    def capture(self, message: SysexMessage) -> SysexCapture:
        """Add a message's bytes; raise SysexError on malformed input."""
        kind = message.kind
        if kind in (SysexKind.BEGIN, SysexKind.SINGLE_BYTE, SysexKind.EMPTY):
            self.data.clear()
            if len(message.data) > self.capacity:
                raise BufferOverflow()
            self.data.extend(message.data)
            return SysexCapture.PENDING if kind is SysexKind.BEGIN else SysexCapture.CAPTURED
        if kind in (SysexKind.CONT, SysexKind.END, SysexKind.END1, SysexKind.END2):
            if not self.data:
                # some data must already be buffered from earlier messages
                if kind is SysexKind.CONT:
                    raise SpuriousContinuation()
                raise SpuriousEnd()
            if len(self.data) + len(message.data) > self.capacity:
                # drop everything rather than keep a mangled message
                self.data.clear()
                raise BufferOverflow()
            self.data.extend(message.data)
            return SysexCapture.CAPTURED
        self.data.clear()
        return SysexCapture.PENDING


@dataclass(frozen=True)
class Seq:
    """Fixed byte sequence."""

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class Buf:
    """Variable payload; sent as-is, ignored when matching."""

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class Skip:
    """Any bytes, ignored when matching, not sent."""

    count: int


@dataclass(frozen=True)
class Val:
    """Single fixed byte."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFF:
            raise ValueError(f"byte value out of range: {self.value}")


@dataclass(frozen=True)
class Cap:
    """Bytes captured under a tag when matching; not sent."""

    tag: Tag


Token = Union[Seq, Buf, Skip, Val, Cap]


def _token_bytes(tokens: Iterable[Token]) -> Iterator[int]:
    for token in tokens:
        if isinstance(token, (Seq, Buf)):
            yield from token.data
        elif isinstance(token, Val):
            yield token.value


class SysexSeq:
    """Iterator turning a token list into a sequence of sysex messages."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: List[Token] = list(tokens)
        self._source = _token_bytes(self.tokens)
        self._window: deque = deque()
        self._started = False
        self._done = False

    def __iter__(self) -> SysexSeq:
        return self

    def _take(self, count: int) -> bytes:
        return bytes(self._window.popleft() for _ in range(count))

    def __next__(self) -> SysexMessage:
        if self._done:
            raise StopIteration
        while len(self._window) < 3:
            byte = next(self._source, None)
            if byte is None:
                break
            self._window.append(byte)
        size = len(self._window)
        if not self._started:
            self._started = True
            if size == 0:
                self._done = True
                return SysexMessage(SysexKind.EMPTY)
            if size == 1:
                self._done = True
                return SysexMessage(SysexKind.SINGLE_BYTE, self._take(1))
            return SysexMessage(SysexKind.BEGIN, self._take(2))
        if size < 3:
            self._done = True
            kind = (SysexKind.END, SysexKind.END1, SysexKind.END2)[size]
            return SysexMessage(kind, self._take(size))
        return SysexMessage(SysexKind.CONT, self._take(3))


class SysexMatcher:
    """Matches incoming sysex messages against a token pattern."""

    def __init__(self, pattern: Iterable[Token]) -> None:
        self.pattern: List[Token] = list(pattern)
        self._matching = False
        self._tok_idx = 0
        self._byte_idx = 0
        self._captured: Dict[Tag, bytearray] = {}

    def match_message(self, message: SysexMessage) -> Optional[Dict[Tag, bytes]]:
        """Feed one message; return captured values when a full match ends."""
        kind = message.kind
        data = message.data
        sysex_end = True
        if kind is SysexKind.BEGIN:
            self._begin_match()
            self._matching = self._advance_all(data)
            sysex_end = False
        elif kind in (SysexKind.SINGLE_BYTE, SysexKind.EMPTY):
            self._begin_match()
            self._matching = self._advance_all(data)
        elif kind is SysexKind.CONT:
            matched = self._advance_all(data)
            self._matching = self._matching and matched
            sysex_end = False
        elif kind in (SysexKind.END, SysexKind.END1, SysexKind.END2):
            matched = self._advance_all(data)
            self._matching = self._matching and matched
        else:
            self._matching = False

        if self._matching and sysex_end:
            self._matching = False
            return {tag: bytes(value) for tag, value in self._captured.items()}
        return None

    def _begin_match(self) -> None:
        self._tok_idx = 0
        self._byte_idx = 0
        self._captured.clear()

    def _advance_all(self, data: bytes) -> bool:
        return all(self._advance(byte) for byte in data)

    def _advance(self, byte: int) -> bool:
        """True if the byte matched or was captured; once false, stays false."""
        if self._tok_idx >= len(self.pattern):
            return False
        token = self.pattern[self._tok_idx]
        tok_len = 1
        if isinstance(token, Seq):
            if token.data[self._byte_idx] != byte:
                return self._fail_match()
            tok_len = len(token.data)
        elif isinstance(token, Skip):
            tok_len = token.count
        elif isinstance(token, Val):
            if token.value != byte:
                return self._fail_match()
        elif isinstance(token, Cap):
            self._captured.setdefault(token.tag, bytearray()).append(byte)
            tok_len = token.tag.size()
        self._byte_idx += 1
        if self._byte_idx >= tok_len:
            self._tok_idx += 1
            self._byte_idx = 0
        return True

    def _fail_match(self) -> bool:
        self._tok_idx = len(self.pattern)
        return False