"""Frame layout shared by every layer of the link."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

MAX_FRAME_SIZE = 100
PORT = 8080
DEFAULT_ERROR_RATE = 0.15
DEFAULT_SERVER_IP = "127.0.0.1"
MAX_QUEUE_SIZE = 32

_LAYOUT = struct.Struct(f"<i{MAX_FRAME_SIZE}sii")
FRAME_BYTES = _LAYOUT.size


class FrameType(enum.IntEnum):
    """Kinds of frame carried over the link."""

    KILL = -1
    COMMAND_END = 0
    ECHO = 1
    FILE_PUT = 2
    FILE_GET = 3
    FILE_LIST = 4
    FILE_DEL = 5
    FILE_NAME_PUT = 6
    ACK = 7
    FILE_COUNT = 9


@dataclass(frozen=True)
class Frame:
    """One fixed-size frame: a type, a 100-byte payload, a size and a sequence number.

    Known type codes become FrameType members; unknown codes stay plain ints.
    The payload is always stored padded with NUL bytes to MAX_FRAME_SIZE.
    """

    type: int
    payload: bytes = b""
    size: int = 0
    seq_num: int = 0

    def __post_init__(self) -> None:
        payload = bytes(self.payload)
        if len(payload) > MAX_FRAME_SIZE:
            raise ValueError(
                f"payload of {len(payload)} bytes exceeds {MAX_FRAME_SIZE} bytes"
            )
        object.__setattr__(self, "payload", payload.ljust(MAX_FRAME_SIZE, b"\0"))
        try:
            kind = FrameType(self.type)
        except ValueError:
            kind = int(self.type)
        object.__setattr__(self, "type", kind)

    def pack(self) -> bytes:
        """Encode the frame in its wire layout."""
        try:
            return _LAYOUT.pack(int(self.type), self.payload, self.size, self.seq_num)
        except struct.error as exc:
            raise ValueError(f"frame cannot be encoded: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> Frame:
        """Decode a frame from exactly FRAME_BYTES bytes."""
        if len(data) != FRAME_BYTES:
            raise ValueError(f"expected {FRAME_BYTES} bytes, got {len(data)}")
        kind, payload, size, seq_num = _LAYOUT.unpack(data)
        return cls(kind, payload, size, seq_num)

    def text(self) -> str:
        """The payload read as a NUL-terminated string."""
        return self.payload.split(b"\0", 1)[0].decode("utf-8", errors="replace")

    def data(self) -> bytes:
        """The first `size` bytes of the payload."""
        return self.payload[: max(self.size, 0)]


def file_frames(data: bytes) -> list[Frame]:
    """Split file contents into FILE_PUT frames numbered from 1, ending with COMMAND_END."""
    frames = [
        Frame(FrameType.FILE_PUT, chunk, len(chunk), seq)
        for seq, chunk in enumerate(
            (data[start:start + MAX_FRAME_SIZE] for start in range(0, len(data), MAX_FRAME_SIZE)),
            start=1,
        )
    ]
    frames.append(Frame(FrameType.COMMAND_END, b"", 0, len(frames) + 1))
    return frames