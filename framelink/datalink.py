"""Data link layer: windowed, acknowledged delivery of frame sequences."""

from __future__ import annotations

import logging
import select
from dataclasses import dataclass, replace

from framelink.frames import Frame, FrameType
from framelink.physical import PhysicalLayer

logger = logging.getLogger(__name__)

MAX_WINDOW_SIZE = 4
TIMEOUT = 2.0

_TERMINATORS = frozenset({FrameType.FILE_NAME_PUT, FrameType.COMMAND_END, FrameType.KILL})


@dataclass
class LinkStats:
    """Counters kept by the data link layer."""

    total_frames_sent: int = 0
    total_frames_received: int = 0
    total_retransmissions: int = 0
    total_acks_sent: int = 0
    total_acks_received: int = 0
    total_duplicates_received: int = 0
    total_data_bytes_sent: int = 0
    total_data_bytes_received: int = 0
    total_oo_dupe: int = 0

    def report(self) -> str:
        """The counters as a printable block."""
        return "\n".join(
            [
                "",
                "--- Data Link Layer Statistics ---",
                f"Total Frames Sent: {self.total_frames_sent}",
                f"Total Frames Received: {self.total_frames_received}",
                f"Total Retransmissions: {self.total_retransmissions}",
                f"Total ACKs Sent: {self.total_acks_sent}",
                f"Total ACKs Received: {self.total_acks_received}",
                f"Total Data Bytes Sent: {self.total_data_bytes_sent}",
                f"Total Data Bytes Received: {self.total_data_bytes_received}",
                f"Total Duplicates or Out Of Order: {self.total_oo_dupe}",
                "----------------------------------",
            ]
        )


class DataLink:
    """Sliding-window sender and selective-repeat receiver over a physical layer."""

    def __init__(self, physical: PhysicalLayer, stats: LinkStats | None = None, timeout: float = TIMEOUT):
        self.physical = physical
        self.stats = stats if stats is not None else LinkStats()
        self.timeout = timeout

    def send(self, frames) -> None:
        """Deliver frames in order, renumbering them from 0, until every one is acknowledged."""
        outgoing = [replace(frame, seq_num=index) for index, frame in enumerate(frames)]
        total = len(outgoing)
        base = next_seq = 0
        while base < total:
            while next_seq < base + MAX_WINDOW_SIZE and next_seq < total:
                frame = outgoing[next_seq]
                if self.physical.send(frame):
                    logger.debug("sent frame %d of type %s", frame.seq_num, frame.type)
                else:
                    self.stats.total_retransmissions += 1
                self.stats.total_frames_sent += 1
                self.stats.total_data_bytes_sent += frame.size
                next_seq += 1

            readable, _, _ = select.select([self.physical], [], [], self.timeout)
            if readable:
                ack = self.physical.recv()
                if ack.type == FrameType.ACK and ack.seq_num >= base:
                    logger.debug("received ACK for frame %d", ack.seq_num)
                    base = ack.seq_num + 1
                self.stats.total_acks_received += 1
            else:
                logger.debug("timeout, resending frames %d..%d", base, next_seq - 1)
                for frame in outgoing[base:next_seq]:
                    if not self.physical.send(frame):
                        logger.debug("resend of frame %d dropped", frame.seq_num)
                    self.stats.total_retransmissions += 1

    def recv(self) -> list[Frame]:
        """Receive frames in order until a terminating frame has been acknowledged."""
        received: list[Frame] = []
        pending: dict[int, Frame] = {}
        expected = 0
        while True:
            frame = self.physical.recv()
            if not isinstance(frame.type, FrameType):
                logger.debug("unknown frame type: %s", frame.type)
                continue

            if expected <= frame.seq_num < expected + MAX_WINDOW_SIZE:
                pending[frame.seq_num] = frame
                while expected in pending:
                    current = pending.pop(expected)
                    received.append(current)
                    expected += 1
                    self.stats.total_frames_received += 1
                    self.stats.total_data_bytes_received += current.size
                    ack = Frame(FrameType.ACK, seq_num=current.seq_num)
                    if self.physical.send(ack):
                        self.stats.total_acks_sent += 1
                        if current.type in _TERMINATORS:
                            return received
                    else:
                        self.stats.total_retransmissions += 1
                    self.stats.total_acks_sent += 1
            else:
                logger.debug(
                    "out-of-order or duplicate frame %d, expected %d", frame.seq_num, expected
                )
                self.stats.total_oo_dupe += 1
                ack = Frame(FrameType.ACK, seq_num=frame.seq_num)
                if not self.physical.send(ack):
                    self.stats.total_retransmissions += 1
                elif frame.type in _TERMINATORS and frame.seq_num == expected - 1:
                    return received