"""Physical layer: whole frames over a TCP stream, with simulated loss on send."""

from __future__ import annotations

import ipaddress
import logging
import random
import socket

from framelink.frames import (
    DEFAULT_ERROR_RATE,
    DEFAULT_SERVER_IP,
    FRAME_BYTES,
    PORT,
    Frame,
)

logger = logging.getLogger(__name__)


class PhysicalLayer:
    """Sends and receives frames on a connected socket, dropping sends at a given rate."""

    def __init__(self, sock: socket.socket, error_rate: float = DEFAULT_ERROR_RATE, rng=None):
        if not 0.0 <= error_rate <= 1.0:
            raise ValueError("error rate must be between 0.0 and 1.0")
        self._sock = sock
        self.error_rate = error_rate
        self._rng = rng if rng is not None else random.Random()

    def send(self, frame: Frame) -> bool:
        """Send a frame; return False if the simulated channel dropped it."""
        if self._rng.random() < self.error_rate:
            logger.debug("dropped frame type %s seq %s", frame.type, frame.seq_num)
            return False
        self._sock.sendall(frame.pack())
        return True

    def recv(self) -> Frame:
        """Block until one whole frame has arrived and return it."""
        buffer = bytearray()
        while len(buffer) < FRAME_BYTES:
            chunk = self._sock.recv(FRAME_BYTES - len(buffer))
            if not chunk:
                raise ConnectionError("connection closed by peer")
            buffer += chunk
        return Frame.unpack(bytes(buffer))

    def fileno(self) -> int:
        return self._sock.fileno()

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> PhysicalLayer:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def connect_to_server(
    server_ip: str = DEFAULT_SERVER_IP,
    error_rate: float = DEFAULT_ERROR_RATE,
    port: int = PORT,
) -> PhysicalLayer:
    """Connect to a server at an IPv4 address and wrap the connection."""
    try:
        address = ipaddress.IPv4Address(server_ip)
    except ValueError as exc:
        raise ValueError(f"Invalid address: {server_ip!r}") from exc
    sock = socket.create_connection((str(address), port))
    return PhysicalLayer(sock, error_rate)


def setup_server(error_rate: float = DEFAULT_ERROR_RATE, port: int = PORT):
    """Listen on all interfaces, accept one client and return (layer, listening socket)."""
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind(("", port))
        listener.listen(3)
        logger.info("Server listening on port %d...", port)
        conn, _ = listener.accept()
    except BaseException:
        listener.close()
        raise
    return PhysicalLayer(conn, error_rate), listener