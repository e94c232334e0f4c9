"""Server answering client commands over a data link."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from framelink.datalink import DataLink
from framelink.frames import (
    DEFAULT_ERROR_RATE,
    MAX_FRAME_SIZE,
    PORT,
    Frame,
    FrameType,
    file_frames,
)
from framelink.physical import setup_server


def _frame_name(frame: Frame) -> str:
    """The file name a request frame carries."""
    return frame.data().split(b"\0", 1)[0].decode("utf-8", errors="replace")


class Server:
    """Dispatches received requests and sends the replies."""

    def __init__(self, link, directory=None):
        self.link = link
        self.directory = Path(directory) if directory is not None else Path(".")

    def handle(self, frames) -> bool:
        """Act on one received request; return False when told to shut down."""
        if not frames:
            return True
        first = frames[0]
        kind = first.type
        try:
            if kind == FrameType.ECHO:
                self._echo(first)
            elif kind == FrameType.FILE_GET:
                self._send_file(first)
            elif kind in (FrameType.FILE_NAME_PUT, FrameType.FILE_PUT):
                self._receive_file(first)
            elif kind == FrameType.FILE_LIST:
                self._list_files()
            elif kind == FrameType.FILE_DEL:
                self._delete_file(first)
            elif kind == FrameType.COMMAND_END:
                print("Command end")
            elif kind == FrameType.KILL:
                return False
            else:
                print(f"Server Unknown frame type: {kind}")
        except ConnectionError:
            raise
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
        return True

    def serve(self) -> None:
        """Handle requests until the client sends a kill frame."""
        while self.handle(self.link.recv()):
            pass

    def _echo(self, frame: Frame) -> None:
        text = frame.payload.split(b"\0", 1)[0]
        print(f"Received Echo: {frame.text()}")
        self.link.send(
            [
                Frame(FrameType.ECHO, text, frame.size, frame.seq_num),
                Frame(FrameType.COMMAND_END, b"", 0, frame.seq_num + 1),
            ]
        )

    def _send_file(self, frame: Frame) -> None:
        name = _frame_name(frame)
        data = (self.directory / name).read_bytes()
        encoded = name.encode("utf-8")
        self.link.send(
            [Frame(FrameType.FILE_NAME_PUT, encoded[:MAX_FRAME_SIZE], len(encoded) + 1, 0)]
        )
        self.link.send(file_frames(data))
        print(f"File transfer completed. Sent {len(data)} bytes.")

    def _receive_file(self, frame: Frame) -> None:
        if frame.type != FrameType.FILE_NAME_PUT:
            print("Error creating file: no file name received", file=sys.stderr)
            return
        name = _frame_name(frame)
        with (self.directory / name).open("wb") as out:
            frames = self.link.recv()
            if not frames:
                print(f"Error receiving file {name!r}", file=sys.stderr)
                return
            for data_frame in frames:
                if data_frame.type == FrameType.FILE_PUT:
                    out.write(data_frame.data())
        print(f"Received file: {name}")

    def _list_files(self) -> None:
        names = sorted(
            entry.name for entry in self.directory.iterdir() if not entry.name.startswith(".")
        )
        frames = []
        for seq, name in enumerate(names):
            encoded = name.encode("utf-8")[: MAX_FRAME_SIZE - 1]
            frames.append(Frame(FrameType.FILE_LIST, encoded, len(encoded), seq))
        frames.append(Frame(FrameType.COMMAND_END, b"", 0, len(names)))
        self.link.send(frames)
        print(f"Sent Directory List! Files: {len(names)}")

    def _delete_file(self, frame: Frame) -> None:
        name = _frame_name(frame)
        (self.directory / name).unlink()
        message = f"File '{name}' deleted successfully.\n".encode("utf-8")
        self.link.send(
            [
                Frame(FrameType.FILE_DEL, message[: MAX_FRAME_SIZE - 1], MAX_FRAME_SIZE, frame.seq_num),
                Frame(FrameType.COMMAND_END, b"", 0, 1),
            ]
        )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="framelink-server")
    parser.add_argument("--error-rate", type=float, default=DEFAULT_ERROR_RATE)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)

    if not 0.0 <= args.error_rate <= 1.0:
        print("Error: Invalid error rate. Must be between 0.0 and 1.0.", file=sys.stderr)
        return 1

    physical, listener = setup_server(args.error_rate, args.port)
    link = DataLink(physical)
    print("Client connected.")
    try:
        Server(link).serve()
    finally:
        physical.close()
        listener.close()
    print("\nGoodbye! :(")
    print(link.stats.report())
    return 0