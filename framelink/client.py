"""Interactive client: echo, list, fetch, upload and delete files on the server."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from framelink.datalink import DataLink
from framelink.frames import (
    DEFAULT_ERROR_RATE,
    DEFAULT_SERVER_IP,
    MAX_FRAME_SIZE,
    PORT,
    Frame,
    FrameType,
    file_frames,
)
from framelink.physical import connect_to_server

PROMPT = (
    "Enter a command (e.g., 'echo hello', 'getfile file.txt', "
    "'putfile path/to/file', 'del file.txt', 'list', 'kill'): "
)


def _end_frame(seq_num: int) -> Frame:
    return Frame(FrameType.COMMAND_END, b"", 0, seq_num)


def _named_frame(kind: FrameType, text: str, extra: int = 0) -> Frame:
    """A frame carrying text, with size its encoded length plus `extra`."""
    encoded = text.encode("utf-8")
    return Frame(kind, encoded[:MAX_FRAME_SIZE], len(encoded) + extra, 0)


def parse_command(line: str) -> tuple[str, str]:
    """Split an input line at its first space into (command, argument)."""
    line = line.split("\n", 1)[0]
    command, _, argument = line.partition(" ")
    return command, argument


class Client:
    """Issues commands to the server over a data link."""

    def __init__(self, link, directory=None):
        self.link = link
        self.directory = Path(directory) if directory is not None else Path(".")

    def echo(self, message: str) -> str:
        """Send a message and return the server's echo of it."""
        self.link.send([_named_frame(FrameType.ECHO, message), _end_frame(1)])
        response = self.link.recv()
        return response[0].text() if response else ""

    def list_files(self) -> list[str]:
        """Return the names of the files in the server's directory."""
        self.link.send([Frame(FrameType.FILE_LIST, b"", 0, 0), _end_frame(1)])
        response = self.link.recv()
        return [frame.text() for frame in response[:-1]]

    def get_file(self, filename: str) -> int:
        """Fetch a file from the server into the local directory; return bytes written."""
        self.link.send([_named_frame(FrameType.FILE_GET, filename), _end_frame(1)])
        self.link.recv()
        target = self.directory / filename
        with target.open("wb") as out:
            frames = self.link.recv()
            if not frames:
                raise ConnectionError(f"no data received for {filename!r}")
            written = 0
            for frame in frames:
                if frame.type == FrameType.FILE_PUT:
                    written += out.write(frame.data())
        return written

    def put_file(self, filename: str) -> int:
        """Upload a local file to the server; return the number of bytes sent."""
        data = (self.directory / filename).read_bytes()
        self.link.send([_named_frame(FrameType.FILE_NAME_PUT, filename, extra=1)])
        self.link.send(file_frames(data))
        return len(data)

    def delete_file(self, filename: str) -> str:
        """Ask the server to delete a file and return its reply."""
        self.link.send(
            [_named_frame(FrameType.FILE_DEL, filename, extra=1), _end_frame(1)]
        )
        response = self.link.recv()
        return response[0].text() if response else ""

    def kill(self) -> None:
        """Tell the server to shut down."""
        self.link.send([Frame(FrameType.KILL, b"", 0, 0)])

    def execute(self, line: str) -> bool:
        """Run one command line; return False once the session should end."""
        command, argument = parse_command(line)
        try:
            if command == "echo":
                print(f"ECHO Response: {self.echo(argument)}")
            elif command == "getfile":
                written = self.get_file(argument)
                print(f"Received file: {argument} ({written} bytes)")
            elif command == "putfile":
                sent = self.put_file(argument)
                print(f"File transfer completed. Sent {sent} bytes.")
            elif command == "list":
                names = self.list_files()
                print(f"Files: {len(names)}")
                for name in names:
                    print(f"\t{name}")
            elif command == "del":
                print(f"Delete Response: {self.delete_file(argument)}")
            elif command == "kill":
                self.kill()
                print("\nGoodbye! :(")
                return False
            else:
                print("Invalid command.")
        except ConnectionError:
            raise
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
        return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="framelink-client")
    parser.add_argument("server_ip", nargs="?", default=DEFAULT_SERVER_IP)
    parser.add_argument("error_rate", nargs="?", type=float, default=DEFAULT_ERROR_RATE)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)

    if not 0.0 <= args.error_rate <= 1.0:
        print("Error: Invalid error rate. Must be between 0.0 and 1.0.", file=sys.stderr)
        return 1

    physical = connect_to_server(args.server_ip, args.error_rate, args.port)
    link = DataLink(physical)
    print("Connected to server.")
    client = Client(link)
    with physical:
        while True:
            try:
                line = input(PROMPT)
            except EOFError:
                break
            if not client.execute(line):
                break
    print(link.stats.report())
    return 0