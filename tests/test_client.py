import socket
import threading

import pytest

from framelink.client import Client, main, parse_command
from framelink.datalink import DataLink
from framelink.frames import MAX_FRAME_SIZE, Frame, FrameType, file_frames
from framelink.physical import PhysicalLayer
from framelink.server import Server


class ScriptedLink:
    def __init__(self, *replies):
        self.sent = []
        self._replies = list(replies)

    def send(self, frames):
        self.sent.append(list(frames))

    def recv(self):
        return self._replies.pop(0)


def _end(seq=1):
    return Frame(FrameType.COMMAND_END, b"", 0, seq)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("echo hello world", ("echo", "hello world")),
        ("list", ("list", "")),
        ("getfile a.txt\nrest", ("getfile", "a.txt")),
        ("del  x", ("del", " x")),
    ],
)
def test_parse_command(line, expected):
    assert parse_command(line) == expected


def test_echo_returns_reply_and_sends_request():
    link = ScriptedLink([Frame(FrameType.ECHO, b"hello", 5), _end()])
    assert Client(link).echo("hello") == "hello"
    request = link.sent[0]
    assert [f.type for f in request] == [FrameType.ECHO, FrameType.COMMAND_END]
    assert request[0].text() == "hello"
    assert request[0].size == len("hello")


def test_echo_truncates_long_payload():
    message = "a" * (MAX_FRAME_SIZE + 50)
    link = ScriptedLink([Frame(FrameType.ECHO, b"a" * MAX_FRAME_SIZE, MAX_FRAME_SIZE), _end()])
    Client(link).echo(message)
    request = link.sent[0][0]
    assert request.payload == b"a" * MAX_FRAME_SIZE
    assert request.size == len(message)


def test_list_files_drops_terminator():
    reply = [
        Frame(FrameType.FILE_LIST, b"a.txt", 5, 0),
        Frame(FrameType.FILE_LIST, b"b.txt", 5, 1),
        _end(2),
    ]
    link = ScriptedLink(reply)
    assert Client(link).list_files() == ["a.txt", "b.txt"]
    assert link.sent[0][0].type == FrameType.FILE_LIST


def test_get_file_writes_contents(tmp_path):
    content = bytes(range(256)) * 2
    link = ScriptedLink([Frame(FrameType.FILE_NAME_PUT, b"f.bin", 6)], file_frames(content))
    written = Client(link, tmp_path).get_file("f.bin")
    assert written == len(content)
    assert (tmp_path / "f.bin").read_bytes() == content
    assert link.sent[0][0].type == FrameType.FILE_GET
    assert link.sent[0][0].text() == "f.bin"


def test_get_file_without_data_raises(tmp_path):
    link = ScriptedLink([Frame(FrameType.FILE_NAME_PUT, b"f.bin", 6)], [])
    with pytest.raises(ConnectionError):
        Client(link, tmp_path).get_file("f.bin")


def test_put_file_sends_name_then_data(tmp_path):
    content = b"x" * (2 * MAX_FRAME_SIZE + 30)
    (tmp_path / "up.txt").write_bytes(content)
    link = ScriptedLink()
    assert Client(link, tmp_path).put_file("up.txt") == len(content)
    assert link.sent == [
        [Frame(FrameType.FILE_NAME_PUT, b"up.txt", len(b"up.txt") + 1, 0)],
        file_frames(content),
    ]


def test_put_missing_file_raises(tmp_path):
    link = ScriptedLink()
    with pytest.raises(FileNotFoundError):
        Client(link, tmp_path).put_file("absent.txt")
    assert link.sent == []


def test_delete_file_returns_reply():
    reply_text = b"File 'a.txt' deleted successfully.\n"
    link = ScriptedLink([Frame(FrameType.FILE_DEL, reply_text, MAX_FRAME_SIZE), _end()])
    assert Client(link).delete_file("a.txt") == reply_text.decode()
    request = link.sent[0][0]
    assert request.type == FrameType.FILE_DEL
    assert request.size == len("a.txt") + 1


def test_kill_sends_single_kill_frame():
    link = ScriptedLink()
    Client(link).kill()
    assert link.sent == [[Frame(FrameType.KILL)]]


def test_execute_kill_ends_session():
    link = ScriptedLink()
    assert Client(link).execute("kill") is False
    assert link.sent == [[Frame(FrameType.KILL)]]


def test_execute_invalid_command(capsys):
    link = ScriptedLink()
    assert Client(link).execute("bogus stuff") is True
    assert "Invalid command." in capsys.readouterr().out
    assert link.sent == []


def test_execute_missing_putfile_continues(tmp_path, capsys):
    link = ScriptedLink()
    assert Client(link, tmp_path).execute("putfile nothing.bin") is True
    assert capsys.readouterr().err.startswith("Error:")


def test_main_rejects_error_rate(capsys):
    assert main(["127.0.0.1", "1.5"]) == 1
    assert "Invalid error rate" in capsys.readouterr().err


def test_full_session_over_socket(tmp_path):
    client_dir = tmp_path / "client"
    server_dir = tmp_path / "server"
    client_dir.mkdir()
    server_dir.mkdir()
    remote = bytes(range(200)) * 3
    (server_dir / "remote.bin").write_bytes(remote)
    upload = b"upload-data" * 40
    (client_dir / "up.txt").write_bytes(upload)

    client_sock, server_sock = socket.socketpair()
    client = Client(DataLink(PhysicalLayer(client_sock, 0.0)), client_dir)
    server = Server(DataLink(PhysicalLayer(server_sock, 0.0)), server_dir)
    errors = []

    def run():
        try:
            server.serve()
        except Exception as exc:  # reported through the assertion below
            errors.append(exc)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    try:
        assert client.echo("ping") == "ping"
        assert client.put_file("up.txt") == len(upload)
        assert client.list_files() == ["remote.bin", "up.txt"]
        assert client.get_file("remote.bin") == len(remote)
        assert (client_dir / "remote.bin").read_bytes() == remote
        assert client.delete_file("up.txt") == "File 'up.txt' deleted successfully.\n"
        client.kill()
        thread.join(timeout=10)
    finally:
        client_sock.close()
        server_sock.close()
    assert not thread.is_alive()
    assert errors == []
    assert (server_dir / "up.txt").exists() is False