# framelink

framelink is a small client and server pair that exchange files over TCP.
The transfer goes through a data link layer with a sliding window. Under that
layer, a physical layer drops outgoing frames at random, at a rate you can set.
The data link layer recovers from these losses with acknowledgements and
retransmissions.

Every message is a fixed-size frame. A frame holds a type, a payload of up to
100 bytes, a size and a sequence number. A command is a run of frames that ends
with a terminating frame. The terminating frame is a command-end, file-name or
kill frame.

The data link layer sends a run with a window of four frames. It renumbers the
frames from 0 and resends the unacknowledged frames when no acknowledgement
arrives within two seconds. The receiver acknowledges each frame it takes in.
It puts frames that arrive out of order back in sequence and skips frames of
unknown type.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running

Start the server in the directory you want to serve. It listens on all
interfaces and accepts a single client:

```
framelink-server [--error-rate RATE] [--port PORT]
```

The port defaults to 8080 and the error rate to 0.15.

In another terminal, connect a client:

```
framelink-client [SERVER_IP] [ERROR_RATE] [--port PORT]
```

`SERVER_IP` must be an IPv4 address and defaults to `127.0.0.1`.
`ERROR_RATE` defaults to `0.15`. Both programs reject an error rate outside
0.0 to 1.0 and exit with status 1.

The client reads commands from standard input. Each command is split at its
first space into a command and an argument:

| Command            | Effect                                                      |
|--------------------|-------------------------------------------------------------|
| `echo <text>`      | The server sends the text back.                             |
| `list`             | Lists the files in the server's directory, sorted by name, leaving out names that start with a dot. |
| `getfile <name>`   | Downloads a file into the client's working directory.       |
| `putfile <path>`   | Uploads a file. The server stores it under the same name.   |
| `del <name>`       | Deletes a file on the server and shows the server's reply.  |
| `kill`             | Stops the server and ends the session.                      |

The session also ends at end of input. A file error, such as a missing file,
is reported on standard error and the session goes on.

When a session ends normally, each program prints the statistics of its data
link layer. These count frames sent and received, retransmissions, ACKs sent
and received, data bytes sent and received, and duplicate or out-of-order
frames.

Detailed traces of the layers, such as sent frames, dropped frames, ACKs and
timeouts, go to the standard `logging` module at debug level.

## Using the library

The layers can also be used on their own:

- `framelink.frames` defines `FrameType` and the immutable `Frame`.
  `Frame.pack` and `Frame.unpack` convert a frame to and from its wire form.
  `Frame.text` returns the payload up to its first NUL byte, and `Frame.data`
  returns the first `size` bytes of the payload. `file_frames` splits file
  contents into `FILE_PUT` frames and adds a final `COMMAND_END` frame.
- `framelink.physical` provides `PhysicalLayer`, which wraps a connected
  socket. It has `send`, `recv`, `fileno` and `close`, and can be used as a
  context manager. `send` returns `False` when the simulated channel drops the
  frame. `connect_to_server(server_ip, error_rate, port)` returns a
  `PhysicalLayer`. `setup_server(error_rate, port)` waits for one client and
  returns the layer together with the listening socket.
- `framelink.datalink` provides `DataLink(physical, stats, timeout)`. Its
  `send(frames)` delivers a run of frames and `recv()` returns the frames of
  one run in order. It also provides `LinkStats`, whose `report()` formats the
  counters.
- `framelink.client.Client(link, directory)` provides `echo`, `list_files`,
  `get_file`, `put_file`, `delete_file`, `kill` and `execute(line)`. It also
  provides `parse_command`.
- `framelink.server.Server(link, directory)` answers requests. `handle(frames)`
  handles one request and `serve()` handles requests until a kill frame
  arrives.

## Limitations

- The server accepts one client per run and exits after `kill`.
- There is no authentication.
- File names from the client are used as paths relative to the server's
  directory without further checks.
- Names longer than 100 bytes are cut to fit a frame.