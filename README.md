# sockdays

A set of small TCP programs, each a client and a server that talk over
plain sockets. They are meant for learning and experimenting with the
socket API: blocking reads and writes with fixed-size frames, half-closed
connections, a tiny binary protocol and a server that handles several
clients at once.

Everything uses the standard library only.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## The programs

Commands that take a port print a usage line and stop when the arguments
are missing or the port is not a number from 0 to 65535. Socket failures
are reported on standard error with a label such as `bind() error` and the
command exits with status 1.

### Blocking echo (`sockdays.block_echo`)

A server that accepts one client on 127.0.0.1:8888 and sends back every
1024-byte frame it receives, printing each message as it arrives and a
note when the client disconnects. The client reads lines from standard
input, sends each one as a frame and prints the reply. Both commands take
no arguments.

```
sockdays-block-echo-server
sockdays-block-echo-client
```

From Python, `run_server(host, port, out)` returns the messages the client
sent, `run_client(host, port, lines, out)` returns the replies, and
`echo_session(conn, out)` serves one already connected socket.

### Hello (`sockdays.hello`)

The server waits for one client, sends it `Hello World!` and closes. The
client reads one byte at a time until the server closes, then prints the
message and the number of bytes read.

```
sockdays-hello-server <port>
sockdays-hello-client <IP> <port>
```

In code: `serve_hello(port, host, message)` returns the client's address;
`fetch_message(host, port)` returns the text and the read count.

### Calculator (`sockdays.opcalc`)

The client asks for a count of operands, the operands and an operator,
sends them in one message and prints the result. A request is one byte
holding the operand count, then each operand as a 4-byte little-endian
signed integer, then the operator character; the reply is a 4-byte
integer. `+`, `-` and `*` fold the operands left to right with 32-bit
wrap-around; any other operator yields the first operand. The server
handles five connections and then stops.

```
sockdays-op-server <port>
sockdays-op-client <IP> <port>
```

In code: `calculate(operands, operator)`, `encode_request(operands,
operator)`, `decode_request(data)`, `serve(port, clients, host)` (returns
the results it sent) and `request(host, port, operands, operator)`.

### File transfer (`sockdays.filetransfer`)

The server sends a file to the first client that connects, closes its
writing side, and prints the thank-you note the client sends back. The
`sockdays-file-server` command sends the source of the
`sockdays.filetransfer` module itself. The client saves what it receives
to `receive.cpp` in the current directory and then answers `Thank you`.

```
sockdays-file-server <port>
sockdays-file-client <IP> <port>
```

In code: `send_file(path, port, host, out)` returns the client's reply;
`receive_file(host, port, dest, out)` returns the number of bytes saved.

### Concurrent echo (`sockdays.echo`)

An echo server that serves each client in its own thread, printing
`new client connected...` and `client disconnected...` as clients come and
go. It runs until interrupted with Ctrl+C. The client reads lines from
standard input, prints each echoed reply, and stops on a line holding only
`q` or `Q`.

```
sockdays-echo-server <port>
sockdays-echo-client <IP> <port>
```

In code: `EchoServer` (a `socketserver.ThreadingTCPServer`),
`make_server(host, port, out)` which returns a bound, listening server,
and `run_client(host, port, lines, out)` which returns the replies.

## What is not included

There is no signal-handling program: the package has no command that
installs alarm or interrupt handlers. The concurrent echo server uses
threads rather than one process per client, so there are no child
processes to reap.