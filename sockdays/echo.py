"""A concurrent echo server and an interactive line client."""

from __future__ import annotations

import socketserver
import sys
import threading
from collections.abc import Iterable, Iterator
from typing import TextIO

from .hello import _command_args, _connected, _errif, _failed, _recv_exact

SERVER_BUF_SIZE = 30
CLIENT_BUF_SIZE = 1024
BACKLOG = 5
PROMPT = "Input message(Q to quit): "
_QUIT = (b"q\n", b"Q\n")


class _EchoHandler(socketserver.BaseRequestHandler):
    def handle(self) -> None:
        self.server.log("new client connected...")
        try:
            while chunk := self.request.recv(SERVER_BUF_SIZE):
                self.request.sendall(chunk)
        except ConnectionError:
            pass
        self.server.log("client disconnected...")


class EchoServer(socketserver.ThreadingTCPServer):
    """Echo every client's bytes back to it, each client served concurrently."""

    request_queue_size = BACKLOG

    def __init__(self, server_address, out: TextIO | None = None, bind_and_activate: bool = True):
        self.out = sys.stdout if out is None else out
        self._out_lock = threading.Lock()
        super().__init__(server_address, _EchoHandler, bind_and_activate)

    def log(self, line: str) -> None:
        with self._out_lock:
            print(line, file=self.out, flush=True)


def make_server(host: str, port: int, out: TextIO | None = None) -> EchoServer:
    """Create an echo server bound to *host*:*port* and listening."""
    server = EchoServer((host, port), out, bind_and_activate=False)
    try:
        with _errif("bind() error"):
            server.server_bind()
        with _errif("listen() error"):
            server.server_activate()
    except OSError:
        server.server_close()
        raise
    return server


def _chunks(lines: Iterable[str]) -> Iterator[bytes]:
    """Split each line the way a fixed-size line reader would."""
    step = CLIENT_BUF_SIZE - 1
    for line in lines:
        data = line.encode("utf-8")
        for start in range(0, len(data), step):
            yield data[start:start + step]


def run_client(
    host: str,
    port: int,
    lines: Iterable[str] = (),
    out: TextIO | None = None,
) -> list[str]:
    """Send lines until a lone q or Q; return the echoed replies."""
    out = sys.stdout if out is None else out
    replies: list[str] = []
    with _connected(host, port, "connect() error!") as sock:
        print("Connected...........", file=out)
        for chunk in _chunks(lines):
            print(PROMPT, end="", file=out)
            if chunk in _QUIT:
                break
            sock.sendall(chunk)
            reply = _recv_exact(sock, len(chunk))
            text = reply.decode("utf-8", errors="replace")
            print(f"Message from server: {text}", end="", file=out)
            if reply:
                replies.append(text)
            if len(reply) < len(chunk):
                break
    return replies


def server_main(argv: list[str] | None = None) -> int:
    """Command: echo server <port>; serves until interrupted."""
    args = _command_args(argv, ("<port>",), "echo")
    if args is None:
        return 0
    try:
        server = make_server("", *args, sys.stdout)
    except OSError as exc:
        return _failed(exc)
    server.daemon_threads = True
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


def client_main(argv: list[str] | None = None) -> int:
    """Command: echo client <IP> <port>; reads lines from standard input."""
    args = _command_args(argv, ("<IP>", "<port>"), "echo", "Usage : ")
    if args is None:
        return 1
    try:
        run_client(*args, sys.stdin, sys.stdout)
    except OSError as exc:
        return _failed(exc)
    return 0