"""Blocking echo over fixed-size frames: one server, one client, one session."""

from __future__ import annotations

import socket
import sys
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TextIO

HOST = "127.0.0.1"
PORT = 8888
FRAME_SIZE = 1024


@contextmanager
def _errif(message: str) -> Iterator[None]:
    """Re-raise any socket failure with *message* in front of the system reason."""
    try:
        yield
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise OSError(exc.errno, f"{message}: {reason}") from exc


def _frame(data: bytes) -> bytes:
    return data[:FRAME_SIZE].ljust(FRAME_SIZE, b"\0")


def _text(buf: bytes) -> str:
    return buf.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _recv_frame(sock: socket.socket) -> bytes:
    buf = bytearray()
    while len(buf) < FRAME_SIZE:
        chunk = sock.recv(FRAME_SIZE - len(buf))
        if not chunk:
            break
        buf += chunk
    return bytes(buf)


def _chunks(lines: Iterable[str]) -> Iterator[bytes]:
    """Split each line the way a 1024-byte line reader would."""
    step = FRAME_SIZE - 1
    for line in lines:
        data = line.encode("utf-8")
        for start in range(0, len(data), step):
            yield data[start:start + step]


def echo_session(conn: socket.socket, out: TextIO | None = None) -> list[str]:
    """Echo frames back on *conn* until the peer disconnects; return the messages."""
    out = sys.stdout if out is None else out
    fd = conn.fileno()
    messages: list[str] = []
    while True:
        with _errif("socket read error!"):
            buf = conn.recv(FRAME_SIZE)
        if not buf:
            print(f"client fd {fd} disconnected", file=out)
            return messages
        text = _text(buf)
        messages.append(text)
        print(f"message from client fd {fd}: {text}", file=out)
        with _errif("socket write error"):
            conn.sendall(_frame(buf))


def run_server(host: str = HOST, port: int = PORT, out: TextIO | None = None) -> list[str]:
    """Accept a single client and echo its frames; return what it sent."""
    out = sys.stdout if out is None else out
    with _errif("socket create error"):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    with sock:
        with _errif("socket bind error"):
            sock.bind((host, port))
        with _errif("socket listen error"):
            sock.listen(socket.SOMAXCONN)
        with _errif("socket accept error"):
            conn, (ip, client_port) = sock.accept()
        with conn:
            print(f"new client fd {conn.fileno()}! IP: {ip} Port: {client_port}", file=out)
            return echo_session(conn, out)


def run_client(
    host: str = HOST,
    port: int = PORT,
    lines: Iterable[str] = (),
    out: TextIO | None = None,
) -> list[str]:
    """Send each line as a frame and collect the server's replies."""
    out = sys.stdout if out is None else out
    replies: list[str] = []
    with _errif("socket create error"):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    with sock:
        with _errif("socket connect error"):
            sock.connect((host, port))
        for chunk in _chunks(lines):
            try:
                sock.sendall(_frame(chunk))
            except OSError:
                print("socket already disconnected, can't write any more!", file=out)
                break
            with _errif("socket read error?"):
                reply = _recv_frame(sock)
            if not reply:
                print("server socket disconnected!", file=out)
                break
            text = _text(reply)
            replies.append(text)
            print(f"message from server: {text}", file=out)
    return replies


def server_main(argv: list[str] | None = None) -> int:
    """Serve one echo client on the fixed local address. Arguments are ignored."""
    try:
        run_server(HOST, PORT, sys.stdout)
    except OSError as exc:
        print(exc.strerror or exc, file=sys.stderr)
        return 1
    return 0


def client_main(argv: list[str] | None = None) -> int:
    """Echo standard input lines through the fixed local server. Arguments are ignored."""
    try:
        run_client(HOST, PORT, sys.stdin, sys.stdout)
    except OSError as exc:
        print(exc.strerror or exc, file=sys.stderr)
        return 1
    return 0