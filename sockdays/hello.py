"""A server that greets one client and a client that reads the greeting byte by byte.

The socket and command-line helpers here are shared by the other commands.
"""

from __future__ import annotations

import os
import socket
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

MESSAGE = "Hello World!"
BACKLOG = 5


@contextmanager
def _errif(message: str, detail: bool = True) -> Iterator[None]:
    """Re-raise socket failures labelled with *message*, with the system reason if *detail*."""
    try:
        yield
    except OSError as exc:
        text = f"{message}: {exc.strerror or exc}" if detail else message
        raise OSError(exc.errno, text) from exc


def _tcp_socket(detail: bool = True) -> socket.socket:
    with _errif("socket() error", detail):
        return socket.socket(socket.AF_INET, socket.SOCK_STREAM)


def _listening(host: str, port: int, backlog: int = BACKLOG, detail: bool = True) -> socket.socket:
    sock = _tcp_socket(detail)
    try:
        with _errif("bind() error", detail):
            sock.bind((host, port))
        with _errif("listen() error", detail):
            sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    return sock


def _connected(
    host: str, port: int, message: str = "connect() error", detail: bool = True
) -> socket.socket:
    sock = _tcp_socket(detail)
    try:
        with _errif(message, detail):
            sock.connect((host, port))
    except OSError:
        sock.close()
        raise
    return sock


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    """Read *size* bytes, or fewer if the peer closes first."""
    buf = bytearray()
    while len(buf) < size:
        chunk = sock.recv(size - len(buf))
        if not chunk:
            break
        buf += chunk
    return bytes(buf)


def _parse_port(text: str) -> int:
    port = int(text)
    if not 0 <= port <= 65535:
        raise ValueError(f"port out of range: {port}")
    return port


def _command_args(
    argv: Sequence[str] | None, params: Sequence[str], fallback: str, label: str = "Usage: "
) -> list | None:
    """Parse arguments ending in a port; print the usage line and return None if they are wrong."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) == len(params):
        try:
            return [*args[:-1], _parse_port(args[-1])]
        except ValueError:
            pass
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else fallback
    print(f"{label}{prog} {' '.join(params)}")
    return None


def _failed(exc: OSError) -> int:
    print(exc.strerror or exc, file=sys.stderr)
    return 1


def serve_hello(port: int, host: str = "", message: str = MESSAGE) -> tuple[str, int]:
    """Send *message* plus a terminating NUL to one client; return its address."""
    payload = message.encode("utf-8") + b"\0"
    with _listening(host, port, detail=False) as sock:
        with _errif("accept() error", detail=False):
            conn, address = sock.accept()
        with conn:
            conn.sendall(payload)
    return address


def fetch_message(host: str, port: int) -> tuple[str, int]:
    """Read the server's message one byte per call; return the text and the call count."""
    received = bytearray()
    with _connected(host, port, detail=False) as sock:
        while True:
            with _errif("read() error!", detail=False):
                byte = sock.recv(1)
            if not byte:
                break
            received += byte
    text = bytes(received).split(b"\0", 1)[0].decode("utf-8", errors="replace")
    return text, len(received)


def server_main(argv: list[str] | None = None) -> int:
    """Command: hello server <port>."""
    args = _command_args(argv, ("<port>",), "hello")
    if args is None:
        return 1
    try:
        serve_hello(*args)
    except OSError as exc:
        return _failed(exc)
    return 0


def client_main(argv: list[str] | None = None) -> int:
    """Command: hello client <IP> <port>."""
    args = _command_args(argv, ("<IP>", "<port>"), "hello")
    if args is None:
        return 1
    try:
        text, reads = fetch_message(*args)
    except OSError as exc:
        return _failed(exc)
    print(f"Message from server: {text} ")
    print(f"Function read call count: {reads}")
    return 0