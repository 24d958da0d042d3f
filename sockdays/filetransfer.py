"""Send one file to one client over TCP, with a half-close and a thank-you reply."""

from __future__ import annotations

import os
import socket
import sys
from pathlib import Path
from typing import TextIO

from .hello import _command_args, _connected, _errif, _failed, _listening

BUF_SIZE = 30
THANKS = b"Thank you\0"
DEFAULT_DEST = "receive.cpp"


def send_file(
    path: str | os.PathLike[str],
    port: int,
    host: str = "",
    out: TextIO | None = None,
) -> str:
    """Stream *path* to the first client, half-close, and return the client's reply."""
    out = sys.stdout if out is None else out
    with open(path, "rb") as source, _listening(host, port) as sock:
        with _errif("accept() error"):
            conn, _address = sock.accept()
        with conn:
            while chunk := source.read(BUF_SIZE):
                conn.sendall(chunk)
            conn.shutdown(socket.SHUT_WR)
            reply = conn.recv(BUF_SIZE)
    message = reply.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    print(f"Message from client: {message} ", file=out)
    return message


def receive_file(
    host: str,
    port: int,
    dest: str | os.PathLike[str] = DEFAULT_DEST,
    out: TextIO | None = None,
) -> int:
    """Save everything the server sends into *dest*, thank it, and return the byte count."""
    out = sys.stdout if out is None else out
    total = 0
    with open(dest, "wb") as sink, _connected(host, port) as sock:
        while chunk := sock.recv(BUF_SIZE):
            sink.write(chunk)
            total += len(chunk)
        print("Received file data", file=out)
        sock.sendall(THANKS)
    return total


def server_main(argv: list[str] | None = None) -> int:
    """Command: file server <port>; sends this module's own source."""
    args = _command_args(argv, ("<port>",), "filetransfer", "Usage : ")
    if args is None:
        return 1
    try:
        send_file(Path(__file__), *args)
    except OSError as exc:
        return _failed(exc)
    return 0


def client_main(argv: list[str] | None = None) -> int:
    """Command: file client <IP> <port>; writes what it receives to receive.cpp."""
    args = _command_args(argv, ("<IP>", "<port>"), "filetransfer", "Usage : ")
    if args is None:
        return 1
    try:
        receive_file(*args)
    except OSError as exc:
        return _failed(exc)
    return 0