"""An operand calculator over a small binary protocol.

A request is one byte holding the operand count, that many 32-bit
little-endian signed integers and one operator byte; the reply is the
32-bit result.
"""

from __future__ import annotations

import socket
import struct
import sys
from collections.abc import Iterable, Iterator
from functools import reduce
from operator import add, mul, sub

from .hello import _command_args, _connected, _failed, _listening, _recv_exact

OPERAND_SIZE = 4
MAX_OPERANDS = 255
DEFAULT_CLIENTS = 5

_OPERATIONS = {"+": add, "-": sub, "*": mul}
_RESULT = struct.Struct("<i")


def _wrap32(value: int) -> int:
    return (value + 2**31) % 2**32 - 2**31


def calculate(operands: Iterable[int], operator: str) -> int:
    """Fold the operands with +, - or *; any other operator yields the first operand."""
    values = list(operands)
    if not values:
        raise ValueError("at least one operand is required")
    operation = _OPERATIONS.get(operator)
    return _wrap32(reduce(operation, values) if operation else values[0])


def encode_request(operands: Iterable[int], operator: str) -> bytes:
    """Build the wire form of a calculation request."""
    values = list(operands)
    if len(values) > MAX_OPERANDS:
        raise ValueError(f"at most {MAX_OPERANDS} operands are allowed")
    op_byte = operator.encode("latin-1")
    if len(op_byte) != 1:
        raise ValueError("operator must be a single character")
    try:
        body = struct.pack(f"<{len(values)}i", *values)
    except struct.error as exc:
        raise ValueError(f"operands must be 32-bit integers: {exc}") from exc
    return bytes([len(values)]) + body + op_byte


def decode_request(data: bytes) -> tuple[list[int], str]:
    """Split a request into its operands and operator."""
    if not data:
        raise ValueError("empty request")
    count = data[0]
    expected = count * OPERAND_SIZE + 2
    if len(data) != expected:
        raise ValueError(f"request of {count} operands must be {expected} bytes, got {len(data)}")
    return list(struct.unpack_from(f"<{count}i", data, 1)), chr(data[-1])


def _read_request(conn: socket.socket) -> bytes | None:
    header = conn.recv(1)
    if not header:
        return None
    data = header + _recv_exact(conn, header[0] * OPERAND_SIZE + 1)
    return data if len(data) == header[0] * OPERAND_SIZE + 2 else None


def serve(port: int, clients: int = DEFAULT_CLIENTS, host: str = "") -> list[int]:
    """Answer *clients* connections, one request each; return the results sent."""
    results: list[int] = []
    with _listening(host, port) as sock:
        for _ in range(clients):
            conn, _address = sock.accept()
            with conn:
                data = _read_request(conn)
                if data is None or data[0] == 0:
                    continue
                result = calculate(*decode_request(data))
                conn.sendall(_RESULT.pack(result))
                results.append(result)
    return results


def _exchange(sock: socket.socket, payload: bytes) -> int:
    sock.sendall(payload)
    reply = _recv_exact(sock, _RESULT.size)
    if len(reply) < _RESULT.size:
        raise ConnectionError("server closed the connection before sending a result")
    return _RESULT.unpack(reply)[0]


def request(host: str, port: int, operands: Iterable[int], operator: str) -> int:
    """Ask the server at *host*:*port* to compute and return the result."""
    payload = encode_request(operands, operator)
    with _connected(host, port, "connect() error!") as sock:
        return _exchange(sock, payload)


def _ask(prompt: str, tokens: Iterator[str]) -> str:
    print(prompt, end="", flush=True)
    try:
        return next(tokens)
    except StopIteration:
        raise EOFError("unexpected end of input") from None


def server_main(argv: list[str] | None = None) -> int:
    """Command: calculator server <port>."""
    args = _command_args(argv, ("<port>",), "opcalc")
    if args is None:
        return 1
    try:
        serve(*args)
    except OSError as exc:
        return _failed(exc)
    return 0


def client_main(argv: list[str] | None = None) -> int:
    """Command: calculator client <IP> <port>, reading operands from standard input."""
    args = _command_args(argv, ("<IP>", "<port>"), "opcalc")
    if args is None:
        return 1
    try:
        sock = _connected(*args, "connect() error!")
    except OSError as exc:
        return _failed(exc)
    with sock:
        print("Connected.........")
        tokens = (token for line in sys.stdin for token in line.split())
        try:
            count = int(_ask("Operand count: ", tokens))
            operands = [int(_ask(f"Operand {n}: ", tokens)) for n in range(1, count + 1)]
            operator = _ask("Operator: ", tokens)[0]
            result = _exchange(sock, encode_request(operands, operator))
        except (EOFError, ValueError) as exc:
            print(f"\n{exc}", file=sys.stderr)
            return 1
        except OSError as exc:
            return _failed(exc)
    print(f"Operation result: {result} ")
    return 0