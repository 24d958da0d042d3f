import io
import socket
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from sockdays.opcalc import (
    calculate,
    client_main,
    decode_request,
    encode_request,
    request,
    serve,
    server_main,
)


def _free_port():
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def _retry(fn, *args):
    deadline = time.monotonic() + 5
    while True:
        try:
            return fn(*args)
        except ConnectionRefusedError:
            if time.monotonic() > deadline:
                raise
            time.sleep(0.02)


def test_calculate_add():
    assert calculate([3, 5, 9], "+") == 17


def test_calculate_subtract():
    assert calculate([10, 4], "-") == 6


def test_calculate_multiply():
    assert calculate([2, 3, 4], "*") == 24


def test_unknown_operator_returns_first_operand():
    assert calculate([7, 8, 9], "/") == 7


def test_single_operand_is_returned():
    for op in "+-*":
        assert calculate([42], op) == 42


def test_calculate_needs_operands():
    with pytest.raises(ValueError):
        calculate([], "+")


def test_calculate_stays_in_32_bits():
    result = calculate([2**31 - 1, 2**31 - 1], "*")
    assert -(2**31) <= result < 2**31


def test_encode_wire_bytes():
    assert encode_request([1, 2], "+") == b"\x02\x01\x00\x00\x00\x02\x00\x00\x00+"


def test_encode_decode_round_trip():
    operands = [-5, 0, 123456, -(2**31), 2**31 - 1]
    data = encode_request(operands, "*")
    assert len(data) == len(operands) * 4 + 2
    assert decode_request(data) == (operands, "*")


def test_encode_rejects_bad_operator():
    with pytest.raises(ValueError):
        encode_request([1], "++")


def test_encode_rejects_too_many_operands():
    with pytest.raises(ValueError):
        encode_request([1] * 256, "+")


def test_encode_rejects_out_of_range_operand():
    with pytest.raises(ValueError):
        encode_request([2**31], "+")


def test_decode_rejects_wrong_length():
    with pytest.raises(ValueError):
        decode_request(b"\x02\x01\x00\x00\x00+")


def test_decode_rejects_empty():
    with pytest.raises(ValueError):
        decode_request(b"")


def test_serve_and_request():
    port = _free_port()
    cases = [([3, 5, 9], "+"), ([10, 4, 1], "-")]
    with ThreadPoolExecutor(1) as pool:
        future = pool.submit(serve, port, len(cases), "127.0.0.1")
        answers = [_retry(request, "127.0.0.1", port, ops, op) for ops, op in cases]
        results = future.result(timeout=5)
    expected = [calculate(ops, op) for ops, op in cases]
    assert answers == expected
    assert results == expected


def test_request_without_operands_gets_no_result():
    port = _free_port()
    with ThreadPoolExecutor(1) as pool:
        future = pool.submit(serve, port, 1, "127.0.0.1")
        with pytest.raises(ConnectionError):
            _retry(request, "127.0.0.1", port, [], "+")
        assert future.result(timeout=5) == []


def test_client_main_reads_stdin(monkeypatch, capsys):
    port = _free_port()
    monkeypatch.setattr("sys.stdin", io.StringIO("3\n4\n5\n6\n*\n"))
    with ThreadPoolExecutor(1) as pool:
        future = pool.submit(serve, port, 2, "127.0.0.1")
        warmup = _retry(request, "127.0.0.1", port, [1, 1], "+")
        status = client_main(["127.0.0.1", str(port)])
        results = future.result(timeout=5)
    out = capsys.readouterr().out
    expected = calculate([4, 5, 6], "*")
    assert status == 0
    assert "Connected........." in out
    assert "Operand 3: " in out
    assert f"Operation result: {expected} \n" in out
    assert results == [warmup, expected]


def test_client_main_usage(capsys):
    assert client_main([]) == 1
    assert "<IP> <port>" in capsys.readouterr().out


def test_server_main_usage(capsys):
    assert server_main(["1", "2"]) == 1
    assert "<port>" in capsys.readouterr().out


def test_serve_bind_error():
    with socket.socket() as blocker:
        blocker.bind(("127.0.0.1", 0))
        blocker.listen(1)
        port = blocker.getsockname()[1]
        with pytest.raises(OSError, match="bind"):
            serve(port, 1, "127.0.0.1")