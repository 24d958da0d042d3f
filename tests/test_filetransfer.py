import io
import socket
import threading
import time

import pytest

from sockdays.filetransfer import client_main, receive_file, send_file, server_main


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def _transfer(tmp_path, content):
    src = tmp_path / "src.bin"
    src.write_bytes(content)
    dest = tmp_path / "dest.bin"
    port = _free_port()
    server_out = io.StringIO()
    client_out = io.StringIO()
    result = {}

    def serve():
        try:
            result["message"] = send_file(src, port, "127.0.0.1", server_out)
        except BaseException as exc:  # noqa: BLE001
            result["error"] = exc

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    deadline = time.monotonic() + 10
    while True:
        try:
            count = receive_file("127.0.0.1", port, dest, client_out)
            break
        except ConnectionRefusedError:
            if time.monotonic() > deadline or not thread.is_alive():
                raise
            time.sleep(0.02)
    thread.join(10)
    assert "error" not in result
    return result["message"], count, dest.read_bytes(), server_out.getvalue(), client_out.getvalue()


@pytest.mark.parametrize(
    "content",
    [b"", b"x" * 30, b"y" * 61, bytes(range(256))],
)
def test_transfer_round_trip(tmp_path, content):
    message, count, received, _server_text, _client_text = _transfer(tmp_path, content)
    assert received == content
    assert count == len(content)
    assert message == "Thank you"


def test_transfer_messages(tmp_path):
    _message, _count, _received, server_text, client_text = _transfer(tmp_path, b"payload data\n")
    assert server_text == "Message from client: Thank you \n"
    assert client_text == "Received file data\n"


def test_send_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        send_file(tmp_path / "missing.bin", _free_port(), "127.0.0.1", io.StringIO())


def test_receive_refused(tmp_path):
    with pytest.raises(ConnectionRefusedError) as info:
        receive_file("127.0.0.1", _free_port(), tmp_path / "out.bin", io.StringIO())
    assert "connect() error" in str(info.value)


def test_server_main_usage(capsys):
    assert server_main([]) == 1
    assert "Usage" in capsys.readouterr().out


def test_client_main_usage(capsys):
    assert client_main(["127.0.0.1"]) == 1
    assert "<IP> <port>" in capsys.readouterr().out


def test_client_main_bad_port(capsys):
    assert client_main(["127.0.0.1", "notaport"]) == 1
    assert "Usage" in capsys.readouterr().out