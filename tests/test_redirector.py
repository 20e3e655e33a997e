import socket
import threading

import pytest

from relaykit.redirector import Redirection, Redirector

RESPONSE = b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"


@pytest.fixture
def http_target():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen()

    def serve():
        while True:
            try:
                conn, _ = server.accept()
            except OSError:
                return
            with conn:
                data = b""
                while b"\r\n\r\n" not in data:
                    chunk = conn.recv(1024)
                    if not chunk:
                        break
                    data += chunk
                conn.sendall(RESPONSE)

    threading.Thread(target=serve, daemon=True).start()
    yield server.getsockname()
    server.close()


def _connected_pair():
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen()
    client = socket.create_connection(listener.getsockname())
    inbound, _ = listener.accept()
    listener.close()
    client.settimeout(5)
    return client, inbound


def test_redirects_to_target(http_target):
    with Redirector() as redir:
        client, inbound = _connected_pair()
        assert redir.redirect(Redirection())
        assert redir.redirect(Redirection(redirect_to=http_target, inbound_conn=None))
        assert redir.redirect(Redirection(redirect_to=http_target, inbound_conn=inbound))
        client.sendall(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
        data = client.recv(1024)
        client.close()
    assert data.startswith(b"HTTP/1.1 200 OK")


def test_missing_target_closes_inbound():
    with Redirector() as redir:
        client, inbound = _connected_pair()
        assert redir.redirect(Redirection(redirect_to=None, inbound_conn=inbound))
        assert client.recv(1024) == b""
        client.close()


def test_custom_dial_is_used(http_target):
    dialed = []

    def dial(address):
        dialed.append(address)
        return socket.create_connection(address)

    with Redirector() as redir:
        client, inbound = _connected_pair()
        redir.redirect(Redirection(redirect_to=http_target, inbound_conn=inbound, dial=dial))
        client.sendall(b"GET / HTTP/1.1\r\n\r\n")
        data = client.recv(1024)
        client.close()
    assert data.startswith(b"HTTP/1.1 200 OK")
    assert dialed == [http_target]


def test_dial_failure_closes_inbound():
    attempts = []

    def dial(address):
        attempts.append(address)
        raise ConnectionRefusedError("refused")

    with Redirector() as redir:
        client, inbound = _connected_pair()
        accepted = redir.redirect(
            Redirection(redirect_to=("127.0.0.1", 1), inbound_conn=inbound, dial=dial)
        )
        received = client.recv(1024)
        client.close()
    assert accepted is True
    assert received == b""
    assert attempts == [("127.0.0.1", 1)]


def test_redirect_after_close_is_refused():
    redir = Redirector()
    redir.close()
    assert redir.redirect(Redirection()) is False