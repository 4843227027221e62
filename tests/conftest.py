import socket
import threading

import pytest
from werkzeug.serving import make_server

from test_server.local_echo_server import app


@pytest.fixture
def echo_server():
    """Flask echo app on a free local port; yields the base URL"""
    server = make_server('127.0.0.1', 0, app)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


@pytest.fixture
def raw_server():
    """
    Start a one-shot socket server that reads a request head, answers with
    canned bytes and closes. Returns (port, received) where received is a
    list the request bytes end up in.
    """
    listeners = []
    threads = []

    def start(reply):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind(('127.0.0.1', 0))
        listener.listen(1)
        listeners.append(listener)
        received = []

        def serve():
            conn, _ = listener.accept()
            with conn:
                data = b''
                while b'\r\n\r\n' not in data:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    data += chunk
                received.append(data)
                if reply:
                    conn.sendall(reply)

        thread = threading.Thread(target=serve, daemon=True)
        thread.start()
        threads.append(thread)
        return listener.getsockname()[1], received

    yield start

    for thread in threads:
        thread.join(timeout=5)
    for listener in listeners:
        listener.close()


@pytest.fixture
def closed_port():
    """A local port with nothing listening on it"""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(('127.0.0.1', 0))
    port = s.getsockname()[1]
    s.close()
    return port
