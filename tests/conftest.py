"""Shared fixtures: loopback TCP and TLS servers."""

import socket
import ssl
import threading

import pytest
import trustme


class LoopbackServer:
    """Accepts connections on 127.0.0.1 in a background thread.

    Each accepted connection is passed to handler in its own thread and
    closed afterwards.
    """

    def __init__(self, handler=None):
        self.handler = handler
        self.accepted = 0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(128)
        self._sock.settimeout(0.1)
        self.port = self._sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def address(self) -> str:
        return f"127.0.0.1:{self.port}"

    def start(self):
        self._thread.start()
        return self

    def stop(self):
        self._stop.set()
        self._thread.join(timeout=2)
        self._sock.close()

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            with self._lock:
                self.accepted += 1
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn):
        conn.settimeout(5)
        try:
            if self.handler is not None:
                self.handler(conn)
        except OSError:
            # Probes and rejected handshakes end here
            pass
        finally:
            conn.close()


@pytest.fixture
def tcp_server():
    """Plain TCP listener that closes every connection right away."""
    server = LoopbackServer().start()
    yield server
    server.stop()


@pytest.fixture
def closed_port():
    """A loopback port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture(scope="session")
def ca():
    """Throwaway certificate authority."""
    return trustme.CA()


@pytest.fixture(scope="session")
def ca_pem(ca) -> str:
    """PEM text of the throwaway CA certificate."""
    return ca.cert_pem.bytes().decode("ascii")


@pytest.fixture
def tls_server(ca):
    """TLS listener presenting a certificate for localhost and 127.0.0.1."""
    server_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ca.issue_cert("localhost", "127.0.0.1").configure_cert(server_context)

    def handshake(conn):
        with server_context.wrap_socket(conn, server_side=True):
            pass

    server = LoopbackServer(handler=handshake).start()
    yield server
    server.stop()


@pytest.fixture
def mutual_tls_server(ca):
    """TLS listener that also requires a client certificate signed by the test CA."""
    server_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ca.issue_cert("localhost", "127.0.0.1").configure_cert(server_context)
    ca.configure_trust(server_context)
    server_context.verify_mode = ssl.CERT_REQUIRED

    def handshake(conn):
        with server_context.wrap_socket(conn, server_side=True):
            pass

    server = LoopbackServer(handler=handshake).start()
    yield server
    server.stop()


@pytest.fixture
def silent_server():
    """Listener that reads whatever the client sends and never answers."""

    def drain(conn):
        while conn.recv(4096):
            pass

    server = LoopbackServer(handler=drain).start()
    yield server
    server.stop()
