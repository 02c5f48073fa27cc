"""Tests for tlsping.dialers TCP and TLS strategies."""

import ssl
import threading
import time

import pytest

from tlsping.dialers import TCPDialer, TLSDialer, build_tls_context, select_dialer
from tlsping.errors import ConnectError, TLSHandshakeError
from tlsping.models import MeasurementConfig, ResolvedTarget


def loopback(port, host="localhost"):
    return ResolvedTarget(host=host, ip="127.0.0.1", port=str(port))


class TestTCPDialer:
    """Test plain TCP connect-and-close."""

    def test_connects_to_listener(self, tcp_server):
        """Test a successful dial returns None and reaches the server."""
        TCPDialer(loopback(tcp_server.port)).connect_and_close()

    def test_refused_raises_connect_error(self, closed_port):
        """Test a refused dial raises ConnectError carrying the OSError."""
        dialer = TCPDialer(loopback(closed_port), address=f"localhost:{closed_port}")

        with pytest.raises(ConnectError) as excinfo:
            dialer.connect_and_close()
        assert isinstance(excinfo.value.cause, OSError)
        assert excinfo.value.address == f"localhost:{closed_port}"
        assert f"127.0.0.1:{closed_port}" in str(excinfo.value)

    def test_concurrent_calls(self, tcp_server):
        """Test one dialer can be used from several threads at once."""
        dialer = TCPDialer(loopback(tcp_server.port))
        errors = []

        def dial():
            try:
                dialer.connect_and_close()
            except ConnectError as e:
                errors.append(e)

        threads = [threading.Thread(target=dial) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []


class TestTLSDialer:
    """Test TLS handshake against a loopback TLS server."""

    def test_handshake_with_trusted_ca(self, tls_server, ca_pem):
        """Test the handshake succeeds when the CA is in the trust roots."""
        context = build_tls_context(MeasurementConfig(trust_roots=ca_pem))
        TLSDialer(loopback(tls_server.port), context).connect_and_close()

    def test_untrusted_certificate_fails(self, tls_server):
        """Test verification against platform roots rejects the test CA."""
        context = build_tls_context(MeasurementConfig())

        with pytest.raises(TLSHandshakeError) as excinfo:
            TLSDialer(loopback(tls_server.port), context).connect_and_close()
        assert isinstance(excinfo.value.cause, ssl.SSLCertVerificationError)

    def test_skip_verify_accepts_untrusted_certificate(self, tls_server):
        """Test skip_verify ignores an unknown issuer."""
        context = build_tls_context(MeasurementConfig(skip_verify=True))
        TLSDialer(loopback(tls_server.port), context).connect_and_close()

    def test_host_name_mismatch_fails(self, tls_server, ca_pem):
        """Test the resolved host name is checked against the certificate."""
        context = build_tls_context(MeasurementConfig(trust_roots=ca_pem))
        target = loopback(tls_server.port, host="wrong.example")

        with pytest.raises(TLSHandshakeError):
            TLSDialer(target, context).connect_and_close()

    def test_plain_tcp_server_fails_handshake(self, tcp_server):
        """Test a server that never speaks TLS yields TLSHandshakeError."""
        context = build_tls_context(MeasurementConfig(skip_verify=True))

        with pytest.raises(TLSHandshakeError):
            TLSDialer(loopback(tcp_server.port), context).connect_and_close()

    def test_unencodable_server_name_raises_handshake_error(self, tls_server):
        """Test an SNI name that cannot be IDNA-encoded becomes TLSHandshakeError."""
        context = build_tls_context(MeasurementConfig(skip_verify=True))
        target = loopback(tls_server.port, host=".example.com")

        with pytest.raises(TLSHandshakeError) as excinfo:
            TLSDialer(target, context).connect_and_close()
        assert isinstance(excinfo.value.cause, ValueError)

    def test_unresponsive_server_times_out(self, silent_server):
        """Test connect and handshake together stay within the dial timeout."""
        context = build_tls_context(MeasurementConfig(skip_verify=True))
        dialer = TLSDialer(loopback(silent_server.port), context, timeout=0.5)

        start = time.monotonic()
        with pytest.raises(TLSHandshakeError) as excinfo:
            dialer.connect_and_close()

        assert time.monotonic() - start < 2.0
        assert isinstance(excinfo.value.cause, OSError)

    def test_refused_raises_connect_error(self, closed_port):
        """Test TCP failures are reported as ConnectError, not handshake errors."""
        context = build_tls_context(MeasurementConfig(skip_verify=True))

        with pytest.raises(ConnectError):
            TLSDialer(loopback(closed_port), context).connect_and_close()


class TestBuildTLSContext:
    """Test SSL context construction."""

    def test_default_verifies(self):
        """Test certificates and host names are verified by default."""
        context = build_tls_context(MeasurementConfig())

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True

    def test_skip_verify(self):
        """Test skip_verify disables all verification."""
        context = build_tls_context(MeasurementConfig(skip_verify=True))

        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False

    def test_custom_roots_replace_defaults(self, ca_pem):
        """Test only the supplied CA is trusted."""
        context = build_tls_context(MeasurementConfig(trust_roots=ca_pem))
        assert context.cert_store_stats()["x509_ca"] == 1


class TestSelectDialer:
    """Test the dial strategy is picked from the configuration."""

    def test_tcp_only(self):
        """Test tcp_only selects the TCP strategy."""
        dialer = select_dialer(MeasurementConfig(tcp_only=True), loopback(443))
        assert isinstance(dialer, TCPDialer)

    def test_tls_by_default(self):
        """Test TLS is the default strategy and carries the host as server name."""
        dialer = select_dialer(MeasurementConfig(skip_verify=True), loopback(443))

        assert isinstance(dialer, TLSDialer)
        assert dialer.target.host == "localhost"
        assert dialer.context.verify_mode == ssl.CERT_NONE
