"""Tests for the UDP sink."""

import pytest

from statsd_client.client import StatsdClient
from statsd_client.sink import UDPSink, parse_addr, udp


class TestParseAddr:
    def test_host_and_port(self):
        assert parse_addr("127.0.0.1:9125") == ("127.0.0.1", 9125)

    def test_empty_uses_default(self):
        assert parse_addr("") == ("localhost", 8125)

    def test_empty_host(self):
        assert parse_addr(":8125") == ("localhost", 8125)

    def test_ipv6_brackets(self):
        assert parse_addr("[::1]:8125") == ("::1", 8125)

    @pytest.mark.parametrize("addr", ["localhost", "localhost:", "localhost:abc"])
    def test_invalid(self, addr):
        with pytest.raises(ValueError):
            parse_addr(addr)


class TestUDPSink:
    def test_write_sends_one_datagram(self, udp_receiver):
        receiver, port = udp_receiver
        sink = udp(f"127.0.0.1:{port}")
        try:
            sink.write(b"m:1|c")
            data, _ = receiver.recvfrom(4096)
            assert data == b"m:1|c"
        finally:
            sink.close()

    def test_close_is_idempotent(self, udp_receiver):
        _, port = udp_receiver
        sink = UDPSink("127.0.0.1", port)
        sink.close()
        sink.close()

    def test_write_after_close_raises(self, udp_receiver):
        _, port = udp_receiver
        sink = UDPSink("127.0.0.1", port)
        sink.close()
        with pytest.raises(OSError):
            sink.write(b"m:1|c")

    def test_client_over_udp(self, udp_receiver):
        receiver, port = udp_receiver
        client = StatsdClient(udp(f"127.0.0.1:{port}"), "app.")
        client.increment("requests")
        client.gauge("temp", -3)
        client.close()

        data, _ = receiver.recvfrom(4096)
        assert data == b"app.requests:1|c\napp.temp:0|g\napp.temp:-3|g"
