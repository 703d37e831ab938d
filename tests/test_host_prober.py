"""
tests/test_host_prober.py
Unit tests for core/host_prober.py using a scripted fake raw socket.
Run: pytest tests/test_host_prober.py -v
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import ipaddress
import socket
from unittest.mock import patch

import pytest
from core.host_prober import probe_host
from core.icmp import IcmpEchoPacket, IcmpEchoType, internet_checksum
from utils.constants import AddressFamily, HostStatus, ICMP_IDENTIFIER


V4 = ipaddress.ip_address("192.0.2.10")
V6 = ipaddress.ip_address("2001:db8::10")

IPV4_HEADER = bytes([0x45]) + bytes(19)


def v4_reply(payload=b"hostsweep"):
    return IPV4_HEADER + IcmpEchoPacket(IcmpEchoType.REPLY, ICMP_IDENTIFIER, 0, payload).encode()


def v6_reply(payload=b"hostsweep"):
    return IcmpEchoPacket(IcmpEchoType.REPLY_V6, ICMP_IDENTIFIER, 0, payload).encode()


class FakeClock:
    """Manual clock; each recv() can advance it."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now


class FakeSocket:
    """
    Stands in for RawSocket. `script` items are returned from recv() in
    order: bytes are delivered, exceptions are raised. Each recv() advances
    the clock by `recv_cost` seconds.
    """

    instances = []

    def __init__(self, family, script, clock, recv_cost=0.1):
        self.family = family
        self.script = list(script)
        self.clock = clock
        self.recv_cost = recv_cost
        self.connected_to = None
        self.sent = []
        self.timeouts = []
        self.closed = False
        FakeSocket.instances.append(self)

    def connect(self, address):
        self.connected_to = address

    def send(self, data):
        self.sent.append(data)
        return len(data)

    def set_timeout(self, seconds):
        self.timeouts.append(seconds)

    def recv(self, bufsize=65535):
        self.clock.now += self.recv_cost
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


@pytest.fixture
def clock():
    return FakeClock()


def run(address, script, clock, timeout=1.0, recv_cost=0.1):
    holder = {}

    def factory(family):
        holder["sock"] = FakeSocket(family, script, clock, recv_cost)
        return holder["sock"]

    status = probe_host(address, timeout, socket_factory=factory, clock=clock)
    return status, holder["sock"]


# ── Outcomes ──────────────────────────────────────────────────────────────────

class TestOutcomes:
    def test_ipv4_reply_is_up(self, clock):
        status, sock = run(V4, [v4_reply()], clock)
        assert status is HostStatus.UP
        assert sock.family is AddressFamily.IPV4
        assert sock.connected_to == V4

    def test_ipv6_reply_is_up(self, clock):
        status, sock = run(V6, [v6_reply()], clock)
        assert status is HostStatus.UP
        assert sock.family is AddressFamily.IPV6

    def test_timeout_is_down(self, clock):
        status, _ = run(V4, [socket.timeout("timed out")], clock)
        assert status is HostStatus.DOWN

    def test_would_block_is_down(self, clock):
        status, _ = run(V4, [BlockingIOError()], clock)
        assert status is HostStatus.DOWN

    def test_other_os_error_propagates(self, clock):
        with pytest.raises(OSError, match="unreachable"):
            run(V4, [OSError(113, "No route to host: unreachable")], clock)

    def test_permission_error_on_open_propagates(self, clock):
        def factory(family):
            raise PermissionError(1, "Operation not permitted")

        with pytest.raises(PermissionError):
            probe_host(V4, 1.0, socket_factory=factory, clock=clock)


# ── Retry loop ────────────────────────────────────────────────────────────────

class TestRetryLoop:
    def test_garbage_then_reply_is_up(self, clock):
        garbage = IPV4_HEADER + bytes([3, 1, 0, 0, 0, 0, 0, 0])
        status, sock = run(V4, [garbage, b"", v4_reply()], clock)
        assert status is HostStatus.UP
        assert len(sock.sent) == 3

    def test_ipv6_neighbour_discovery_is_ignored(self, clock):
        neighbour_advert = bytes([136, 0, 0, 0, 0, 0, 0, 0])
        status, _ = run(V6, [neighbour_advert, v6_reply()], clock)
        assert status is HostStatus.UP

    def test_only_garbage_until_deadline_is_down(self, clock):
        garbage = IPV4_HEADER + bytes([11, 0, 0, 0, 0, 0, 0, 0])
        status, sock = run(V4, [garbage] * 10, clock, timeout=1.0, recv_cost=0.3)
        assert status is HostStatus.DOWN
        # 0.3s per receive against a 1s budget: 4 attempts, then deadline
        assert len(sock.sent) == 4

    def test_receive_timeout_shrinks_with_remaining_budget(self, clock):
        garbage = b"\x03\x00"
        status, sock = run(V4, [garbage, garbage, v4_reply()], clock,
                           timeout=1.0, recv_cost=0.25)
        assert status is HostStatus.UP
        assert sock.timeouts == pytest.approx([1.0, 0.75, 0.5])

    def test_timeout_after_garbage_is_down(self, clock):
        status, sock = run(V4, [b"junk", socket.timeout()], clock)
        assert status is HostStatus.DOWN
        assert len(sock.sent) == 2


# ── Request / resource handling ───────────────────────────────────────────────

class TestRequest:
    def test_ipv4_request_has_valid_checksum(self, clock):
        _, sock = run(V4, [v4_reply()], clock)
        raw = sock.sent[0]
        pkt = IcmpEchoPacket.decode(raw)
        assert pkt.type is IcmpEchoType.REQUEST
        assert pkt.identifier == ICMP_IDENTIFIER
        assert pkt.sequence_number == 0
        assert pkt.payload.startswith(b"hostsweep/")
        assert internet_checksum(raw) == 0

    def test_ipv6_request_leaves_checksum_zero(self, clock):
        _, sock = run(V6, [v6_reply()], clock)
        assert sock.sent[0][0] == 128
        assert sock.sent[0][2:4] == b"\x00\x00"

    def test_socket_closed_on_up(self, clock):
        _, sock = run(V4, [v4_reply()], clock)
        assert sock.closed

    def test_socket_closed_on_down(self, clock):
        _, sock = run(V4, [socket.timeout()], clock)
        assert sock.closed

    def test_socket_closed_on_error(self, clock):
        FakeSocket.instances.clear()
        with pytest.raises(OSError):
            run(V4, [OSError(22, "Invalid argument")], clock)
        assert FakeSocket.instances[-1].closed

    def test_default_factory_is_raw_socket(self):
        with patch("core.host_prober.RawSocket") as raw_cls:
            sock = raw_cls.return_value.__enter__.return_value
            sock.recv.return_value = v4_reply()
            assert probe_host(V4, 1.0) is HostStatus.UP
            raw_cls.assert_called_once_with(AddressFamily.IPV4)
            sock.connect.assert_called_once_with(V4)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
