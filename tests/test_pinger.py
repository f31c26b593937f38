import os
import socket
import struct
from unittest import mock

import pytest

from isetta.helper import IsettaError
from isetta.pinger import IcmpPinger, build_echo_request, checksum


def _reply(identifier):
    return bytes([0x45]) + bytes(19) + struct.pack("!BBHHH", 0, 0, 0, identifier & 0xFFFF, 0)


def test_checksum_rfc1071_example():
    assert checksum(bytes([0x00, 0x01, 0xF2, 0x03, 0xF4, 0xF5, 0xF6, 0xF7])) == 0x220D


def test_checksum_of_odd_length_pads_with_zero():
    assert checksum(b"\x12") == checksum(b"\x12\x00")


def test_echo_request_fields():
    packet = build_echo_request(0x1234, 7)
    kind, code, _, identifier, sequence = struct.unpack("!BBHHH", packet[:8])
    assert (kind, code, identifier, sequence) == (8, 0, 0x1234, 7)


def test_echo_request_checksum_verifies():
    assert checksum(build_echo_request(42, 1)) == 0


def test_unresolvable_host_raises():
    with mock.patch("socket.gethostbyname", side_effect=socket.gaierror("no such host")):
        with pytest.raises(IsettaError):
            IcmpPinger().ping("no-such-host")


def test_ping_false_without_raw_socket_permission():
    with mock.patch("socket.gethostbyname", return_value="127.0.0.1"), mock.patch(
        "socket.socket", side_effect=PermissionError("operation not permitted")
    ):
        assert IcmpPinger().ping("localhost") is False


def test_ping_true_on_echo_reply():
    sock = mock.MagicMock()
    sock.recvfrom.return_value = (_reply(os.getpid()), ("127.0.0.1", 0))
    with mock.patch("socket.gethostbyname", return_value="127.0.0.1"), mock.patch(
        "socket.socket", return_value=sock
    ), mock.patch("select.select", return_value=([sock], [], [])):
        assert IcmpPinger().ping("localhost") is True
    packet, target = sock.sendto.call_args.args
    assert target == ("127.0.0.1", 0)
    assert packet[0] == 8


def test_ping_ignores_replies_for_other_identifiers():
    sock = mock.MagicMock()
    sock.recvfrom.return_value = (_reply(os.getpid() + 1), ("127.0.0.1", 0))
    with mock.patch("socket.gethostbyname", return_value="127.0.0.1"), mock.patch(
        "socket.socket", return_value=sock
    ), mock.patch("select.select", return_value=([sock], [], [])):
        assert IcmpPinger(timeout=0.05).ping("localhost") is False
    assert sock.sendto.call_count == 1