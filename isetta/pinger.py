"""ICMP echo over a raw socket; needs root privileges."""

from __future__ import annotations

import os
import select
import socket
import struct
import time
from dataclasses import dataclass

from .helper import IsettaError
from .ports import LinuxPinger
from .simplelogger import logger

_ECHO_REQUEST = 8
_ECHO_REPLY = 0
_HEADER = struct.Struct("!BBHHH")
_PAYLOAD = bytes(range(32))


def checksum(data: bytes) -> int:
    """Return the 16-bit one's complement checksum used by ICMP."""
    if len(data) % 2:
        data += b"\x00"
    total = sum(struct.unpack(f"!{len(data) // 2}H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def build_echo_request(identifier: int, sequence: int) -> bytes:
    """Return an ICMP echo request packet with a valid checksum."""
    identifier &= 0xFFFF
    sequence &= 0xFFFF
    unsigned = _HEADER.pack(_ECHO_REQUEST, 0, 0, identifier, sequence) + _PAYLOAD
    return _HEADER.pack(_ECHO_REQUEST, 0, checksum(unsigned), identifier, sequence) + _PAYLOAD


def _is_echo_reply(data: bytes, identifier: int) -> bool:
    if len(data) < 20:
        return False
    icmp = data[(data[0] & 0x0F) * 4:]
    if len(icmp) < _HEADER.size:
        return False
    kind, code, _, ident, _ = _HEADER.unpack(icmp[: _HEADER.size])
    return kind == _ECHO_REPLY and code == 0 and ident == identifier


@dataclass
class IcmpPinger(LinuxPinger):
    """Sends ``count`` echo requests ``interval`` seconds apart, waiting at most ``timeout``."""

    count: int = 2
    interval: float = 0.3
    timeout: float = 2.0

    def ping(self, host: str) -> bool:
        """Return True if at least one echo reply arrived from ``host``."""
        try:
            address = socket.gethostbyname(host)
        except (socket.gaierror, UnicodeError) as err:
            raise IsettaError(f"unable to resolve {host}: {err}") from err
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
        except OSError as err:
            logger.debug("Unable to open ICMP socket: %s", err)
            return False
        with sock:
            try:
                return self._exchange(sock, address)
            except OSError as err:
                logger.debug("Ping of %s failed: %s", host, err)
                return False

    def _exchange(self, sock: socket.socket, address: str) -> bool:
        identifier = os.getpid() & 0xFFFF
        start = time.monotonic()
        deadline = start + self.timeout
        next_send = start
        sent = 0
        while True:
            now = time.monotonic()
            if now >= deadline:
                return False
            if sent < self.count and now >= next_send:
                sock.sendto(build_echo_request(identifier, sent), (address, 0))
                sent += 1
                next_send += self.interval
            wake = min(next_send, deadline) if sent < self.count else deadline
            readable, _, _ = select.select([sock], [], [], max(0.0, wake - time.monotonic()))
            if readable:
                data, source = sock.recvfrom(65535)
                if source[0] == address and _is_echo_reply(data, identifier):
                    return True