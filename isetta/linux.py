"""Configuration of addresses and routes on the Linux side with the ``ip`` tool."""

from __future__ import annotations

import ipaddress
import subprocess
from dataclasses import dataclass

from .helper import IsettaError
from .ports import LinuxConfigurer
from .simplelogger import logger


def _interface(ip: str, subnet_mask: str) -> ipaddress.IPv4Interface:
    try:
        return ipaddress.IPv4Interface(f"{ip}/{subnet_mask}")
    except ValueError as err:
        raise IsettaError(f"Error parsing IP address {ip} with mask {subnet_mask}: {err}") from err


def get_cidr_notation(ip: str, subnet_mask: str) -> str:
    """Return the address in CIDR notation, e.g. ``192.168.2.1/24``."""
    return str(_interface(ip, subnet_mask))


def get_broadcast(ip: str, subnet_mask: str) -> str:
    """Return the broadcast address of the network the address belongs to."""
    return str(_interface(ip, subnet_mask).network.broadcast_address)


def _run(args: list[str]) -> tuple[bool, str]:
    try:
        proc = subprocess.run(
            args, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, errors="replace"
        )
    except OSError as err:
        return False, str(err)
    return proc.returncode == 0, proc.stdout or ""


@dataclass
class IpRouteConfigurer(LinuxConfigurer):
    windows_ip: str
    linux_ip: str
    subnet_mask: str

    def set_p2p_interface(self) -> str:
        """Add the Linux point-to-point address as label eth0:1 and return it in CIDR notation."""
        cidr = get_cidr_notation(self.linux_ip, self.subnet_mask)
        broadcast = get_broadcast(self.linux_ip, self.subnet_mask)
        ok, out = _run(["ip", "addr", "change", cidr, "broadcast", broadcast, "dev", "eth0", "label", "eth0:1"])
        if not ok:
            raise IsettaError(f"error adding P2P address {cidr} on Linux side: {out.strip()}")
        return cidr

    def delete_default_gateway(self) -> bool:
        """Delete the default route; return False if there was none to delete."""
        ok, out = _run(["ip", "route", "delete", "default"])
        if ok:
            logger.debug("Deleted existing default route")
        else:
            logger.debug("Failed to deleted default route. Maybe it wasn't set? Output was: %s", out.strip())
        return ok

    def add_default_gateway(self) -> str:
        """Route everything via the Windows address and return the tool's output."""
        ok, out = _run(["ip", "route", "add", "default", "via", self.windows_ip])
        if not ok:
            raise IsettaError(f"error configuring default gateway on Linux side: {out}")
        return out