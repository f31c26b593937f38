"""Network setup for a machine that reaches the internet through the Px proxy."""

from __future__ import annotations

from dataclasses import dataclass

from .helper import IsettaError
from .ports import (
    DnsConfigurer,
    HttpChecker,
    LinuxConfigurer,
    LinuxPinger,
    NetworkConfigurer,
    WindowsChecker,
    WindowsConfigurer,
)
from .simplelogger import logger


@dataclass
class ViaProxy(NetworkConfigurer):
    linux_p2p_ip: str
    windows_p2p_ip: str
    px_proxy_port: int
    internal_dns_server: str
    windows_checker: WindowsChecker
    windows_configurer: WindowsConfigurer
    dns_configurer: DnsConfigurer
    linux_pinger: LinuxPinger
    linux_configurer: LinuxConfigurer
    http_checker: HttpChecker

    def configure(self) -> None:
        """Set up both sides of the point-to-point link and verify proxy access."""
        self.check_px_proxy_running()
        self.dns_configurer.activate_dns_server(self.internal_dns_server)
        self.setup_linux_p2p_interface_if_needed()
        if not self.is_windows_side_ok():
            self.configure_windows_side()
        self.configure_default_gateway_if_needed()
        self.check_access_via_proxy()

    def check_px_proxy_running(self) -> None:
        """Raise IsettaError unless the Px proxy is running on Windows."""
        if not self.windows_checker.is_px_proxy_running():
            raise IsettaError(f"Error: PX proxy is not running on Windows port {self.px_proxy_port}")
        logger.debug("PX proxy is running on Windows port %s", self.px_proxy_port)

    def setup_linux_p2p_interface_if_needed(self) -> None:
        """Add the Linux point-to-point address unless it already answers."""
        if self._is_linux_p2p_ip_up():
            return
        logger.debug("Adding address %s to Linux", self.linux_p2p_ip)
        self.linux_configurer.set_p2p_interface()
        if not self._is_linux_p2p_ip_up():
            raise IsettaError(f"failed to add P2P address {self.linux_p2p_ip} to Linux")

    def _is_linux_p2p_ip_up(self) -> bool:
        up = self.linux_pinger.ping(self.linux_p2p_ip)
        logger.debug("Linux P2P address %s is %s", self.linux_p2p_ip, "up" if up else "not up")
        return up

    def is_windows_side_ok(self) -> bool:
        return self._is_windows_p2p_ip_up() and self.is_px_proxy_reachable()

    def _is_windows_p2p_ip_up(self) -> bool:
        up = self.linux_pinger.ping(self.windows_p2p_ip)
        logger.debug("Windows P2P address %s is %s", self.windows_p2p_ip, "up" if up else "not up")
        return up

    def is_px_proxy_reachable(self) -> bool:
        if self.http_checker.is_px_proxy_reachable():
            logger.debug("Px Proxy is reachable from within Linux")
            return True
        logger.debug("Px Proxy not reachable from Linux side")
        return False

    def configure_windows_side(self) -> None:
        """Add the Windows address and port proxy; always clean up afterwards."""
        self.windows_configurer.init()
        try:
            logger.debug("Adding Windows P2p address %s", self.windows_p2p_ip)
            self.windows_configurer.add_p2p_address(lambda: self.linux_pinger.ping(self.windows_p2p_ip))
            self.windows_configurer.set_port_proxy(lambda: self.http_checker.has_internet_access_via_proxy())
        finally:
            self.windows_configurer.cleanup()

    def configure_default_gateway_if_needed(self) -> None:
        """Route through Windows unless the internal DNS server already answers."""
        if self._is_internal_dns_server_up():
            return
        logger.debug("Configuring default gateway")
        self.linux_configurer.delete_default_gateway()
        self.linux_configurer.add_default_gateway()
        if not self._is_internal_dns_server_up():
            raise IsettaError("failed to adjust default gateway 🤔")

    def _is_internal_dns_server_up(self) -> bool:
        if self.linux_pinger.ping(self.internal_dns_server):
            logger.debug(
                "Internal DNS %s can be reached from within Linux. Default gateway works",
                self.internal_dns_server,
            )
            return True
        logger.debug("Internal DNS %s can't be reached from within Linux", self.internal_dns_server)
        return False

    def check_access_via_proxy(self) -> None:
        """Raise IsettaError unless the test URL can be reached via the proxy."""
        if not self.http_checker.has_internet_access_via_proxy():
            raise IsettaError("failed setting up Linux network via proxy")
        logger.info("Done setting up Linux network via proxy")