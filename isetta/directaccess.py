"""Network setup for a machine with a direct internet connection."""

from __future__ import annotations

from dataclasses import dataclass

from .helper import IsettaError
from .ports import (
    DnsConfigurer,
    EnvVarPrinter,
    HttpChecker,
    LinuxConfigurer,
    LinuxPinger,
    NetworkConfigurer,
)
from .simplelogger import logger


@dataclass
class DirectAccess(NetworkConfigurer):
    public_dns_server: str
    dns_configurer: DnsConfigurer
    linux_pinger: LinuxPinger
    linux_configurer: LinuxConfigurer
    http_checker: HttpChecker
    env_var_printer: EnvVarPrinter

    def configure(self) -> None:
        """Point DNS at the public server, fix the gateway and verify access."""
        self.dns_configurer.activate_dns_server(self.public_dns_server)
        self.env_var_printer.warn_if_proxy_var_set()
        self._configure_default_gateway_if_needed()
        self.check_direct_access()

    def _configure_default_gateway_if_needed(self) -> None:
        if self._is_public_dns_server_up():
            return
        logger.debug("Configuring default gateway")
        self.linux_configurer.delete_default_gateway()
        self.linux_configurer.add_default_gateway()
        if not self._is_public_dns_server_up():
            raise IsettaError("failed to adjust default gateway 🤔")

    def _is_public_dns_server_up(self) -> bool:
        if self.linux_pinger.ping(self.public_dns_server):
            logger.debug(
                "Public DNS server %s can be reached from within Linux. Default gateway works",
                self.public_dns_server,
            )
            return True
        logger.debug("Public DNS server %s can't be reached from within Linux", self.public_dns_server)
        return False

    def check_direct_access(self) -> None:
        """Raise IsettaError unless the test URL can be reached directly."""
        if not self.http_checker.has_direct_internet_access():
            raise IsettaError("failed setting up WSL network for direct internet access")
        logger.info("Done setting up WSL network for direct internet access")