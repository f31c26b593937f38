"""Top-level decision between direct and proxied network setup."""

from __future__ import annotations

from dataclasses import dataclass

from .helper import IsettaError
from .internetchecker import InternetChecker
from .ports import DnsConfigurer, EnvVarPrinter, NetworkConfigurer, WindowsChecker
from .simplelogger import LogLevel, logger


@dataclass
class Handler:
    running_as_root: bool
    internal_dns_server: str
    public_dns_server: str
    windows_checker: WindowsChecker
    dns_configurer: DnsConfigurer
    env_var_printer: EnvVarPrinter
    direct_access: NetworkConfigurer
    via_proxy: NetworkConfigurer
    internet_checker: InternetChecker

    def print_env_vars(self) -> None:
        """Print proxy export or unset commands depending on the reachable DNS server."""
        logger.current_level = LogLevel.ERROR
        if self.windows_checker.is_pingable(self.internal_dns_server):
            self.env_var_printer.print_export_commands()
        elif self.windows_checker.is_pingable(self.public_dns_server):
            self.env_var_printer.print_unset_commands()

    def configure_network(self) -> None:
        """Configure WSL networking; raise IsettaError when that is not possible."""
        logger.info("Checking if internet can already by reached via HTTP")
        if self.internet_checker.has_internet_access():
            logger.info("Internet is already accessible. No further setup needed")
            return

        if not self.running_as_root:
            raise IsettaError("to configure the network 'isetta' needs to run as root. Try running via sudo")

        self._check_running_on_wsl()
        self.dns_configurer.disable_resolv_conf_generation()

        logger.info("Detecting network connection")
        if self.windows_checker.is_pingable(self.internal_dns_server):
            logger.debug("Internal DNS server is reachable")
            logger.info("Found internet access via proxy")
            self.via_proxy.configure()
        elif self.windows_checker.is_pingable(self.public_dns_server):
            logger.debug("Public DNS server is reachable")
            logger.info("Found direct internet connection")
            self.direct_access.configure()
        else:
            raise IsettaError("neither the internal nor the public DNS server is reachable - are you offline?")

    def _check_running_on_wsl(self) -> None:
        if not self.windows_checker.is_running_on_wsl2():
            raise IsettaError(
                "isetta requires WSL2 but this Linux environment is running in something else. "
                "Run 'wsl.exe --list --verbose' for details"
            )
        logger.debug("Running on WSL2")