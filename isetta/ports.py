"""Interfaces between the network setup logic and the system adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable


class DnsConfigurer(ABC):
    @abstractmethod
    def activate_dns_server(self, dns_server_ip: str) -> None:
        """Make the given IP the active server in resolv.conf if it is not already."""

    @abstractmethod
    def disable_resolv_conf_generation(self) -> None:
        """Ensure wsl.conf sets generateResolvConf to false, creating it if needed."""


class EnvVarPrinter(ABC):
    @abstractmethod
    def print_export_commands(self) -> None: ...

    @abstractmethod
    def print_unset_commands(self) -> None: ...

    @abstractmethod
    def warn_if_proxy_var_set(self) -> None: ...


class LinuxPinger(ABC):
    @abstractmethod
    def ping(self, host: str) -> bool: ...


class LinuxConfigurer(ABC):
    @abstractmethod
    def set_p2p_interface(self) -> None: ...

    @abstractmethod
    def delete_default_gateway(self) -> None: ...

    @abstractmethod
    def add_default_gateway(self) -> None: ...


class WindowsChecker(ABC):
    @abstractmethod
    def is_pingable(self, host: str) -> bool: ...

    @abstractmethod
    def is_px_proxy_running(self) -> bool: ...

    @abstractmethod
    def is_running_on_wsl2(self) -> bool: ...


class WindowsConfigurer(ABC):
    """Applies elevated settings on the Windows side.

    Usable as a context manager: ``init`` on entry, ``cleanup`` on exit.
    """

    @abstractmethod
    def init(self) -> None:
        """Prepare the resources needed for configuration."""

    @abstractmethod
    def cleanup(self) -> None:
        """Release temporary resources."""

    @abstractmethod
    def add_p2p_address(self, success_checker: Callable[[], bool]) -> None:
        """Add the point-to-point address; raise if it never becomes usable."""

    @abstractmethod
    def set_port_proxy(self, success_checker: Callable[[], bool]) -> None:
        """Forward the proxy port; raise if it never becomes usable."""

    def __enter__(self) -> WindowsConfigurer:
        self.init()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()


class HttpChecker(ABC):
    @abstractmethod
    def has_direct_internet_access(self, timeout_ms: int | None = None) -> bool: ...

    @abstractmethod
    def has_internet_access_via_proxy(self, timeout_ms: int | None = None) -> bool: ...

    @abstractmethod
    def is_px_proxy_reachable(self) -> bool: ...


class NetworkConfigurer(ABC):
    @abstractmethod
    def configure(self) -> None:
        """Set up the network; raise IsettaError on failure."""