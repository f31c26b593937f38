"""Shell commands that set or clear the proxy environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

from .ports import EnvVarPrinter
from .simplelogger import logger

DEFAULT_NO_PROXY_HOSTS = "localhost,127.0.0.1"

_PROXY_VARS = ("HTTPS_PROXY", "HTTP_PROXY", "https_proxy", "http_proxy")
_UNSET_VARS = ("HTTPS_PROXY", "HTTP_PROXY", "https_proxy", "http_proxy", "NO_PROXY", "no_proxy")
_CHECKED_VARS = ("http_proxy", "https_proxy", "HTTP_PROXY", "HTTPS_PROXY")


def _build_unset_commands() -> str:
    return "\n".join(f"unset {name}" for name in _UNSET_VARS)


@dataclass
class ConsoleEnvVarPrinter(EnvVarPrinter):
    """Prints shell statements for use with ``source`` or ``eval``."""

    windows_ip: str = ""
    px_proxy_port: int = 0
    no_proxy: list[str] = field(default_factory=list)

    def build_export_commands(self) -> str:
        """Return export statements for the proxy and no-proxy variables."""
        url = f"http://{self.windows_ip}:{self.px_proxy_port}"
        lines = [f"export {name}={url}" for name in _PROXY_VARS]
        lines.append(self._no_proxy_line("NO_PROXY"))
        lines.append(self._no_proxy_line("no_proxy"))
        return "\n".join(lines)

    def _no_proxy_line(self, name: str) -> str:
        entries = [DEFAULT_NO_PROXY_HOSTS, self.windows_ip]
        current = os.environ.get(name, "")
        if current:
            entries.append(current)
        if self.no_proxy:
            entries.append(",".join(self.no_proxy))
        return f"export {name}={','.join(entries)}"

    def print_export_commands(self) -> None:
        """Write the export statements to standard output."""
        sys.stdout.write(self.build_export_commands() + "\n")
        sys.stdout.flush()

    def print_unset_commands(self) -> None:
        """Write the unset statements to standard output."""
        sys.stdout.write(_build_unset_commands() + "\n")
        sys.stdout.flush()

    def warn_if_proxy_var_set(self) -> None:
        if self.are_http_env_vars_set():
            logger.warn(
                "This shell still has one ore more http(s)_proxy environment variables set. "
                "You are directly connected, don't forget to unset them."
            )

    def are_http_env_vars_set(self) -> bool:
        return any(os.environ.get(name) for name in _CHECKED_VARS)