"""Checks and elevated configuration on the Windows host, run from WSL."""

from __future__ import annotations

import re
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from .gsudo import Gsudo
from .helper import IsettaError, retry
from .ports import WindowsChecker, WindowsConfigurer

# any distribution line whose version column is 2
_WSL2_LINE = re.compile(r"(?m) .+ 2[\t\n\f\r ]*$")


def _run_powershell(command: str) -> bytes:
    try:
        proc = subprocess.run(
            ["powershell.exe", "-NoProfile", "-Command", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as err:
        raise IsettaError(f"Error executing Powershell command: {command}, error was: {err}") from err
    if proc.returncode != 0:
        raise IsettaError(
            f"Error executing Powershell command: {command}, error was: exit status {proc.returncode}"
        )
    out = proc.stdout or b""
    return out[:-2] if out.endswith(b"\r\n") else out


def run_in_powershell(command: str) -> str:
    """Run a PowerShell command and return its output without the final line break."""
    return _run_powershell(command).decode("utf-8", errors="replace")


def parse_list_output(output: str) -> bool:
    """Return True if ``wsl.exe --list --verbose`` output shows a version 2 distribution."""
    return _WSL2_LINE.search(output) is not None


def is_port_open_on_windows(port: str) -> bool:
    """Return True if the port accepts connections on the Windows loopback address."""
    result = run_in_powershell(
        f"Test-NetConnection -ComputerName 127.0.0.1 -Port {port} -InformationLevel Quiet"
    )
    return result == "True"


@dataclass
class PowerShellWindowsChecker(WindowsChecker):
    px_proxy_port: int = 3128

    def is_pingable(self, host: str) -> bool:
        """Return True if ``host`` answers a ping sent from Windows."""
        return run_in_powershell(f"ping.exe -n 2 -w 100 {host} > $null; $LASTEXITCODE") == "0"

    def is_px_proxy_running(self) -> bool:
        return is_port_open_on_windows(str(self.px_proxy_port))

    def is_running_on_wsl2(self) -> bool:
        output = _run_powershell("wsl.exe --list --verbose").decode("utf-16-le", errors="replace")
        return parse_list_output(output)


@dataclass
class NetshWindowsConfigurer(WindowsConfigurer):
    windows_ip: str
    subnet_mask: str
    px_proxy_port: int
    gsudo: Gsudo

    def init(self) -> None:
        self.gsudo.init()

    def cleanup(self) -> None:
        self.gsudo.cleanup()

    def add_p2p_address(self, success_checker: Callable[[], bool]) -> None:
        """Add the Windows address to the WSL adapter and wait until it works."""
        command = f'netsh interface ip add address "vEthernet (WSL)" {self.windows_ip} {self.subnet_mask}'
        self.gsudo.run_elevated(command, check_error=False)
        retry("Setting Windows P2P address", 10, 0.1, success_checker)

    def set_port_proxy(self, success_checker: Callable[[], bool]) -> None:
        """Forward the proxy port to loopback, redoing it until it works."""

        def configure() -> bool:
            self._reset_port_proxy()
            self._add_port_proxy()
            return success_checker()

        retry("Setting Windows portproxy", 10, 0.2, configure)

    def _reset_port_proxy(self) -> None:
        self.gsudo.run_elevated("netsh interface portproxy reset")

    def _add_port_proxy(self) -> None:
        port = self.px_proxy_port
        self.gsudo.run_elevated(
            f"netsh interface portproxy add v4tov4 listenaddress={self.windows_ip} listenport={port} "
            f"connectaddress=127.0.0.1 connectport={port}"
        )