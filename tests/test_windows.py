import subprocess
from unittest import mock

import pytest

from isetta.helper import IsettaError, RetryError
from isetta.windows import (
    NetshWindowsConfigurer,
    PowerShellWindowsChecker,
    is_port_open_on_windows,
    parse_list_output,
    run_in_powershell,
)

WSL2_OUTPUT = """
NAME      STATE           VERSION
* Ubuntu    Running         2
  foo
"""

WSL1_OUTPUT = """
NAME      STATE           VERSION
* Ubuntu    Running         1
  foo
"""


def _completed(returncode=0, stdout=b""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


class _FakeGsudo:
    def __init__(self):
        self.calls = []

    def init(self):
        self.calls.append("init")

    def cleanup(self):
        self.calls.append("cleanup")

    def run_elevated(self, command, check_error=True):
        self.calls.append((command, check_error))
        return ""


def _configurer(gsudo):
    return NetshWindowsConfigurer(
        windows_ip="169.254.254.1", subnet_mask="255.255.255.0", px_proxy_port=3128, gsudo=gsudo
    )


def test_parse_list_output_ok():
    assert parse_list_output(WSL2_OUTPUT) is True


def test_parse_list_output_not_ok():
    assert parse_list_output(WSL1_OUTPUT) is False


def test_run_in_powershell_strips_line_end():
    with mock.patch("subprocess.run", return_value=_completed(stdout=b"HELLOWORLD\r\n")) as run:
        assert run_in_powershell("echo HELLOWORLD") == "HELLOWORLD"
    assert run.call_args.args[0] == ["powershell.exe", "-NoProfile", "-Command", "echo HELLOWORLD"]


def test_run_in_powershell_failure_raises():
    with mock.patch("subprocess.run", return_value=_completed(returncode=1)):
        with pytest.raises(IsettaError):
            run_in_powershell("exit 1")


@pytest.mark.parametrize("output, expected", [(b"True\r\n", True), (b"False\r\n", False)])
def test_is_port_open_on_windows(output, expected):
    with mock.patch("subprocess.run", return_value=_completed(stdout=output)) as run:
        assert is_port_open_on_windows("445") is expected
    assert run.call_args.args[0][3] == "Test-NetConnection -ComputerName 127.0.0.1 -Port 445 -InformationLevel Quiet"


@pytest.mark.parametrize("exit_code, expected", [(b"0\r\n", True), (b"1\r\n", False)])
def test_is_pingable(exit_code, expected):
    checker = PowerShellWindowsChecker(px_proxy_port=3128)
    with mock.patch("subprocess.run", return_value=_completed(stdout=exit_code)) as run:
        assert checker.is_pingable("127.0.0.1") is expected
    assert run.call_args.args[0][3] == "ping.exe -n 2 -w 100 127.0.0.1 > $null; $LASTEXITCODE"


def test_is_px_proxy_running_checks_configured_port():
    checker = PowerShellWindowsChecker(px_proxy_port=4242)
    with mock.patch("subprocess.run", return_value=_completed(stdout=b"True\r\n")) as run:
        assert checker.is_px_proxy_running() is True
    assert "-Port 4242 " in run.call_args.args[0][3]


@pytest.mark.parametrize("text, expected", [(WSL2_OUTPUT, True), (WSL1_OUTPUT, False)])
def test_is_running_on_wsl2_decodes_utf16(text, expected):
    raw = text.replace("\n", "\r\n").encode("utf-16-le")
    with mock.patch("subprocess.run", return_value=_completed(stdout=raw)):
        assert PowerShellWindowsChecker().is_running_on_wsl2() is expected


def test_add_p2p_address():
    gsudo = _FakeGsudo()
    _configurer(gsudo).add_p2p_address(lambda: True)
    assert gsudo.calls == [('netsh interface ip add address "vEthernet (WSL)" 169.254.254.1 255.255.255.0', False)]


def test_add_p2p_address_fails_when_never_reachable():
    gsudo = _FakeGsudo()
    with mock.patch("time.sleep"):
        with pytest.raises(RetryError, match="Setting Windows P2P address"):
            _configurer(gsudo).add_p2p_address(lambda: False)


def test_set_port_proxy_repeats_until_success():
    gsudo = _FakeGsudo()
    results = iter([False, True])
    with mock.patch("time.sleep"):
        _configurer(gsudo).set_port_proxy(lambda: next(results))
    reset = ("netsh interface portproxy reset", True)
    add = (
        "netsh interface portproxy add v4tov4 listenaddress=169.254.254.1 listenport=3128 "
        "connectaddress=127.0.0.1 connectport=3128",
        True,
    )
    assert gsudo.calls == [reset, add, reset, add]


def test_configurer_as_context_manager():
    gsudo = _FakeGsudo()
    with _configurer(gsudo) as configurer:
        configurer.add_p2p_address(lambda: True)
    assert gsudo.calls[0] == "init"
    assert gsudo.calls[-1] == "cleanup"