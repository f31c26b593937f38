from unittest.mock import Mock

import pytest

from isetta.handler import Handler
from isetta.helper import IsettaError
from isetta.internetchecker import InternetChecker
from isetta.ports import DnsConfigurer, EnvVarPrinter, HttpChecker, NetworkConfigurer, WindowsChecker
from isetta.simplelogger import LogLevel, logger


@pytest.fixture(autouse=True)
def restore_log_level():
    saved = logger.current_level
    yield
    logger.current_level = saved


@pytest.fixture
def http_checker():
    return Mock(spec=HttpChecker)


@pytest.fixture
def handler(http_checker):
    return Handler(
        running_as_root=True,
        internal_dns_server="42.42.42.42",
        public_dns_server="8.8.8.8",
        windows_checker=Mock(spec=WindowsChecker),
        dns_configurer=Mock(spec=DnsConfigurer),
        env_var_printer=Mock(spec=EnvVarPrinter),
        direct_access=Mock(spec=NetworkConfigurer),
        via_proxy=Mock(spec=NetworkConfigurer),
        internet_checker=InternetChecker(http_checker=http_checker, timeout_ms=100),
    )


@pytest.fixture
def no_internet(http_checker):
    http_checker.has_direct_internet_access.return_value = False
    http_checker.has_internet_access_via_proxy.return_value = False


def pingable(handler, reachable):
    handler.windows_checker.is_pingable.side_effect = lambda host: reachable[host]


def test_short_circuit_if_http_connection_already_possible(handler, http_checker):
    http_checker.has_direct_internet_access.return_value = True
    http_checker.has_internet_access_via_proxy.return_value = False

    assert handler.configure_network() is None
    http_checker.has_direct_internet_access.assert_called_once_with(100)
    handler.windows_checker.is_running_on_wsl2.assert_not_called()


def test_network_config_requires_root(handler, no_internet):
    handler.running_as_root = False
    with pytest.raises(IsettaError, match="root"):
        handler.configure_network()
    handler.windows_checker.is_running_on_wsl2.assert_not_called()


def test_error_when_not_on_wsl(handler, no_internet):
    handler.windows_checker.is_running_on_wsl2.return_value = False
    with pytest.raises(IsettaError, match="WSL2"):
        handler.configure_network()
    handler.dns_configurer.disable_resolv_conf_generation.assert_not_called()


def test_error_when_no_dns_server_is_reached(handler, no_internet):
    handler.windows_checker.is_running_on_wsl2.return_value = True
    pingable(handler, {"42.42.42.42": False, "8.8.8.8": False})
    with pytest.raises(IsettaError, match="offline"):
        handler.configure_network()
    handler.dns_configurer.disable_resolv_conf_generation.assert_called_once_with()


def test_performs_direct_config_when_public_dns_is_reachable(handler, no_internet):
    handler.windows_checker.is_running_on_wsl2.return_value = True
    pingable(handler, {"42.42.42.42": False, "8.8.8.8": True})

    handler.configure_network()
    handler.direct_access.configure.assert_called_once_with()
    handler.via_proxy.configure.assert_not_called()


def test_performs_config_via_proxy_when_internal_dns_is_reachable(handler, no_internet):
    handler.windows_checker.is_running_on_wsl2.return_value = True
    pingable(handler, {"42.42.42.42": True})

    handler.configure_network()
    handler.via_proxy.configure.assert_called_once_with()
    handler.direct_access.configure.assert_not_called()


def test_configure_error_is_propagated(handler, no_internet):
    handler.windows_checker.is_running_on_wsl2.return_value = True
    pingable(handler, {"42.42.42.42": True})
    handler.via_proxy.configure.side_effect = IsettaError("proxy failed")

    with pytest.raises(IsettaError, match="proxy failed"):
        handler.configure_network()


def test_when_internal_dns_is_reachable_export_statements_are_printed(handler):
    pingable(handler, {"42.42.42.42": True})
    handler.print_env_vars()
    handler.env_var_printer.print_export_commands.assert_called_once_with()
    handler.env_var_printer.print_unset_commands.assert_not_called()
    assert logger.current_level is LogLevel.ERROR


def test_when_public_dns_is_reachable_unset_statements_are_printed(handler):
    pingable(handler, {"42.42.42.42": False, "8.8.8.8": True})
    handler.print_env_vars()
    handler.env_var_printer.print_unset_commands.assert_called_once_with()
    handler.env_var_printer.print_export_commands.assert_not_called()


def test_env_vars_are_printed_if_non_root(handler):
    handler.running_as_root = False
    pingable(handler, {"42.42.42.42": True})
    handler.print_env_vars()
    handler.env_var_printer.print_export_commands.assert_called_once_with()