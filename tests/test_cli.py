import pytest

from isetta.cli import VERSION, build_handler, main
from isetta.config import from_text, get_proxy_url
from isetta.simplelogger import LogLevel, logger

EXAMPLE_CONFIG = """
[general]
internet_access_test_url = "https://www.foo.com/"
log_level = "trace"

[network]
wsl_to_windows_subnet = "169.254.254.0/24"
px_proxy_port = 3128
no_proxy = [
    "foo",
    "bar"
]

[dns]
internal_server = "1.2.3.4"
public_server    = "8.8.8.8"
"""


@pytest.fixture
def conf():
    return from_text(EXAMPLE_CONFIG, ["trace", "info", "warn"])


@pytest.fixture(autouse=True)
def _restore_log_level(monkeypatch):
    monkeypatch.setattr(logger, "current_level", LogLevel.TRACE)


def test_handler_uses_dns_servers_from_config(conf):
    handler = build_handler(conf, True)
    assert handler.internal_dns_server == "1.2.3.4"
    assert handler.public_dns_server == "8.8.8.8"
    assert handler.running_as_root is True


def test_running_as_root_is_passed_through(conf):
    assert build_handler(conf, False).running_as_root is False


def test_via_proxy_gets_p2p_addresses(conf):
    handler = build_handler(conf, True)
    via_proxy = handler.via_proxy
    assert via_proxy.linux_p2p_ip == conf.network.p2p.linux_ip
    assert via_proxy.windows_p2p_ip == conf.network.p2p.windows_ip
    assert via_proxy.px_proxy_port == 3128
    assert via_proxy.internal_dns_server == "1.2.3.4"


def test_direct_access_uses_public_dns(conf):
    handler = build_handler(conf, True)
    assert handler.direct_access.public_dns_server == "8.8.8.8"


def test_http_checker_is_shared_and_uses_proxy_url(conf):
    handler = build_handler(conf, True)
    checker = handler.internet_checker.http_checker
    assert checker is handler.via_proxy.http_checker
    assert checker is handler.direct_access.http_checker
    assert checker.proxy_url == get_proxy_url(conf)
    assert checker.internet_access_test_url == "https://www.foo.com/"


def test_internet_checker_default_timeout(conf):
    assert build_handler(conf, True).internet_checker.timeout_ms == 1000


def test_env_var_printer_gets_no_proxy_and_ip(conf):
    handler = build_handler(conf, True)
    printer = handler.env_var_printer
    assert printer.no_proxy == ["foo", "bar"]
    assert printer.windows_ip == conf.network.p2p.windows_ip
    assert printer is handler.direct_access.env_var_printer


def test_windows_configurer_gets_subnet_mask(conf):
    handler = build_handler(conf, True)
    configurer = handler.via_proxy.windows_configurer
    assert configurer.subnet_mask == conf.network.p2p.subnet_mask
    assert configurer.windows_ip == conf.network.p2p.windows_ip


def test_version_flag(capsys):
    assert main(["--version"]) == 0
    assert f"Isetta version {VERSION}" in capsys.readouterr().out
    assert VERSION == "0.5.1"


def test_missing_internal_dns_server_is_fatal(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert main([]) == 1
    out = capsys.readouterr().out
    assert "Fatal:" in out
    assert "InternalServer is missing" in out


def test_invalid_log_level_is_fatal(tmp_path, monkeypatch, capsys):
    (tmp_path / ".isetta.toml").write_text(
        '[general]\nlog_level = "foolevel"\n\n[dns]\ninternal_server = "1.2.3.4"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("HOME", str(tmp_path))
    assert main(["--env-settings"]) == 1
    out = capsys.readouterr().out
    assert "foolevel" in out
    assert "trace" in out


def test_unknown_option_exits():
    with pytest.raises(SystemExit):
        main(["--no-such-option"])