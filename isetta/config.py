"""Loading of the TOML configuration and derivation of the point-to-point addresses."""

from __future__ import annotations

import ipaddress
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .helper import IsettaError
from .simplelogger import logger
from .validator import Validator

CONFIG_NAME = ".isetta"


class ConfigError(IsettaError):
    """Raised when the configuration cannot be read or parsed."""


@dataclass
class General:
    internet_access_test_url: str = "https://www.google.com/"
    log_level: str = "info"


@dataclass
class P2p:
    windows_ip: str = ""
    linux_ip: str = ""
    subnet_mask: str = ""


@dataclass
class Network:
    wsl_to_windows_subnet: str = "169.254.254.0/24"
    px_proxy_port: int = 3128
    p2p: P2p = field(default_factory=P2p)
    no_proxy: list[str] = field(default_factory=list)


@dataclass
class Dns:
    internal_server: str = ""
    public_server: str = "8.8.8.8"


@dataclass
class Config:
    general: General = field(default_factory=General)
    network: Network = field(default_factory=Network)
    dns: Dns = field(default_factory=Dns)


def _table(data: dict, name: str) -> dict:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"error parsing config, error was: '{name}' must be a table")
    return {key.lower(): item for key, item in value.items()}


def _as_str(value: object, key: str, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, (list, dict)):
        raise ConfigError(f"error parsing config, error was: '{key}' must be a single value")
    return str(value)


def _as_int(value: object, key: str, default: int) -> int:
    if value is None:
        return default
    if value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as err:
        raise ConfigError(f"error parsing config, error was: '{key}' must be a number: {value!r}") from err


def _as_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


def _from_mapping(data: dict) -> Config:
    top = {key.lower(): value for key, value in data.items()}
    general, network, dns = _table(top, "general"), _table(top, "network"), _table(top, "dns")
    defaults = Config()
    return Config(
        general=General(
            internet_access_test_url=_as_str(
                general.get("internet_access_test_url"),
                "internet_access_test_url",
                defaults.general.internet_access_test_url,
            ),
            log_level=_as_str(general.get("log_level"), "log_level", defaults.general.log_level),
        ),
        network=Network(
            wsl_to_windows_subnet=_as_str(
                network.get("wsl_to_windows_subnet"),
                "wsl_to_windows_subnet",
                defaults.network.wsl_to_windows_subnet,
            ),
            px_proxy_port=_as_int(network.get("px_proxy_port"), "px_proxy_port", defaults.network.px_proxy_port),
            no_proxy=_as_list(network.get("no_proxy")),
        ),
        dns=Dns(
            internal_server=_as_str(dns.get("internal_server"), "internal_server", defaults.dns.internal_server),
            public_server=_as_str(dns.get("public_server"), "public_server", defaults.dns.public_server),
        ),
    )


def load_text(text: str) -> Config:
    """Parse TOML text into a Config with defaults filled in, without validating it."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise ConfigError(f"error loading config, error was: {err}") from err
    return _from_mapping(data)


def _read_config_file(directory: Path) -> str:
    for candidate in (directory / f"{CONFIG_NAME}.toml", directory / CONFIG_NAME):
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8")
    raise ConfigError(f'Config File "{CONFIG_NAME}" Not Found in "{directory}"')


def _determine_p2p_addresses(conf: Config) -> None:
    subnet = conf.network.wsl_to_windows_subnet
    try:
        network = ipaddress.ip_interface(subnet).network
    except ValueError as err:
        raise ConfigError(f"error parsing wsl_to_windows_subnet {subnet}., error was: {err}") from err
    p2p = conf.network.p2p
    p2p.subnet_mask = str(network.netmask)
    # the network address itself is skipped
    p2p.windows_ip = str(network.network_address + 1)
    p2p.linux_ip = str(network.network_address + 2)


def _validate_and_determine_ips(conf: Config, valid_log_levels: list[str]) -> None:
    Validator(conf, list(valid_log_levels)).validate()
    _determine_p2p_addresses(conf)


def from_text(text: str, valid_log_levels: list[str]) -> Config:
    """Parse, validate and complete a configuration given as TOML text."""
    conf = load_text(text)
    _validate_and_determine_ips(conf, valid_log_levels)
    return conf


def from_config_file(config_dir: str, valid_log_levels: list[str]) -> Config:
    """Read ``.isetta.toml`` (or ``.isetta``) from ``config_dir``; fall back to defaults if unreadable."""
    directory = Path(os.path.expanduser(os.path.expandvars(config_dir)))
    try:
        conf = load_text(_read_config_file(directory))
    except (OSError, ConfigError) as err:
        logger.info("Error reading config file from %s, error was: %s", config_dir, err)
        conf = Config()
    _validate_and_determine_ips(conf, valid_log_levels)
    return conf


def get_proxy_url(conf: Config) -> str:
    """Return the URL of the Px proxy as seen from Linux."""
    return f"http://{conf.network.p2p.windows_ip}:{conf.network.px_proxy_port}"