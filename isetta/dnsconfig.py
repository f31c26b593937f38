"""Management of the DNS server in resolv.conf and of its generation in wsl.conf."""

from __future__ import annotations

import configparser
import ipaddress
import re
from dataclasses import dataclass
from pathlib import Path

from .helper import IsettaError
from .ports import DnsConfigurer
from .simplelogger import logger

RESOLV_CONF_PATH = "/etc/resolv.conf"
WSL_CONF_PATH = "/etc/wsl.conf"

_SECTION = "network"
_KEY = "generateResolvConf"

_TRUE_VALUES = {"1", "t", "T", "true", "TRUE", "True", "YES", "yes", "Yes", "y", "ON", "on", "On"}
_FALSE_VALUES = {"0", "f", "F", "false", "FALSE", "False", "NO", "no", "No", "n", "OFF", "off", "Off"}


def _parse_bool(value: str | None) -> bool | None:
    """Return the boolean an INI value stands for, or None if it is not one."""
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keep the key's case
    return parser


def read_resolv_conf(path: str) -> str:
    """Return the content of a resolv.conf file."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as err:
        raise IsettaError(f"unable to read file {path}, Error was: {err}") from err


def is_dns_server_set(address: str, resolv_conf_path: str) -> bool:
    """Return True if ``address`` is configured as a nameserver in the file."""
    content = read_resolv_conf(resolv_conf_path)
    pattern = rf"(?m)^nameserver\s+{re.escape(address)}\s*$"
    if re.search(pattern, content):
        logger.debug("DNS server %s already set in %s", address, resolv_conf_path)
        return True
    logger.debug("DNS server %s is not set in %s", address, resolv_conf_path)
    return False


def validate_ip(ip: str) -> str:
    """Return ``ip`` if it is a valid IP address, else raise IsettaError."""
    try:
        ipaddress.ip_address(ip)
    except ValueError as err:
        raise IsettaError(f"DNS server IP address '{ip}' is invalid") from err
    return ip


def set_server(path: str, ip: str) -> None:
    """Replace the file's content with a single nameserver entry."""
    validate_ip(ip)
    logger.debug("Setting DNS server %s in %s", ip, path)
    try:
        Path(path).write_text(f"# generated by isetta\nnameserver {ip}\n", encoding="utf-8")
    except OSError as err:
        raise IsettaError(f"error accessing file {path}, error was: {err}") from err


def set_to_false(parser: configparser.ConfigParser, path: str) -> None:
    """Set ``generateResolvConf`` in the ``network`` section to false unless it already is."""
    if not parser.has_section(_SECTION):
        parser.add_section(_SECTION)
    section = parser[_SECTION]

    if _parse_bool(section.get(_KEY)) is not False:
        logger.debug("Disabling auto-generation of %s in %s", RESOLV_CONF_PATH, WSL_CONF_PATH)
        logger.debug(
            "In %s key 'generateResolvConf' was 'true' or not set. Setting it to 'false'", WSL_CONF_PATH
        )
        section[_KEY] = "false"
    else:
        logger.debug("Auto-generation of %s already disabled. Nothing to do", RESOLV_CONF_PATH)

    if _parse_bool(section.get(_KEY)) is not False:
        raise IsettaError(f"Failed to change 'generateResolvConf' in {path}")


def disable_resolv_conf_generation_for_file(path: str) -> None:
    """Ensure the INI file at ``path`` disables resolv.conf generation, creating it if needed."""
    target = Path(path)
    try:
        target.touch(mode=0o644, exist_ok=True)
    except OSError as err:
        raise IsettaError(f"error accessing file: {path}, error was: {err}") from err

    parser = _new_parser()
    try:
        with target.open(encoding="utf-8") as handle:
            parser.read_file(handle)
    except (OSError, configparser.Error) as err:
        raise IsettaError(f"fail to load file: {path}, error was: {err}") from err

    set_to_false(parser, path)

    try:
        with target.open("w", encoding="utf-8") as handle:
            parser.write(handle)
    except OSError as err:
        raise IsettaError(f"fail to save file: {path}, error was: {err}") from err


@dataclass
class FileDnsConfigurer(DnsConfigurer):
    """Edits resolv.conf and wsl.conf directly."""

    resolv_conf_path: str = RESOLV_CONF_PATH
    wsl_conf_path: str = WSL_CONF_PATH

    def activate_dns_server(self, dns_server_ip: str) -> None:
        if not is_dns_server_set(dns_server_ip, self.resolv_conf_path):
            set_server(self.resolv_conf_path, dns_server_ip)

    def disable_resolv_conf_generation(self) -> None:
        logger.debug(
            "Ensuring auto-generation of %s in %s is disabled", self.resolv_conf_path, self.wsl_conf_path
        )
        disable_resolv_conf_generation_for_file(self.wsl_conf_path)