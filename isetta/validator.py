"""Validation of a loaded configuration with human readable error messages."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from .helper import IsettaError

if TYPE_CHECKING:
    from .config import Config


class ValidationError(IsettaError):
    """Raised when the configuration holds an invalid value."""


_MESSAGES: dict[str, str] = {
    "required": "{0} is missing",
    "url": "{0}: {1} is an an invalid URL",
    "cidrv4": "{0}: {1} is not a valid CIDR address",
    "ip4_addr": "{0}: {1} is not a valid IPv4 address",
    "alpha": "{0}: {1} is not a letters-only string",
}

_ALPHA = re.compile(r"[a-zA-Z]+")
_MINIMUM_SUBNET_ADDRESSES = 4  # a /30 network; only two of its addresses are usable


def _is_url(value: object) -> bool:
    text = str(value).lower()
    if not text:
        return False
    if text.startswith("file:/"):
        return True
    try:
        parts = urlsplit(text)
    except ValueError:
        return False
    if not parts.scheme:
        return False
    opaque = bool(parts.path) and not parts.path.startswith("/") and not parts.netloc
    return bool(parts.netloc or parts.fragment or opaque)


def _is_cidrv4(value: object) -> bool:
    text = str(value)
    address, sep, prefix = text.partition("/")
    if not sep or not prefix.isdigit():
        return False
    try:
        ipaddress.IPv4Interface(f"{address}/{int(prefix)}")
    except ValueError:
        return False
    return True


def _is_ip4_addr(value: object) -> bool:
    try:
        ipaddress.IPv4Address(str(value))
    except ValueError:
        return False
    return True


def _passes(tag: str, param: int | None, value: object) -> bool:
    if tag == "required":
        return value not in ("", None, 0)
    if tag == "url":
        return _is_url(value)
    if tag == "alpha":
        return _ALPHA.fullmatch(str(value)) is not None
    if tag == "cidrv4":
        return _is_cidrv4(value)
    if tag == "ip4_addr":
        return _is_ip4_addr(value)
    if tag == "min":
        return isinstance(value, int) and value >= param
    if tag == "max":
        return isinstance(value, int) and value <= param
    raise ValueError(f"unknown validation tag {tag!r}")


def _message(namespace: str, tag: str, value: object) -> str:
    template = _MESSAGES.get(tag)
    if template is None:
        field_name = namespace.rsplit(".", 1)[-1]
        return f"Key: '{namespace}' Error:Field validation for '{field_name}' failed on the '{tag}' tag"
    return template.format(namespace, value)


@dataclass
class Validator:
    """Checks a configuration; ``validate`` raises on the first problem found."""

    config: Config
    valid_log_levels: list[str] = field(default_factory=list)

    def validate(self) -> None:
        self._validate_fields()
        self._validate_subnet_size()
        self._validate_log_level()

    def _field_rules(self):
        conf = self.config
        return [
            ("Config.General.InternetAccessTestUrl", conf.general.internet_access_test_url, [("url", None)]),
            ("Config.General.LogLevel", conf.general.log_level, [("alpha", None)]),
            ("Config.Network.WslToWindowsSubnet", conf.network.wsl_to_windows_subnet, [("cidrv4", None)]),
            ("Config.Network.PxProxyPort", conf.network.px_proxy_port, [("min", 1), ("max", 65535)]),
            ("Config.Dns.InternalServer", conf.dns.internal_server, [("required", None), ("ip4_addr", None)]),
            ("Config.Dns.PublicServer", conf.dns.public_server, [("ip4_addr", None)]),
        ]

    def _validate_fields(self) -> None:
        for namespace, value, rules in self._field_rules():
            for tag, param in rules:
                if not _passes(tag, param, value):
                    raise ValidationError(_message(namespace, tag, value))

    def _validate_subnet_size(self) -> None:
        try:
            network = ipaddress.ip_interface(self.config.network.wsl_to_windows_subnet).network
        except ValueError as err:
            raise ValidationError(str(err)) from err
        if network.num_addresses < _MINIMUM_SUBNET_ADDRESSES:
            raise ValidationError(
                "configured subnet in wsl_to_windows_subnet is too small. Smallest allowed size is a /30 network"
            )

    def _validate_log_level(self) -> None:
        level = self.config.general.log_level
        if level not in self.valid_log_levels:
            raise ValidationError(
                f"log level '{level}' is invalid. Valid log levels: {', '.join(self.valid_log_levels)}"
            )