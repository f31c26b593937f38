"""Command line entry point: wires the adapters together and runs the setup."""

from __future__ import annotations

import argparse
import os
import sys

from .config import Config, from_config_file, get_proxy_url
from .directaccess import DirectAccess
from .dnsconfig import FileDnsConfigurer
from .envvars import ConsoleEnvVarPrinter
from .gsudo import Gsudo
from .handler import Handler
from .helper import IsettaError
from .httpchecker import HttpProbe
from .internetchecker import InternetChecker
from .linux import IpRouteConfigurer
from .pinger import IcmpPinger
from .simplelogger import LEVELS, get_valid_log_levels, logger
from .viaproxy import ViaProxy
from .windows import NetshWindowsConfigurer, PowerShellWindowsChecker

VERSION = "0.5.1"


def build_handler(conf: Config, running_as_root: bool) -> Handler:
    """Create the handler and all the adapters it works with from a configuration."""
    network = conf.network
    p2p = network.p2p

    env_var_printer = ConsoleEnvVarPrinter(
        windows_ip=p2p.windows_ip,
        px_proxy_port=network.px_proxy_port,
        no_proxy=list(network.no_proxy),
    )
    windows_checker = PowerShellWindowsChecker(px_proxy_port=network.px_proxy_port)
    windows_configurer = NetshWindowsConfigurer(
        windows_ip=p2p.windows_ip,
        subnet_mask=p2p.subnet_mask,
        px_proxy_port=network.px_proxy_port,
        gsudo=Gsudo(),
    )
    linux_pinger = IcmpPinger()
    linux_configurer = IpRouteConfigurer(
        windows_ip=p2p.windows_ip,
        linux_ip=p2p.linux_ip,
        subnet_mask=p2p.subnet_mask,
    )
    dns_configurer = FileDnsConfigurer()
    http_checker = HttpProbe(conf.general.internet_access_test_url, get_proxy_url(conf))

    direct_access = DirectAccess(
        public_dns_server=conf.dns.public_server,
        dns_configurer=dns_configurer,
        linux_pinger=linux_pinger,
        linux_configurer=linux_configurer,
        http_checker=http_checker,
        env_var_printer=env_var_printer,
    )
    via_proxy = ViaProxy(
        linux_p2p_ip=p2p.linux_ip,
        windows_p2p_ip=p2p.windows_ip,
        px_proxy_port=network.px_proxy_port,
        internal_dns_server=conf.dns.internal_server,
        windows_checker=windows_checker,
        windows_configurer=windows_configurer,
        dns_configurer=dns_configurer,
        linux_pinger=linux_pinger,
        linux_configurer=linux_configurer,
        http_checker=http_checker,
    )
    return Handler(
        running_as_root=running_as_root,
        internal_dns_server=conf.dns.internal_server,
        public_dns_server=conf.dns.public_server,
        windows_checker=windows_checker,
        dns_configurer=dns_configurer,
        env_var_printer=env_var_printer,
        direct_access=direct_access,
        via_proxy=via_proxy,
        internet_checker=InternetChecker(http_checker),
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="isetta")
    parser.add_argument(
        "--env-settings",
        action="store_true",
        help="Prints environment config. Handy if called via 'source'",
    )
    parser.add_argument("--version", action="store_true", help="Print isetta version")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run isetta; return the process exit status."""
    args = _parser().parse_args(argv)

    if args.version:
        print(f"Isetta version {VERSION}")
        return 0

    try:
        conf = from_config_file("$HOME", get_valid_log_levels())
        logger.current_level = LEVELS[conf.general.log_level]
        handler = build_handler(conf, os.geteuid() == 0)
        if args.env_settings:
            handler.print_env_vars()
        else:
            handler.configure_network()
    except IsettaError as err:
        print(f"Fatal: {err}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())