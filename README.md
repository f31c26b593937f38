# isetta

`isetta` gets a WSL2 Linux distribution onto the internet. It handles two
cases. In the first, the Windows host is connected directly. In the second,
the Windows host sits in a network where the internet can only be reached
through a Px proxy running on Windows.

`isetta` works out which case applies. It then fixes DNS, routing and the
point-to-point link between Linux and Windows as needed. If the internet can
already be reached over HTTP, it changes nothing.

## Requirements

- Linux running inside WSL2. WSL1 is refused.
- Root rights inside Linux to configure the network (`sudo`). Reachability
  checks from Linux use ICMP over a raw socket, and a raw socket also needs
  root.
- The `ip` tool on Linux, plus `cmd.exe`, `powershell.exe`, `wsl.exe` and
  `wslpath`, which WSL makes available.
- For proxy mode:
  - Px must be running on Windows, listening on the configured port.
  - Admin credentials on Windows. You are asked for them when the Windows side
    needs to be changed.
  - A `gsudo.exe` executable must be on `PATH`. `isetta` copies it to the
    Windows temp directory while it works and removes it afterwards.

## Installation

```sh
pip install .
```

This installs the `isetta` command. The only dependency is `requests`.

## Configuration

`isetta` reads `.isetta.toml` from your home directory. If that file does not
exist, it reads `.isetta` instead.

If neither file can be read, the built-in defaults are used. However, the
internal DNS server has no default, so validation then stops the program.
Only the internal DNS server is mandatory; every other setting has a default.

```toml
[general]
# URL fetched to decide whether the internet can be reached
internet_access_test_url = "https://www.example.com/"
# one of: trace, debug, info, warn, error
log_level = "info"

[network]
# link network between WSL and Windows; must be a /30 or larger
wsl_to_windows_subnet = "169.254.254.0/24"
# port Px listens on, on Windows
px_proxy_port = 3128
# extra entries appended to NO_PROXY / no_proxy
no_proxy = [
    "intranet.example.com",
]

[dns]
# a DNS server only reachable inside the internal network (required)
internal_server = "10.0.0.53"
# a public DNS server
public_server = "8.8.8.8"
```

Defaults:

| Setting | Default |
| --- | --- |
| `internet_access_test_url` | `https://www.google.com/` |
| `log_level` | `info` |
| `wsl_to_windows_subnet` | `169.254.254.0/24` |
| `px_proxy_port` | `3128` |
| `public_server` | `8.8.8.8` |

The link addresses come from `wsl_to_windows_subnet`:

- The first address after the network address goes to Windows. With the
  default subnet this is `169.254.254.1`.
- The second address goes to Linux. With the default subnet this is
  `169.254.254.2`.
- The proxy URL is `http://<windows address>:<px_proxy_port>`.

The configuration is checked before anything is done. The program stops at
the first problem, with a message such as:

- `Config.General.InternetAccessTestUrl: foo is an an invalid URL`
- `configured subnet in wsl_to_windows_subnet is too small. Smallest allowed size is a /30 network`
- `log level 'foolevel' is invalid. Valid log levels: ...`

## Usage

To configure the network:

```sh
sudo isetta
```

To set or clear the proxy variables in the current shell:

```sh
eval "$(isetta --env-settings)"
```

What `--env-settings` prints depends on which DNS server Windows can reach:

- **Internal DNS server reachable:** `export` lines for `HTTPS_PROXY`,
  `HTTP_PROXY`, `https_proxy`, `http_proxy`, `NO_PROXY` and `no_proxy`.
- **Only the public DNS server reachable:** the matching `unset` lines.

`NO_PROXY` and `no_proxy` are built the same way. Each starts with
`localhost,127.0.0.1,<windows address>`. It is followed by the value already
set in the environment, if there is one, and then by the `no_proxy` entries
from the configuration.

To show the version:

```sh
isetta --version
```

Log messages go to standard output as `Trace:`, `Debug:`, `Info:`, `Warn:` or
`Error:` lines, filtered by `log_level`. When a step fails, `isetta` prints
`Fatal: <message>` and exits with status 1.

## How it works

1. If the test URL can be fetched, directly or through the proxy, nothing is
   changed. Both checks run at the same time.
2. Otherwise `isetta` makes three preparations:
   - It checks that it runs as root.
   - It checks that it runs inside WSL2.
   - It sets `generateResolvConf = false` in `/etc/wsl.conf`, creating the
     file if needed, so that WSL stops overwriting `/etc/resolv.conf`.
3. It then asks Windows, via `ping.exe`, which DNS server it can reach:
   - **Internal DNS server reachable: proxy mode.** Px must be running on
     Windows. `isetta` then:
     - writes the internal DNS server to `/etc/resolv.conf`;
     - adds the Linux end of the link to `eth0` as `eth0:1`;
     - if the Windows end does not answer, sets it up elevated with `netsh`:
       an address on the `vEthernet (WSL)` adapter and a port proxy to Px;
     - points the default route at Windows if the internal DNS server cannot
       be pinged;
     - checks that the internet can be reached through the proxy.
   - **Public DNS server reachable: direct mode.** `isetta` then:
     - writes the public DNS server to `/etc/resolv.conf`;
     - repairs the default route if the public DNS server cannot be pinged;
     - checks that the internet can be reached directly;
     - warns if proxy variables are still set in the shell.
   - **Neither reachable:** `isetta` stops and reports that you seem to be
     offline.

Steps that may need time to settle are retried with increasing pauses. These
are writing the helper binary, starting the credential cache, adding the
Windows address and setting up the port proxy.

## Using it from Python

The pieces can be used on their own. For example, to load and check a
configuration:

```python
from isetta.config import from_text, get_proxy_url
from isetta.simplelogger import get_valid_log_levels

conf = from_text(
    '[dns]\ninternal_server = "10.0.0.53"\n',
    get_valid_log_levels(),
)
print(conf.network.p2p.windows_ip)  # 169.254.254.1
print(get_proxy_url(conf))          # http://169.254.254.1:3128
```

Main entry points:

- `isetta.config.load_text` parses TOML without validating it.
- `isetta.config.from_config_file` reads a configuration from a directory.
- `isetta.cli.build_handler` wires all adapters into a `Handler`.

The network logic in `Handler`, `DirectAccess` and `ViaProxy` only talks to
the abstract interfaces in `isetta.ports`. This means it can be driven with
your own implementations.

Errors are raised as `isetta.helper.IsettaError` or as one of its subclasses:
`ConfigError`, `ValidationError` or `RetryError`.

## What it does not do

- It does not ship the gsudo binary. `gsudo.exe` must be on `PATH`, or you can
  create `isetta.gsudo.Gsudo` with `binary_path` set when using the package
  from Python.
- It does not read settings from environment variables. Only the
  configuration file is used.

## Running the tests

```sh
pip install ".[test]"
pytest
```