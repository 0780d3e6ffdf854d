"""Dataclasses and option table for the resolved daemon configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
import os
from typing import Any


DEFAULT_LOG_LEVEL = "info"
DEFAULT_CONFIRMATIONS = 6
DEFAULT_MAX_DIGESTS = 20
SUPPORTED_API_VERSIONS = (1, 2)
DEFAULT_API_VERSIONS = ",".join(str(version) for version in SUPPORTED_API_VERSIONS)
LOG_FILENAME = "stampd.log"


@dataclass(slots=True, frozen=True)
class NetParams:
    name: str
    default_port: str
    wallet_rpc_port: str


MAIN_NET_PARAMS = NetParams(name="mainnet", default_port="49152", wallet_rpc_port="9111")
TEST_NET_PARAMS = NetParams(name="testnet3", default_port="59152", wallet_rpc_port="19111")
SIM_NET_PARAMS = NetParams(name="simnet", default_port="49152", wallet_rpc_port="19558")


@dataclass(slots=True)
class ResolvedConfig:
    home_dir: str
    config_file: str
    data_dir: str
    log_dir: str
    https_key: str
    https_cert: str
    show_version: bool = False
    test_net: bool = False
    sim_net: bool = False
    profile: str = ""
    cpu_profile: str = ""
    mem_profile: str = ""
    debug_level: str = DEFAULT_LOG_LEVEL
    listeners: list[str] = field(default_factory=list)
    wallet_host: str = ""
    wallet_cert: str = ""
    wallet_passphrase: str = ""
    wallet_client_cert: str = ""
    wallet_client_key: str = ""
    version: str = ""
    store_host: str = ""
    store_cert: str = ""
    enable_collections: bool = False
    confirmations: int = DEFAULT_CONFIRMATIONS
    max_digests: int = DEFAULT_MAX_DIGESTS
    api_tokens: list[str] = field(default_factory=list)
    api_versions: str = DEFAULT_API_VERSIONS
    enabled_api_versions: list[int] = field(default_factory=list)
    net_params: NetParams | None = None
    disable_dns_seed: bool = False

    @property
    def proxy_mode(self) -> bool:
        return bool(self.store_host)

    @property
    def log_file(self) -> str:
        return os.path.join(self.log_dir, LOG_FILENAME)

    def copy(self) -> ResolvedConfig:
        values = {item.name: getattr(self, item.name) for item in fields(self)}
        for name, value in values.items():
            if isinstance(value, list):
                values[name] = list(value)
        return ResolvedConfig(**values)


@dataclass(slots=True, frozen=True)
class OptionSpec:
    """One user-settable option shared by the command line and the config file.

    ``name`` is both the long flag (``--name``) and the config file key.
    """

    name: str
    attr: str
    kind: str
    help: str
    short: str | None = None
    file_key: bool = True


def parse_int(text: str) -> int:
    """Parse a base-10 integer made of ASCII digits and an optional sign.

    Unlike ``int()``, surrounding whitespace, ``_`` separators and non-ASCII
    digits are rejected.
    """
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid integer '{text}'")
    return int(text)


OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec("appdata", "home_dir", "str", "Path to application home directory.", short="A"),
    OptionSpec("version", "show_version", "bool", "Display version information and exit.", short="V", file_key=False),
    OptionSpec("configfile", "config_file", "str", "Path to configuration file.", short="C"),
    OptionSpec("datadir", "data_dir", "str", "Directory to store data.", short="b"),
    OptionSpec("logdir", "log_dir", "str", "Directory to log output."),
    OptionSpec("testnet", "test_net", "bool", "Use the test network."),
    OptionSpec("simnet", "sim_net", "bool", "Use the simulation test network."),
    OptionSpec(
        "profile",
        "profile",
        "str",
        "Enable HTTP profiling on given port -- NOTE port must be between 1024 and 65535.",
    ),
    OptionSpec("cpuprofile", "cpu_profile", "str", "Write CPU profile to the specified file."),
    OptionSpec("memprofile", "mem_profile", "str", "Write mem profile to the specified file."),
    OptionSpec(
        "debuglevel",
        "debug_level",
        "str",
        "Logging level for all subsystems {trace, debug, info, warn, error, critical} -- "
        "You may also specify <subsystem>=<level>,<subsystem2>=<level>,... to set the log "
        "level for individual subsystems -- Use show to list available subsystems.",
        short="d",
    ),
    OptionSpec(
        "listen",
        "listeners",
        "list",
        "Add an interface/port to listen for connections (default all interfaces port: 49152, testnet: 59152).",
    ),
    OptionSpec("wallethost", "wallet_host", "str", "Hostname for wallet server."),
    OptionSpec("walletcert", "wallet_cert", "str", "Certificate path for wallet server."),
    OptionSpec("walletpassphrase", "wallet_passphrase", "str", "Passphrase for wallet server."),
    OptionSpec("cert", "wallet_client_cert", "str", "Path to TLS certificate for wallet client authentication."),
    OptionSpec("key", "wallet_client_key", "str", "Path to TLS client authentication key for the wallet."),
    OptionSpec("httpscert", "https_cert", "str", "File containing the https certificate file."),
    OptionSpec("httpskey", "https_key", "str", "File containing the https certificate key."),
    OptionSpec("storehost", "store_host", "str", "Enable proxy mode - send requests to the specified ip:port."),
    OptionSpec("storecert", "store_cert", "str", "File containing the https certificate file for storehost."),
    OptionSpec("enablecollections", "enable_collections", "bool", "Allow clients to query collection timestamps."),
    OptionSpec(
        "confirmations",
        "confirmations",
        "int",
        "Amount of confirmations necessary to return timestamp proof.",
    ),
    OptionSpec("maxdigests", "max_digests", "int", "Max number of digests that can be queried."),
    OptionSpec("apitoken", "api_tokens", "list", "Token used to grant access to privileged API resources."),
    OptionSpec("apiversions", "api_versions", "str", "Enables API versions on the daemon."),
)

FILE_OPTIONS = {option.name: option for option in OPTIONS if option.file_key}


def file_values(config: ResolvedConfig) -> dict[str, Any]:
    """Return the config file mapping that reproduces ``config``'s settable fields."""
    payload: dict[str, Any] = {}
    for option in FILE_OPTIONS.values():
        value = getattr(config, option.attr)
        payload[option.name] = list(value) if isinstance(value, list) else value
    return payload
