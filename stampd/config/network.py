"""Active network selection and listener address normalization."""

from __future__ import annotations

from stampd.config.errors import ValidationError
from stampd.config.schema import MAIN_NET_PARAMS, SIM_NET_PARAMS, TEST_NET_PARAMS, NetParams, ResolvedConfig


def split_host_port(address: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[host]:port``; raise ``ValueError`` without a port."""
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address '{address}'")
        if end + 1 == len(address):
            raise ValueError(f"missing port in address '{address}'")
        if address[end + 1] != ":":
            raise ValueError(f"unexpected text after host in address '{address}'")
        host = address[1:end]
        port = address[end + 2 :]
    else:
        host, sep, port = address.rpartition(":")
        if not sep:
            raise ValueError(f"missing port in address '{address}'")
        if ":" in host:
            raise ValueError(f"too many colons in address '{address}'")
        if "[" in host or "]" in host:
            raise ValueError(f"unexpected bracket in address '{address}'")
    if "[" in port or "]" in port:
        raise ValueError(f"unexpected bracket in address '{address}'")
    return host, port


def join_host_port(host: str, port: str) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def normalize_address(address: str, default_port: str) -> str:
    try:
        split_host_port(address)
    except ValueError:
        return join_host_port(address, default_port)
    return address


def remove_duplicate_addresses(addresses: list[str]) -> list[str]:
    return list(dict.fromkeys(addresses))


def normalize_addresses(addresses: list[str], default_port: str) -> list[str]:
    return remove_duplicate_addresses([normalize_address(item, default_port) for item in addresses])


def select_network(cfg: ResolvedConfig) -> NetParams:
    """Set ``cfg.net_params`` from the network flags and return them."""
    selected = []
    params = MAIN_NET_PARAMS
    if cfg.test_net:
        selected.append("testnet")
        params = TEST_NET_PARAMS
    if cfg.sim_net:
        selected.append("simnet")
        params = SIM_NET_PARAMS
    if len(selected) > 1:
        raise ValidationError(
            f"the {' and '.join(selected)} params can't be used together -- choose one of the three",
            show_usage=True,
        )
    cfg.net_params = params
    cfg.disable_dns_seed = params is SIM_NET_PARAMS
    return params
