import pytest

from stampd.config.defaults import DefaultPaths, default_config
from stampd.config.errors import ValidationError
from stampd.config.network import (
    join_host_port,
    normalize_address,
    normalize_addresses,
    remove_duplicate_addresses,
    select_network,
    split_host_port,
)
from stampd.config.schema import MAIN_NET_PARAMS, SIM_NET_PARAMS, TEST_NET_PARAMS


def _config():
    return default_config(DefaultPaths.for_home("/srv/stampd"))


def test_normalize_address_appends_default_port_when_missing() -> None:
    assert normalize_address("127.0.0.1", "49152") == "127.0.0.1:49152"
    assert normalize_address("localhost", "59152") == "localhost:59152"
    assert normalize_address("", "49152") == ":49152"


def test_normalize_address_keeps_explicit_port() -> None:
    assert normalize_address("host:1234", "49152") == "host:1234"
    assert normalize_address(":8080", "49152") == ":8080"
    assert normalize_address("[::1]:80", "9111") == "[::1]:80"


def test_normalize_address_brackets_ipv6_hosts() -> None:
    assert normalize_address("::1", "9111") == "[::1]:9111"
    assert normalize_address("fe80::1", "19111") == "[fe80::1]:19111"


def test_split_host_port_rules() -> None:
    assert split_host_port("example.org:443") == ("example.org", "443")
    assert split_host_port("[::1]:80") == ("::1", "80")
    with pytest.raises(ValueError, match="missing port"):
        split_host_port("example.org")
    with pytest.raises(ValueError, match="missing port"):
        split_host_port("[::1]")
    with pytest.raises(ValueError, match="too many colons"):
        split_host_port("::1")
    with pytest.raises(ValueError):
        split_host_port("[::1]x:80")
    assert join_host_port("::1", "80") == "[::1]:80"
    assert join_host_port("", "80") == ":80"


def test_listener_deduplication_preserves_first_seen_order() -> None:
    assert remove_duplicate_addresses(["a:1", "b:2", "a:1"]) == ["a:1", "b:2"]
    assert normalize_addresses(["a:1", "b:2", "a:1"], "49152") == ["a:1", "b:2"]


def test_normalize_addresses_dedups_after_adding_ports() -> None:
    addresses = ["b", "a:49152", "a", "b:49152", "c:1"]
    assert normalize_addresses(addresses, "49152") == ["b:49152", "a:49152", "c:1"]


def test_select_network_defaults_to_mainnet() -> None:
    cfg = _config()
    params = select_network(cfg)
    assert params is MAIN_NET_PARAMS
    assert cfg.net_params is MAIN_NET_PARAMS
    assert params.default_port == "49152"
    assert params.wallet_rpc_port == "9111"
    assert cfg.disable_dns_seed is False


def test_select_network_testnet() -> None:
    cfg = _config()
    cfg.test_net = True
    params = select_network(cfg)
    assert params is TEST_NET_PARAMS
    assert params.name == "testnet3"
    assert params.default_port == "59152"
    assert params.wallet_rpc_port == "19111"


def test_select_network_simnet_disables_dns_seeding() -> None:
    cfg = _config()
    cfg.sim_net = True
    params = select_network(cfg)
    assert params is SIM_NET_PARAMS
    assert params.wallet_rpc_port == "19558"
    assert cfg.disable_dns_seed is True


def test_select_network_rejects_testnet_with_simnet() -> None:
    cfg = _config()
    cfg.test_net = True
    cfg.sim_net = True
    with pytest.raises(ValidationError, match="testnet and simnet params can't be used together") as excinfo:
        select_network(cfg)
    assert excinfo.value.show_usage is True
    assert cfg.net_params is None
