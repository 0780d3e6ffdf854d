"""Cross-field validation run before the daemon is allowed to start."""

from __future__ import annotations

import os

from stampd.config.defaults import WALLET_CLIENT_CERT_FILENAME, WALLET_CLIENT_KEY_FILENAME
from stampd.config.errors import ValidationError
from stampd.config.network import join_host_port, normalize_address, normalize_addresses
from stampd.config.paths import clean_and_expand_path
from stampd.config.schema import SUPPORTED_API_VERSIONS, ResolvedConfig, parse_int


MIN_PROFILE_PORT = 1024
MAX_PROFILE_PORT = 65535


def validate_profile_port(profile: str) -> None:
    if not profile:
        return
    try:
        port = parse_int(profile)
    except ValueError:
        port = -1
    if port < MIN_PROFILE_PORT or port > MAX_PROFILE_PORT:
        raise ValidationError(
            f"the profile port must be between {MIN_PROFILE_PORT} and {MAX_PROFILE_PORT}",
            show_usage=True,
        )


def parse_and_validate_api_versions(raw: str) -> list[int]:
    entries = raw.split(",")
    if len(entries) > 2:
        raise ValidationError("invalid API versions config, must have at least one and at most two")
    parsed: list[int] = []
    for entry in entries:
        try:
            version = parse_int(entry)
        except ValueError:
            raise ValidationError(f"invalid API version '{entry}', must be an integer") from None
        if version not in SUPPORTED_API_VERSIONS:
            raise ValidationError(f"{entry} is an invalid API version, must be 1, 2 or both")
        if version in parsed:
            raise ValidationError(f"API version {version} is listed more than once")
        parsed.append(version)
    return parsed


def validate_limits(cfg: ResolvedConfig) -> None:
    if cfg.confirmations < 0:
        raise ValidationError("confirmations must be greater than or equal to zero")
    if cfg.max_digests <= 0:
        raise ValidationError("maxdigests must be greater than zero")


def normalize_listeners(cfg: ResolvedConfig, port: str) -> None:
    if not cfg.listeners:
        cfg.listeners = [join_host_port("", port)]
    cfg.listeners = normalize_addresses(cfg.listeners, port)


def validate_endpoints(cfg: ResolvedConfig, port: str, default_home_dir: str) -> None:
    """Check wallet/store hosts and certificates, normalizing them in place.

    ``default_home_dir`` anchors ``~`` expansion; relative wallet certificates
    are also looked up under ``cfg.home_dir``.
    """
    if not cfg.wallet_host and not cfg.store_host:
        raise ValidationError("wallethost is not set in config")
    if not cfg.wallet_cert and not cfg.proxy_mode:
        raise ValidationError("walletcert is not set in config")

    if cfg.proxy_mode:
        cfg.store_host = normalize_address(cfg.store_host, port)
        if cfg.store_cert:
            cfg.store_cert = clean_and_expand_path(cfg.store_cert, default_home_dir)

    if cfg.net_params is None:
        raise RuntimeError("active network must be selected before validating endpoints")
    if cfg.wallet_host:
        cfg.wallet_host = normalize_address(cfg.wallet_host, cfg.net_params.wallet_rpc_port)
    if cfg.wallet_cert:
        cfg.wallet_cert = clean_and_expand_path(cfg.wallet_cert, default_home_dir)

    if not cfg.proxy_mode and not os.path.exists(cfg.wallet_cert):
        candidate = os.path.join(cfg.home_dir, cfg.wallet_cert)
        if not os.path.exists(candidate):
            raise ValidationError(f"walletcert {cfg.wallet_cert} and {candidate} don't exist")
        cfg.wallet_cert = candidate

    if not cfg.wallet_client_cert:
        cfg.wallet_client_cert = os.path.join(cfg.home_dir, WALLET_CLIENT_CERT_FILENAME)
    if not cfg.wallet_client_key:
        cfg.wallet_client_key = os.path.join(cfg.home_dir, WALLET_CLIENT_KEY_FILENAME)


def validate_api_tokens(cfg: ResolvedConfig) -> None:
    if cfg.proxy_mode:
        return
    if not cfg.api_tokens:
        raise ValidationError("at least one apitoken is required when running in backend mode")
    tokens: list[str] = []
    for token in cfg.api_tokens:
        token = token.strip()
        if not token:
            raise ValidationError("blank apitoken found -- ensure all apitoken values are not blank")
        tokens.append(token)
    cfg.api_tokens = tokens


def validate_config(cfg: ResolvedConfig, port: str, default_home_dir: str) -> None:
    validate_profile_port(cfg.profile)
    cfg.enabled_api_versions = parse_and_validate_api_versions(cfg.api_versions)
    validate_limits(cfg)
    normalize_listeners(cfg, port)
    validate_endpoints(cfg, port, default_home_dir)
    validate_api_tokens(cfg)
