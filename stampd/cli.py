"""CLI entry point for stampd."""

from __future__ import annotations

import json
import sys
from typing import Any, Sequence

from stampd.config.defaults import APP_NAME
from stampd.config.errors import ConfigError
from stampd.config.resolver import Terminate, load_config
from stampd.config.schema import ResolvedConfig
from stampd.core.logging import configure_logging


_REDACTED = "***"


def _config_payload(config: ResolvedConfig) -> dict[str, Any]:
    return {
        "version": config.version,
        "network": config.net_params.name if config.net_params else "",
        "home_dir": config.home_dir,
        "config_file": config.config_file,
        "data_dir": config.data_dir,
        "log_dir": config.log_dir,
        "https_cert": config.https_cert,
        "https_key": config.https_key,
        "listeners": list(config.listeners),
        "proxy_mode": config.proxy_mode,
        "wallet": {
            "host": config.wallet_host,
            "cert": config.wallet_cert,
            "client_cert": config.wallet_client_cert,
            "client_key": config.wallet_client_key,
            "passphrase": _REDACTED if config.wallet_passphrase else "",
        },
        "store": {
            "host": config.store_host,
            "cert": config.store_cert,
        },
        "api": {
            "versions": list(config.enabled_api_versions),
            "tokens": [_REDACTED for _ in config.api_tokens],
            "enable_collections": config.enable_collections,
        },
        "confirmations": config.confirmations,
        "max_digests": config.max_digests,
        "debug_level": config.debug_level,
        "profile": config.profile,
        "cpu_profile": config.cpu_profile,
        "mem_profile": config.mem_profile,
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    usage_hint = f"Use {APP_NAME} -h to show usage"

    try:
        outcome = load_config(args)
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        if exc.show_usage:
            print(usage_hint, file=sys.stderr)
        return 1

    if isinstance(outcome, Terminate):
        stream = sys.stderr if outcome.stream == "stderr" else sys.stdout
        if outcome.message:
            print(outcome.message, file=stream)
        return outcome.exit_code

    config = outcome.config
    configure_logging(config, outcome.registry, force=True)
    logger = outcome.registry.logger("STMP")
    for warning in outcome.warnings:
        logger.warning(warning)
    logger.info("configuration resolved for %s", config.net_params.name if config.net_params else "mainnet")
    payload = _config_payload(config)
    payload["levels"] = outcome.registry.levels()
    payload["remaining_args"] = outcome.remaining_args
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
