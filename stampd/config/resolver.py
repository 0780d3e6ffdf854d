"""Layered resolution of defaults, config file and command line options.

Resolution proceeds as follows:

1. Start from defaults derived from the application home directory.
2. Pre-scan the command line for an alternative home directory or config
   file and for the help, version and service requests.
3. Overlay the config file onto the defaults.
4. Parse the command line again so explicit flags take precedence.
5. Select the active network, namespace the data and log directories, apply
   the debug levels and run the validation gate.

Help, version, ``--debuglevel show`` and service requests end resolution
early with a ``Terminate`` outcome. Invalid input raises ``ConfigError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Callable, Sequence

from stampd.config.args import parse_args_over, prescan_args, usage_text
from stampd.config.defaults import APP_NAME, DefaultPaths, HomeProvider, default_config, default_home_dir
from stampd.config.loader import merge_config_file
from stampd.config.network import select_network
from stampd.config.paths import ensure_home_dir, namespace_paths, rebase_home_dir
from stampd.config.schema import ResolvedConfig
from stampd.config.validate import validate_config
from stampd.core.logging import SHOW_SUBSYSTEMS, LevelRegistry, parse_and_set_debug_levels


ServiceRunner = Callable[[str], None]


@dataclass(slots=True)
class Resolved:
    config: ResolvedConfig
    registry: LevelRegistry
    remaining_args: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Terminate:
    message: str
    exit_code: int = 0
    stream: str = "stdout"


ResolveOutcome = Resolved | Terminate


def load_config(
    argv: Sequence[str],
    *,
    home_provider: HomeProvider = default_home_dir,
    registry: LevelRegistry | None = None,
    service_runner: ServiceRunner | None = None,
    app_name: str = APP_NAME,
) -> ResolveOutcome:
    registry = registry if registry is not None else LevelRegistry()
    service_enabled = service_runner is not None
    defaults = DefaultPaths.for_home(home_provider())
    cfg = default_config(defaults)

    pre = prescan_args(argv, cfg, app_name, service_enabled=service_enabled)
    if pre.help_requested:
        return Terminate(usage_text(app_name, service_enabled=service_enabled))
    if pre.config.show_version:
        return Terminate(f"{app_name} version {cfg.version}")
    if pre.service_command and service_runner is not None:
        try:
            service_runner(pre.service_command)
        except Exception as exc:
            return Terminate(str(exc), exit_code=1, stream="stderr")
        return Terminate("")

    rebase_home_dir(cfg, pre.config, defaults)

    missing_config: FileNotFoundError | None = None
    # The simulation network runs without the default config file unless one
    # is named explicitly.
    if not pre.config.sim_net or cfg.config_file != defaults.config_file:
        missing_config = merge_config_file(cfg, Path(cfg.config_file))

    parsed = parse_args_over(cfg, argv, app_name, service_enabled=service_enabled)
    if parsed.help_requested:
        return Terminate(usage_text(app_name, service_enabled=service_enabled))

    # appdata may also come from the config file or the final pass.
    cfg.home_dir = os.path.abspath(cfg.home_dir)
    ensure_home_dir(cfg.home_dir)

    params = select_network(cfg)
    namespace_paths(cfg, params.name, defaults.home_dir)

    if cfg.debug_level == SHOW_SUBSYSTEMS:
        return Terminate(f"Supported subsystems {registry.supported_subsystems()}")
    parse_and_set_debug_levels(cfg.debug_level, registry)

    validate_config(cfg, params.default_port, defaults.home_dir)

    warnings: list[str] = []
    if missing_config is not None:
        warnings.append(f"config file not found: {missing_config.filename or cfg.config_file}")
    return Resolved(config=cfg, registry=registry, remaining_args=parsed.remaining, warnings=warnings)
