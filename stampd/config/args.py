"""Command line parsing for the pre-scan and final configuration passes."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any, Sequence

from stampd.config.errors import UsageError
from stampd.config.schema import OPTIONS, ResolvedConfig, parse_int


SERVICE_COMMANDS = ("install", "remove", "start", "stop")
_HELP_FLAGS = {"-h", "--help"}
_VERSION_FLAGS = {"-V", "--version"}


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _int_value(text: str) -> int:
    try:
        return parse_int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{text}'") from None


@dataclass(slots=True)
class ParsedArgs:
    values: dict[str, Any] = field(default_factory=dict)
    remaining: list[str] = field(default_factory=list)
    help_requested: bool = False
    service_command: str | None = None


@dataclass(slots=True)
class PreScan:
    config: ResolvedConfig
    help_requested: bool = False
    service_command: str | None = None


def build_parser(prog: str, *, service_enabled: bool = False) -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=prog, add_help=False, allow_abbrev=False)
    parser.add_argument("-h", "--help", action="store_true", default=False, help="Show this help message and exit.")
    for option in OPTIONS:
        flags = [f"--{option.name}"]
        if option.short:
            flags.insert(0, f"-{option.short}")
        if option.kind == "bool":
            parser.add_argument(*flags, dest=option.attr, action="store_true", default=argparse.SUPPRESS, help=option.help)
        elif option.kind == "int":
            parser.add_argument(*flags, dest=option.attr, type=_int_value, default=argparse.SUPPRESS, help=option.help)
        elif option.kind == "list":
            parser.add_argument(*flags, dest=option.attr, action="append", default=argparse.SUPPRESS, help=option.help)
        else:
            parser.add_argument(*flags, dest=option.attr, default=argparse.SUPPRESS, help=option.help)
    if service_enabled:
        group = parser.add_argument_group("Service Options")
        group.add_argument(
            "-s",
            "--service",
            dest="service_command",
            choices=SERVICE_COMMANDS,
            default=None,
            help="Service command {install, remove, start, stop}",
        )
    parser.add_argument("remaining", nargs="*", default=[], help=argparse.SUPPRESS)
    return parser


def usage_text(prog: str, *, service_enabled: bool = False) -> str:
    return build_parser(prog, service_enabled=service_enabled).format_help()


def parse_args(argv: Sequence[str], prog: str, *, service_enabled: bool = False) -> ParsedArgs:
    parser = build_parser(prog, service_enabled=service_enabled)
    namespace = vars(parser.parse_intermixed_args(list(argv)))
    help_requested = bool(namespace.pop("help", False))
    remaining = list(namespace.pop("remaining", []))
    service_command = namespace.pop("service_command", None)
    return ParsedArgs(
        values=namespace,
        remaining=remaining,
        help_requested=help_requested,
        service_command=service_command,
    )


def apply_values(cfg: ResolvedConfig, values: dict[str, Any]) -> None:
    for attr, value in values.items():
        setattr(cfg, attr, list(value) if isinstance(value, list) else value)


def prescan_args(
    argv: Sequence[str],
    defaults: ResolvedConfig,
    prog: str,
    *,
    service_enabled: bool = False,
) -> PreScan:
    """Parse just enough to find the home directory, config file and exit flags.

    Usage errors are left for the final pass. When the strict parse fails the
    recognized options are still collected, so ``-V`` or ``-A`` next to a
    bogus flag keep their effect.
    """
    pre = defaults.copy()
    try:
        parsed = parse_args(argv, prog, service_enabled=service_enabled)
    except UsageError:
        parsed = _parse_known_args(argv, prog, service_enabled=service_enabled)
    apply_values(pre, parsed.values)
    return PreScan(
        config=pre,
        help_requested=parsed.help_requested,
        service_command=parsed.service_command,
    )


def parse_args_over(
    cfg: ResolvedConfig,
    argv: Sequence[str],
    prog: str,
    *,
    service_enabled: bool = False,
) -> ParsedArgs:
    """Apply the command line over ``cfg`` so explicit flags win over the file."""
    parsed = parse_args(argv, prog, service_enabled=service_enabled)
    if not parsed.help_requested:
        apply_values(cfg, parsed.values)
    return parsed


def _parse_known_args(argv: Sequence[str], prog: str, *, service_enabled: bool) -> ParsedArgs:
    parser = build_parser(prog, service_enabled=service_enabled)
    try:
        namespace, _ = parser.parse_known_intermixed_args(list(argv))
    except UsageError:
        # A malformed value stops argparse outright; only the bare exit flags
        # can still be recovered.
        values = {"show_version": True} if _flag_present(argv, _VERSION_FLAGS) else {}
        return ParsedArgs(values=values, help_requested=_flag_present(argv, _HELP_FLAGS))
    values = vars(namespace)
    help_requested = bool(values.pop("help", False)) or _flag_present(argv, _HELP_FLAGS)
    values.pop("remaining", None)
    values.pop("service_command", None)
    return ParsedArgs(values=values, help_requested=help_requested)


def _flag_present(argv: Sequence[str], flags: set[str]) -> bool:
    for item in argv:
        if item == "--":
            return False
        if item in flags:
            return True
    return False
