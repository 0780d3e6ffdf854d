"""Structured logging, per-subsystem log levels and debug level parsing."""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from pathlib import Path
from typing import Mapping

from stampd.config.errors import ValidationError
from stampd.config.schema import ResolvedConfig


TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_LEVELS: dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

DEFAULT_SUBSYSTEMS: dict[str, str] = {
    "STMP": "stampd.daemon",
    "FSBE": "stampd.store.filesystem",
    "PGBE": "stampd.store.postgres",
    "WLLT": "stampd.wallet",
}

SHOW_SUBSYSTEMS = "show"


def valid_log_level(level: str) -> bool:
    return level in LOG_LEVELS


class LevelRegistry:
    """Table of subsystem identifiers, their logger names and active levels.

    Levels are recorded here during resolution and only pushed to the stdlib
    loggers by ``apply``, so resolving a configuration has no global effect.
    """

    def __init__(self, subsystems: Mapping[str, str] | None = None, default_level: str = "info") -> None:
        self._loggers = dict(DEFAULT_SUBSYSTEMS if subsystems is None else subsystems)
        self._levels = {subsystem: default_level for subsystem in self._loggers}

    def supported_subsystems(self) -> list[str]:
        return sorted(self._loggers)

    def has_subsystem(self, subsystem: str) -> bool:
        return subsystem in self._loggers

    def set_level(self, subsystem: str, level: str) -> None:
        if subsystem not in self._loggers:
            raise KeyError(subsystem)
        self._levels[subsystem] = level

    def set_all(self, level: str) -> None:
        for subsystem in self._levels:
            self._levels[subsystem] = level

    def level(self, subsystem: str) -> str:
        return self._levels[subsystem]

    def levels(self) -> dict[str, str]:
        return dict(self._levels)

    def logger(self, subsystem: str) -> logging.LoggerAdapter[logging.Logger]:
        return logging.LoggerAdapter(logging.getLogger(self._loggers[subsystem]), {"subsystem": subsystem})

    def apply(self) -> None:
        for subsystem, level in self._levels.items():
            logging.getLogger(self._loggers[subsystem]).setLevel(LOG_LEVELS.get(level, logging.INFO))


def parse_and_set_debug_levels(debug_level: str, registry: LevelRegistry) -> None:
    """Parse a global level or ``subsystem=level`` pairs into ``registry``."""
    if "," not in debug_level and "=" not in debug_level:
        if not valid_log_level(debug_level):
            raise ValidationError(f"the specified debug level [{debug_level}] is invalid", show_usage=True)
        registry.set_all(debug_level)
        return

    for pair in debug_level.split(","):
        if "=" not in pair:
            raise ValidationError(
                f"the specified debug level contains an invalid subsystem/level pair [{pair}]",
                show_usage=True,
            )
        subsystem, _, level = pair.partition("=")
        if not registry.has_subsystem(subsystem):
            raise ValidationError(
                f"the specified subsystem [{subsystem}] is invalid -- "
                f"supported subsystems {registry.supported_subsystems()}",
                show_usage=True,
            )
        if not valid_log_level(level):
            raise ValidationError(f"the specified debug level [{level}] is invalid", show_usage=True)
        registry.set_level(subsystem, level)


class StructuredJsonFormatter(logging.Formatter):
    def __init__(self, service_name: str = "stampd") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).isoformat(timespec="microseconds")
        payload: dict[str, object] = {
            "@timestamp": timestamp,
            "message": record.getMessage(),
            "log": {
                "level": record.levelname.lower(),
                "logger": record.name,
            },
            "service": {
                "name": self.service_name,
            },
        }
        subsystem = getattr(record, "subsystem", None)
        if subsystem:
            payload["subsystem"] = subsystem
        if record.exc_info:
            payload["error"] = {"stack_trace": self.formatException(record.exc_info)}
        return json.dumps(payload, separators=(",", ":"))


def _file_handler(log_file: str, formatter: logging.Formatter) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: ResolvedConfig, registry: LevelRegistry, force: bool = False) -> None:
    root = logging.getLogger("stampd")
    if getattr(root, "_stampd_configured", False) and not force:
        return

    formatter = StructuredJsonFormatter()
    root.setLevel(logging.INFO)
    for existing in list(root.handlers):
        existing.close()
    root.handlers.clear()
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)
    root.addHandler(_file_handler(config.log_file, formatter))
    root.propagate = False
    registry.apply()
    setattr(root, "_stampd_configured", True)

