"""Errors raised while resolving the daemon configuration."""

from __future__ import annotations


class ConfigError(ValueError):
    def __init__(self, message: str, *, show_usage: bool = False) -> None:
        super().__init__(message)
        self.show_usage = show_usage


class UsageError(ConfigError):
    def __init__(self, message: str) -> None:
        super().__init__(message, show_usage=True)


class ConfigFileError(ConfigError):
    def __init__(self, message: str) -> None:
        super().__init__(message, show_usage=True)


class ValidationError(ConfigError):
    pass


class HomeDirError(ConfigError):
    pass
