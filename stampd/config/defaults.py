"""Baseline configuration derived from the application home directory."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import sys
from typing import Callable

from stampd import __version__
from stampd.config.schema import ResolvedConfig


APP_NAME = "stampd"
CONFIG_FILENAME = "stampd.yml"
DATA_DIRNAME = "data"
LOG_DIRNAME = "logs"
HTTPS_KEY_FILENAME = "https.key"
HTTPS_CERT_FILENAME = "https.cert"
WALLET_CLIENT_CERT_FILENAME = "client.pem"
WALLET_CLIENT_KEY_FILENAME = "client-key.pem"

HomeProvider = Callable[[], str]


def app_data_dir(app_name: str, platform: str | None = None) -> str:
    """Return the per-user application data directory for ``app_name``.

    Unix hosts use a hidden directory in the user's home, macOS uses
    ``~/Library/Application Support`` and Windows uses ``%LOCALAPPDATA%``
    (``%APPDATA%`` when the former is unset). The name is capitalized on the
    latter two, matching the platform conventions.
    """
    name = app_name.strip().lstrip(".")
    if not name:
        return "."
    system = platform or sys.platform
    home = Path.home()
    if system.startswith("win"):
        appdata = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if appdata:
            return str(Path(appdata) / name.capitalize())
        return str(home / "AppData" / "Local" / name.capitalize())
    if system == "darwin":
        return str(home / "Library" / "Application Support" / name.capitalize())
    return str(home / f".{name.lower()}")


def default_home_dir() -> str:
    return app_data_dir(APP_NAME)


@dataclass(slots=True, frozen=True)
class DefaultPaths:
    home_dir: str
    config_file: str
    data_dir: str
    log_dir: str
    https_key: str
    https_cert: str

    @classmethod
    def for_home(cls, home_dir: str) -> DefaultPaths:
        return cls(
            home_dir=home_dir,
            config_file=os.path.join(home_dir, CONFIG_FILENAME),
            data_dir=os.path.join(home_dir, DATA_DIRNAME),
            log_dir=os.path.join(home_dir, LOG_DIRNAME),
            https_key=os.path.join(home_dir, HTTPS_KEY_FILENAME),
            https_cert=os.path.join(home_dir, HTTPS_CERT_FILENAME),
        )


def default_config(paths: DefaultPaths) -> ResolvedConfig:
    return ResolvedConfig(
        home_dir=paths.home_dir,
        config_file=paths.config_file,
        data_dir=paths.data_dir,
        log_dir=paths.log_dir,
        https_key=paths.https_key,
        https_cert=paths.https_cert,
        version=__version__,
    )
