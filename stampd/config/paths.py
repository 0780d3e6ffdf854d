"""Home directory rebasing, path expansion and per-network namespacing."""

from __future__ import annotations

import os
from pathlib import Path

from stampd.config.defaults import DefaultPaths
from stampd.config.errors import HomeDirError
from stampd.config.schema import ResolvedConfig


_REBASED_FIELDS = ("config_file", "data_dir", "https_key", "https_cert", "log_dir")


def clean_and_expand_path(path: str, home_dir: str) -> str:
    """Expand a leading ``~`` and environment variables, then normalize.

    ``~`` resolves to the parent of ``home_dir`` (the directory holding the
    application data directory), not to ``$HOME`` directly.
    """
    if path.startswith("~"):
        path = path.replace("~", os.path.dirname(home_dir), 1)
    return os.path.normpath(os.path.expandvars(path))


def rebase_home_dir(cfg: ResolvedConfig, pre: ResolvedConfig, defaults: DefaultPaths) -> None:
    if not pre.home_dir:
        return
    cfg.home_dir = os.path.abspath(pre.home_dir)
    rebased = DefaultPaths.for_home(cfg.home_dir)
    for name in _REBASED_FIELDS:
        requested = getattr(pre, name)
        if requested == getattr(defaults, name):
            setattr(cfg, name, getattr(rebased, name))
        else:
            setattr(cfg, name, requested)


def namespace_paths(cfg: ResolvedConfig, net_name: str, home_dir: str) -> None:
    cfg.data_dir = os.path.join(clean_and_expand_path(cfg.data_dir, home_dir), net_name)
    cfg.log_dir = os.path.join(clean_and_expand_path(cfg.log_dir, home_dir), net_name)


def ensure_home_dir(home_dir: str) -> None:
    try:
        Path(home_dir).mkdir(mode=0o700, parents=True, exist_ok=True)
    except FileExistsError as exc:
        # mkdir reports a dangling symlink as an existing entry.
        target_path = exc.filename or home_dir
        try:
            link = os.readlink(target_path)
        except OSError:
            raise HomeDirError(f"failed to create home directory: {exc}") from exc
        raise HomeDirError(
            f"failed to create home directory: is symlink {target_path} -> {link} mounted?"
        ) from exc
    except OSError as exc:
        raise HomeDirError(f"failed to create home directory: {exc}") from exc
