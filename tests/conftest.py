from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterator

import pytest

from stampd.config.resolver import ResolveOutcome, load_config


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # Keep resolution away from the real user home directory.
    monkeypatch.setenv("HOME", str(tmp_path / "user"))
    monkeypatch.delenv("STAMPD_API_TOKEN", raising=False)
    yield
    root = logging.getLogger("stampd")
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
    setattr(root, "_stampd_configured", False)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    return tmp_path / "appdata" / ".stampd"


@pytest.fixture
def wallet_cert(tmp_path: Path) -> Path:
    path = tmp_path / "rpc.cert"
    path.write_text("-----BEGIN CERTIFICATE-----\n", encoding="utf-8")
    return path


@pytest.fixture
def backend_args(wallet_cert: Path) -> list[str]:
    return ["--wallethost", "127.0.0.1", "--walletcert", str(wallet_cert), "--apitoken", "operator-token"]


@pytest.fixture
def resolve(home: Path) -> Callable[..., ResolveOutcome]:
    def _resolve(argv: list[str], **kwargs: Any) -> ResolveOutcome:
        kwargs.setdefault("home_provider", lambda: str(home))
        return load_config(argv, **kwargs)

    return _resolve
