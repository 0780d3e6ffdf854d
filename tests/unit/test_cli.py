import json
from pathlib import Path

import pytest

from stampd.cli import main


def _home(tmp_path: Path) -> Path:
    return tmp_path / "user" / ".stampd"


def test_version_flag_prints_version(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["-V"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "stampd version 0.4.0"


def test_help_flag_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--help"])
    captured = capsys.readouterr()
    assert rc == 0
    assert captured.out.startswith("usage: stampd")
    assert "--walletcert" in captured.out
    assert captured.err == ""


def test_show_prints_subsystems(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--debuglevel", "show"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "Supported subsystems ['FSBE', 'PGBE', 'STMP', 'WLLT']"


def test_network_conflict_prints_usage_hint(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--testnet", "--simnet"])
    captured = capsys.readouterr()
    assert rc == 1
    assert "the testnet and simnet params can't be used together" in captured.err
    assert captured.err.rstrip().endswith("Use stampd -h to show usage")
    assert captured.out == ""


def test_missing_token_has_no_usage_hint(capsys: pytest.CaptureFixture[str], wallet_cert: Path) -> None:
    rc = main(["--wallethost", "127.0.0.1", "--walletcert", str(wallet_cert)])
    captured = capsys.readouterr()
    assert rc == 1
    assert captured.err.strip() == "at least one apitoken is required when running in backend mode"


def test_success_prints_redacted_config_and_logs(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    wallet_cert: Path,
) -> None:
    rc = main(
        [
            "--testnet",
            "--wallethost",
            "10.0.0.3",
            "--walletcert",
            str(wallet_cert),
            "--walletpassphrase",
            "hunter2",
            "--apitoken",
            "secret-token",
            "-d",
            "WLLT=debug",
        ]
    )
    captured = capsys.readouterr()
    assert rc == 0

    payload = json.loads(captured.out)
    home = _home(tmp_path)
    assert payload["network"] == "testnet3"
    assert payload["home_dir"] == str(home)
    assert payload["wallet"]["host"] == "10.0.0.3:19111"
    assert payload["wallet"]["passphrase"] == "***"
    assert payload["api"]["tokens"] == ["***"]
    assert payload["api"]["versions"] == [1, 2]
    assert payload["listeners"] == [":59152"]
    assert payload["levels"]["WLLT"] == "debug"
    assert payload["remaining_args"] == []
    assert "secret-token" not in captured.out
    assert "hunter2" not in captured.out

    log_file = home / "logs" / "testnet3" / "stampd.log"
    messages = [json.loads(line)["message"] for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert messages == [
        f"config file not found: {home / 'stampd.yml'}",
        "configuration resolved for testnet3",
    ]
