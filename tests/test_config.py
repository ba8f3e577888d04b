from __future__ import annotations

from pathlib import Path

import pytest

from ncc_core.config import NccConfig, load_config


def _write_config(root: Path, body: str) -> None:
    (root / "config").mkdir()
    (root / "config" / "config.toml").write_text(body, encoding="utf-8")


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.data_path == tmp_path / ".ncc"
    assert config.max_attempts == 3
    assert config.backoff_seconds == 0.0
    assert config.prefer_static is False
    assert config.lock_path == tmp_path / ".ncc" / "package.lck"
    assert config.repositories_path == tmp_path / ".ncc" / "repositories.yml"


def test_config_values_and_env_resolution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NCC_TEST_AGENT", "ncc-ci")
    _write_config(
        tmp_path,
        "\n".join(
            [
                "[ncc]",
                'data_path = "state"',
                "timeout_seconds = 5",
                "max_attempts = 0",
                'user_agent = "${NCC_TEST_AGENT}"',
                'prefer_static = "yes"',
            ]
        ),
    )

    config = load_config(tmp_path)

    assert config.data_path == tmp_path / "state"
    assert config.timeout_seconds == 5.0
    assert config.max_attempts == 3
    assert config.user_agent == "ncc-ci"
    assert config.prefer_static is True


def test_unreadable_config_falls_back_to_defaults(tmp_path: Path) -> None:
    _write_config(tmp_path, "[ncc\nbroken")

    assert load_config(tmp_path) == NccConfig(data_path=tmp_path / ".ncc")
