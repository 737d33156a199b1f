from __future__ import annotations

import pytest

from matchrelay.config import DEFAULT_PORT, load_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("HOST", "PORT", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)

    settings = load_settings()

    assert settings.host == "0.0.0.0"
    assert settings.port == DEFAULT_PORT == 8080
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert (settings.host, settings.port, settings.log_level) == ("127.0.0.1", 9001, "DEBUG")


@pytest.mark.parametrize("bad", ["abc", "-1", "70000"])
def test_invalid_port_raises(monkeypatch: pytest.MonkeyPatch, bad: str) -> None:
    monkeypatch.setenv("PORT", bad)
    with pytest.raises(ValueError) as e:
        load_settings()
    assert "PORT" in str(e.value)
