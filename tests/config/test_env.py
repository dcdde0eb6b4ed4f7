# tests/config/test_env.py

import os
import pytest

from turnover_sla.config.env import (
    EnvError,
    load_env,
    get_app_env,
    env as env_get,
)


def _write_env_file(dirpath, text=""):
    f = dirpath / ".env"
    f.write_text(text)
    return f


def _clear_keys(monkeypatch, *names):
    # setenv first so monkeypatch restores the original state even when
    # load_dotenv writes the key behind its back
    for n in names:
        monkeypatch.setenv(n, "")
        monkeypatch.delenv(n)


def test_load_env_reads_file_and_sets_process_env_when_missing(tmp_path, monkeypatch):
    _clear_keys(monkeypatch, "TURNOVER_SLA_CONFIG", "TURNOVER_SLA_SHEET")

    f = _write_env_file(
        tmp_path,
        "TURNOVER_SLA_CONFIG=/cfg/run.json\nexport TURNOVER_SLA_SHEET='Orders' # main sheet\n",
    )

    loaded = load_env(f, override=False)
    assert loaded["TURNOVER_SLA_CONFIG"] == "/cfg/run.json"
    assert loaded["TURNOVER_SLA_SHEET"] == "Orders"
    assert os.environ["TURNOVER_SLA_CONFIG"] == "/cfg/run.json"


def test_process_env_wins_over_dotenv(tmp_path, monkeypatch):
    _clear_keys(monkeypatch, "TURNOVER_SLA_CONFIG", "TURNOVER_SLA_SHEET")
    f = _write_env_file(
        tmp_path, "TURNOVER_SLA_CONFIG=file.json\nTURNOVER_SLA_SHEET=FromFile\n")
    monkeypatch.setenv("TURNOVER_SLA_CONFIG", "env.json")

    cfg = get_app_env(f)

    assert cfg.TURNOVER_SLA_CONFIG == "env.json"
    assert cfg.TURNOVER_SLA_SHEET == "FromFile"


def test_override_true_file_wins(tmp_path, monkeypatch):
    _clear_keys(monkeypatch, "TURNOVER_SLA_CONFIG")
    monkeypatch.setenv("TURNOVER_SLA_CONFIG", "env.json")
    f = _write_env_file(tmp_path, "TURNOVER_SLA_CONFIG=file.json\n")

    load_env(f, override=True)
    assert os.environ["TURNOVER_SLA_CONFIG"] == "file.json"


def test_get_app_env_without_anything_set(tmp_path, monkeypatch):
    _clear_keys(monkeypatch, "TURNOVER_SLA_CONFIG", "TURNOVER_SLA_SHEET")
    cfg = get_app_env(tmp_path / ".env")
    assert cfg.TURNOVER_SLA_CONFIG is None
    assert cfg.TURNOVER_SLA_SHEET is None


def test_strict_raises_when_missing(tmp_path, monkeypatch):
    _clear_keys(monkeypatch, "TURNOVER_SLA_CONFIG", "TURNOVER_SLA_SHEET")
    with pytest.raises(EnvError) as e:
        get_app_env(dotenv_path=tmp_path / ".env", strict=True)
    assert "TURNOVER_SLA_CONFIG" in str(e.value)


def test_env_accessor(monkeypatch):
    _clear_keys(monkeypatch, "SOME_MISSING_VAR")
    with pytest.raises(KeyError):
        env_get("SOME_MISSING_VAR", required=True)
    assert env_get("SOME_MISSING_VAR", default="fallback") == "fallback"
    monkeypatch.setenv("SOME_INT_VAR", "7")
    assert env_get("SOME_INT_VAR", cast=int) == 7
