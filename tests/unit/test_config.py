"""
tests/unit/test_config.py

Settings loading: defaults, validation, credential lookup.
"""
import json

import pytest

from config import DEFAULT_CONFIG_PATH, load_settings


@pytest.fixture(autouse=True)
def _clear_keys(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def _write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_when_default_file_absent(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")

    settings = load_settings(DEFAULT_CONFIG_PATH)

    assert settings.provider == "gemini"
    assert settings.api_key == "g-key"
    assert settings.embedding_model == "models/text-embedding-004"
    assert settings.completion_model == "gemini-1.5-flash"
    assert settings.batch_size == 10
    assert settings.rate_limit_delay == 1.0
    assert settings.diff_max_tokens == 200
    assert settings.diff_temperature == 0.3
    assert settings.dataset_a == (tmp_path / "datasetA.json").resolve()
    assert settings.report_file == (tmp_path / "comparison_report.json").resolve()
    assert settings.summary_file is None
    assert settings.log_file is None


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_settings(path)


def test_missing_credential_raises(tmp_path):
    path = _write_config(tmp_path, {})
    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        load_settings(path)


def test_openai_provider_uses_openai_key_and_models(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    path = _write_config(tmp_path, {"provider": "OpenAI"})

    settings = load_settings(path)

    assert settings.provider == "openai"
    assert settings.api_key == "sk-test"
    assert settings.embedding_model == "text-embedding-3-small"
    assert settings.completion_model == "gpt-4.1-mini"


def test_openai_provider_ignores_gemini_key(tmp_path, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    path = _write_config(tmp_path, {"provider": "openai"})
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        load_settings(path)


def test_api_key_file_takes_precedence(tmp_path, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    (tmp_path / "key.txt").write_text("file-key\n", encoding="utf-8")
    path = _write_config(tmp_path, {"api_key_file": "key.txt"})

    assert load_settings(path).api_key == "file-key"


def test_paths_resolve_against_config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    path = _write_config(tmp_path, {
        "dataset_a": "data/a.json",
        "dataset_b": "/abs/b.json",
        "summary_file": "out/summary.html",
        "log_file": "logs/run_YYYYMMDD_HHMMSS.log",
    })

    settings = load_settings(path)

    assert settings.dataset_a == (tmp_path / "data" / "a.json").resolve()
    assert str(settings.dataset_b).endswith("b.json")
    assert settings.summary_file == (tmp_path / "out" / "summary.html").resolve()
    assert "YYYYMMDD_HHMMSS" not in settings.log_file.name


def test_batch_config_built_from_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    path = _write_config(tmp_path, {"batch_size": 4, "rate_limit_delay": 0})

    config = load_settings(path).batch_config

    assert config.batch_size == 4
    assert config.inter_batch_delay == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"provider": "llama"},
        {"batch_size": 0},
        {"rate_limit_delay": -1},
        {"diff_max_tokens": 0},
        {"diff_temperature": 3},
    ],
)
def test_invalid_values_rejected(tmp_path, monkeypatch, overrides):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with pytest.raises(ValueError):
        load_settings(_write_config(tmp_path, overrides))
