"""
Application configuration management.

Loads non-sensitive configuration from JSON and the model API key from
environment variables or a secret file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from batching import BatchConfig
from llm_handler import DEFAULT_MODELS

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("dataset_compare_config.json")
DEFAULT_DATASET_A = "datasetA.json"
DEFAULT_DATASET_B = "datasetB.json"
DEFAULT_REPORT_FILE = "comparison_report.json"

API_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
}


@dataclass(frozen=True)
class Settings:
    """Container for application configuration."""

    dataset_a: Path
    dataset_b: Path
    report_file: Path
    summary_file: Optional[Path]
    provider: str
    api_key: str
    embedding_model: str
    completion_model: str
    batch_size: int
    rate_limit_delay: float
    diff_max_tokens: int
    diff_temperature: float
    log_file: Optional[Path]
    log_format: Optional[str]
    log_date_format: Optional[str]
    debug: bool

    @property
    def batch_config(self) -> BatchConfig:
        return BatchConfig(batch_size=self.batch_size, inter_batch_delay=self.rate_limit_delay)


def _read_json(path: Path) -> Dict[str, Any]:
    """Read a JSON file into a dictionary."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file missing: {path}") from None
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in configuration file: {path}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a JSON object: {path}")
    return data


def _resolve_path(base: Path, value: Optional[str]) -> Optional[Path]:
    """Resolve a possibly relative path against a base directory."""
    if not value:
        return None
    candidate = Path(value)
    return candidate if candidate.is_absolute() else (base / candidate).resolve()


def _load_secret(base: Path, key_path: Optional[str]) -> Optional[str]:
    """Load a secret value from a text file."""
    if not key_path:
        return None
    secret_file = _resolve_path(base, key_path)
    if secret_file and secret_file.exists():
        return secret_file.read_text(encoding="utf-8").strip()
    LOGGER.warning("Secret file %s not found; skipping", secret_file)
    return None


def load_settings(config_path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Load application settings from config file and environment variables.

    A missing file at the default location is treated as an empty
    configuration; a missing file at any other path is an error.

    Args:
        config_path: Path to the JSON configuration file.

    Returns:
        Settings dataclass populated with configuration values.
    """
    is_default = config_path == DEFAULT_CONFIG_PATH
    config_path = config_path.resolve()
    if config_path.exists():
        config = _read_json(config_path)
    elif is_default:
        LOGGER.debug("No configuration file at %s; using defaults", config_path)
        config = {}
    else:
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    base_dir = config_path.parent

    provider = str(config.get("provider", "gemini")).strip().lower()
    if provider not in DEFAULT_MODELS:
        raise ValueError(
            f"Config 'provider' must be one of {sorted(DEFAULT_MODELS)}, got '{provider}'."
        )
    default_embedding_model, default_completion_model = DEFAULT_MODELS[provider]

    batch_size = int(config.get("batch_size", 10))
    if batch_size <= 0:
        raise ValueError("Config 'batch_size' must be > 0.")

    rate_limit_delay = float(config.get("rate_limit_delay", 1.0))
    if rate_limit_delay < 0:
        raise ValueError("Config 'rate_limit_delay' must be >= 0.")

    diff_max_tokens = int(config.get("diff_max_tokens", 200))
    if diff_max_tokens <= 0:
        raise ValueError("Config 'diff_max_tokens' must be > 0.")

    diff_temperature = float(config.get("diff_temperature", 0.3))
    if not 0.0 <= diff_temperature <= 2.0:
        raise ValueError("Config 'diff_temperature' must be between 0 and 2.")

    dataset_a = _resolve_path(base_dir, config.get("dataset_a", DEFAULT_DATASET_A))
    dataset_b = _resolve_path(base_dir, config.get("dataset_b", DEFAULT_DATASET_B))
    report_file = _resolve_path(base_dir, config.get("report_file", DEFAULT_REPORT_FILE))
    summary_file = _resolve_path(base_dir, config.get("summary_file"))

    log_file_str = config.get("log_file")
    if log_file_str:
        # Replace timestamp placeholder if present
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file_str = log_file_str.replace("YYYYMMDD_HHMMSS", timestamp)
        log_file = _resolve_path(base_dir, log_file_str)
    else:
        log_file = None

    env_name = API_KEY_ENV[provider]
    secret_key = _load_secret(base_dir, config.get("api_key_file"))
    api_key = secret_key or os.environ.get(env_name, "").strip()
    if not api_key:
        raise ValueError(
            f"API key missing. Set {env_name} env or provide api_key_file."
        )

    return Settings(
        dataset_a=dataset_a,
        dataset_b=dataset_b,
        report_file=report_file,
        summary_file=summary_file,
        provider=provider,
        api_key=api_key,
        embedding_model=config.get("embedding_model", default_embedding_model),
        completion_model=config.get("completion_model", default_completion_model),
        batch_size=batch_size,
        rate_limit_delay=rate_limit_delay,
        diff_max_tokens=diff_max_tokens,
        diff_temperature=diff_temperature,
        log_file=log_file,
        log_format=config.get("log_format"),
        log_date_format=config.get("log_date_format"),
        debug=bool(config.get("debug", False)),
    )
