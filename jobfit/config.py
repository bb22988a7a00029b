"""Load matcher settings from config/matcher.yaml and the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobfit.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "matcher.yaml"
DOCUMENTS_DIR: Path = ROOT_DIR / "documents" / "resumes"

# Environment variable → settings field
_ENV_OVERRIDES: dict[str, str] = {
    "OPENROUTER_API_KEY": "api_key",
    "OPENROUTER_BASE_URL": "base_url",
    "OPENROUTER_MODEL": "model",
    "OPENROUTER_REFERER": "referer",
    "MATCHER_TIMEOUT_SECONDS": "timeout",
    "MATCHER_MAX_TOKENS": "max_tokens",
    "MATCHER_TEMPERATURE": "temperature",
}


@dataclass
class MatcherSettings:
    api_key: str = ""
    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "openai/gpt-oss-20b:free"
    referer: str = "https://punaboost.com"
    app_title: str = "PunaBoost AI Job Matcher"
    temperature: float = 0.2
    max_tokens: int = 3000
    timeout: float = 60.0
    max_resume_chars: int = 12000
    max_description_chars: int = 2000

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _coerce(name: str, value: Any) -> Any:
    kind = {f.name: f.type for f in fields(MatcherSettings)}[name]
    if kind == "int":
        return int(value)
    if kind == "float":
        return float(value)
    return str(value).strip()


def _set(values: dict[str, Any], name: str, value: Any, source: str) -> None:
    try:
        values[name] = _coerce(name, value)
    except (TypeError, ValueError):
        log.warning("Ignoring invalid %s=%r from %s; keeping the default", name, value, source)


def load_settings(path: Path | None = None) -> MatcherSettings:
    """Defaults, then the YAML file (if present), then environment variables."""
    path = path or SETTINGS_PATH
    values: dict[str, Any] = {}

    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings must be a YAML mapping. Got: {type(data).__name__}")
        known = {f.name for f in fields(MatcherSettings)}
        for key, value in data.items():
            if key not in known:
                log.warning("Ignoring unknown setting %r in %s", key, path.name)
                continue
            if value is not None:
                _set(values, key, value, path.name)

    for env_key, name in _ENV_OVERRIDES.items():
        raw = get_env(env_key)
        if raw:
            _set(values, name, raw, env_key)

    settings = MatcherSettings(**values)
    if not settings.configured:
        log.warning("OPENROUTER_API_KEY is not set; job recommendations are disabled")
    return settings
