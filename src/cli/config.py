"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. --config <path> CLI flag
2. ./shiprisk.yaml or ./shiprisk.yml (working directory)
3. ~/.shiprisk/config.yaml (user home)

Environment variables override YAML: SHIPRISK_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.
With no config file at all, defaults plus env overrides are used.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from src.errors import ConfigurationError

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

ENV_PREFIX = "SHIPRISK_"


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Args:
        value: String potentially containing ${VAR} references.

    Returns:
        String with all ${VAR} references replaced by their env values.
        Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


def _default_model() -> str:
    from src.services.text_completion import DEFAULT_MODEL

    return os.environ.get("SHIPRISK_COMPLETION_MODEL", DEFAULT_MODEL)


class ServerConfig(BaseModel):
    """HTTP server and logging settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"
    log_format: Literal["text", "json"] = "text"
    log_file: str | None = None


class CompletionConfig(BaseModel):
    """Text-completion service settings."""

    api_key: str = ""
    model: str = Field(default_factory=_default_model)
    max_tokens: int = 1024
    timeout_seconds: float = 30.0


class ShipmentApiConfig(BaseModel):
    """Shipment API settings.

    The HTTP shipment API accepts raw filter text, so inline queries are
    the default.
    """

    url: str = ""
    query_mode: Literal["parameterized", "inline"] = "inline"
    timeout_seconds: float = 30.0


class PredictionConfig(BaseModel):
    """SLA prediction settings."""

    endpoint: str = ""
    api_key: str = ""
    use_mock_predictions: bool = False
    mock_predictions_path: str | None = None
    timeout_seconds: float = 30.0


class AppConfig(BaseModel):
    """Top-level configuration for ShipRisk."""

    server: ServerConfig = ServerConfig()
    completion: CompletionConfig = CompletionConfig()
    shipment_api: ShipmentApiConfig = ShipmentApiConfig()
    prediction: PredictionConfig = PredictionConfig()

    def missing_settings(self) -> list[str]:
        """List the required settings that are unset."""
        missing = []
        if not self.shipment_api.url:
            missing.append("shipment_api.url")
        if not self.completion.api_key:
            missing.append("completion.api_key")
        if self.prediction.use_mock_predictions:
            if not self.prediction.mock_predictions_path:
                missing.append("prediction.mock_predictions_path")
        else:
            if not self.prediction.endpoint:
                missing.append("prediction.endpoint")
            if not self.prediction.api_key:
                missing.append("prediction.api_key")
        return missing

    def require_runtime(self) -> "AppConfig":
        """Fail fast when a required setting is missing.

        Raises:
            ConfigurationError: Listing every missing setting.
        """
        missing = self.missing_settings()
        if missing:
            raise ConfigurationError(missing)
        return self


def _find_config_file() -> Path | None:
    candidates = [
        Path.cwd() / "shiprisk.yaml",
        Path.cwd() / "shiprisk.yml",
        Path.home() / ".shiprisk" / "config.yaml",
        Path.home() / ".shiprisk" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply SHIPRISK_<SECTION>_<KEY> env var overrides to config data.

    Matches section names by longest prefix so multi-word section names
    like ``shipment_api`` are handled correctly. For example,
    ``SHIPRISK_SHIPMENT_API_URL`` maps to section ``shipment_api``,
    field ``url``.

    Values stay strings; Pydantic coerces them to each field's type.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    known_sections = sorted(AppConfig.model_fields.keys(), key=len, reverse=True)
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        suffix = key[len(ENV_PREFIX):].lower()
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                field = suffix[len(section_prefix):]
                if field in AppConfig.model_fields[section].annotation.model_fields:
                    section_data = data.setdefault(section, {})
                    if isinstance(section_data, dict):
                        section_data[field] = value
                break
    return data


def load_config(config_path: str | None = None) -> AppConfig:
    """Load ShipRisk configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.shiprisk/).

    Returns:
        Parsed and validated AppConfig. Defaults apply when no file exists.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
    """
    raw_data: dict[str, Any] = {}
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    return AppConfig(**data)
