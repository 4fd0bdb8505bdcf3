"""Configuration loading: TOML file, environment variables and explicit overrides.

Priority, highest first: explicit overrides > LAMBDA_TRACING_* environment
variables > config file > defaults.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lambda_tracing.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "lambda_tracing.toml"
ENV_PREFIX = "LAMBDA_TRACING_"


def _default_service_name() -> str:
    return os.environ.get("AWS_LAMBDA_FUNCTION_NAME") or "unknown_service"


class LambdaTracingConfig(BaseModel):
    """Validated tracing settings."""

    model_config = ConfigDict(extra="forbid")

    service_name: str = Field(default_factory=_default_service_name)
    sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    api_key: Optional[str] = None
    enable_console_exporter: bool = False
    enable_otlp_exporter: bool = False
    otlp_endpoint: Optional[str] = None
    otlp_headers: Dict[str, str] = Field(default_factory=dict)
    otlp_timeout: float = Field(default=10.0, gt=0.0)
    flush_on_end: bool = True
    log_spans: bool = False


# (table, key) in the TOML file -> flat config key
_TOML_KEYS = {
    ("tracing", "service_name"): "service_name",
    ("tracing", "sample_rate"): "sample_rate",
    ("tracing", "api_key"): "api_key",
    ("tracing", "flush_on_end"): "flush_on_end",
    ("tracing", "log_spans"): "log_spans",
    ("exporters", "enable_console"): "enable_console_exporter",
    ("exporters", "enable_otlp"): "enable_otlp_exporter",
    ("exporters", "otlp_endpoint"): "otlp_endpoint",
    ("exporters", "otlp_headers"): "otlp_headers",
    ("exporters", "otlp_timeout"): "otlp_timeout",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError("invalid boolean environment variable", {"name": name, "value": raw})


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ConfigError("invalid numeric environment variable", {"name": name, "value": raw}) from None


def _parse_headers(name: str, raw: str) -> Dict[str, str]:
    """Parse ``key=value,key2=value2`` (the OTEL_EXPORTER_OTLP_HEADERS format)."""
    headers = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        if "=" not in item:
            raise ConfigError("invalid header entry", {"name": name, "entry": item})
        key, value = item.split("=", 1)
        headers[key.strip()] = value.strip()
    return headers


def _parse_str(name: str, raw: str) -> str:
    return raw


# env var suffix -> (flat config key, parser)
_ENV_VARS = {
    "SERVICE_NAME": ("service_name", _parse_str),
    "SAMPLE_RATE": ("sample_rate", _parse_float),
    "API_KEY": ("api_key", _parse_str),
    "ENABLE_CONSOLE_EXPORTER": ("enable_console_exporter", _parse_bool),
    "ENABLE_OTLP_EXPORTER": ("enable_otlp_exporter", _parse_bool),
    "OTLP_ENDPOINT": ("otlp_endpoint", _parse_str),
    "OTLP_HEADERS": ("otlp_headers", _parse_headers),
    "OTLP_TIMEOUT": ("otlp_timeout", _parse_float),
    "FLUSH_ON_END": ("flush_on_end", _parse_bool),
    "LOG_SPANS": ("log_spans", _parse_bool),
}


def find_config_file() -> Optional[str]:
    """Look for lambda_tracing.toml in the working directory, then the home directory."""
    for directory in (Path.cwd(), Path.home()):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return str(candidate)
    return None


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file as a nested dict.

    Returns an empty dict if the file doesn't exist.

    Raises:
        ConfigError: the file isn't valid TOML.
    """
    file_path = Path(path)
    if not file_path.is_file():
        return {}
    try:
        with file_path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError("invalid TOML config file", {"path": path, "error": str(exc)}) from exc


def flatten_toml_config(nested: Mapping[str, Any]) -> Dict[str, Any]:
    """Map the [tracing]/[exporters] tables onto flat config keys. Unknown keys are logged and dropped."""
    flat: Dict[str, Any] = {}
    for table, values in nested.items():
        if not isinstance(values, Mapping):
            logger.warning("Ignoring non-table config entry %r", table)
            continue
        for key, value in values.items():
            flat_key = _TOML_KEYS.get((table, key))
            if flat_key is None:
                logger.warning("Ignoring unknown config key %s.%s", table, key)
                continue
            flat[flat_key] = value
    return flat


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read LAMBDA_TRACING_* variables. Variables that aren't set don't appear in the result."""
    environ = os.environ if environ is None else environ
    loaded: Dict[str, Any] = {}
    for suffix, (key, parse) in _ENV_VARS.items():
        name = ENV_PREFIX + suffix
        raw = environ.get(name)
        if raw is None or raw == "":
            continue
        loaded[key] = parse(name, raw)
    return loaded


def load_config_with_priority(
    config_file: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Merge file, environment and overrides into one flat dict.

    ``None`` values in ``overrides`` are ignored so callers can pass
    through unset keyword arguments.
    """
    path = config_file or find_config_file()
    merged: Dict[str, Any] = {}
    if path:
        merged.update(flatten_toml_config(load_toml_config(path)))
    merged.update(load_config_from_env(environ))
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return merged


def load_config(
    config_file: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> LambdaTracingConfig:
    """
    Build a validated LambdaTracingConfig.

    Raises:
        ConfigError: a source can't be read or a value fails validation.
    """
    merged = load_config_with_priority(config_file, overrides, environ)
    try:
        return LambdaTracingConfig(**merged)
    except ValidationError as exc:
        raise ConfigError("invalid tracing configuration", {"errors": exc.error_count()}) from exc
