"""Dispatcher configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from push_dispatch.notifications.audit import AUDIT_TABLE_NAME
from push_dispatch.notifications.contracts import ConfigurationError
from push_dispatch.notifications.envelope import DEFAULT_TTL_SECONDS
from push_dispatch.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)


@dataclass(frozen=True)
class Settings:
  """Typed settings for push dispatch."""

  region: str
  audit_table: str
  audit_enabled: bool
  delivery_enabled: bool
  default_ttl_seconds: int
  max_workers: int
  send_timeout_seconds: float | None
  aws_timeout_seconds: int
  legacy_data_mirroring: bool
  sns_endpoint_url: str | None
  dynamodb_endpoint_url: str | None
  log_level: str
  log_dir: str | None
  log_max_bytes: int
  log_backup_count: int


def resolve_region(region: str | None = None) -> str:
  """Return the explicit region or ``AWS_DEFAULT_REGION``."""
  resolved = (region or os.getenv("AWS_DEFAULT_REGION") or "").strip()
  if not resolved:
    raise ConfigurationError("Set the 'AWS_DEFAULT_REGION' environment variable or pass a region.")
  return resolved


def _parse_bool(raw: str | None, *, default: bool = False) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None or not raw.strip():
    return default

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  return value or None


def _positive_int(name: str, default: str) -> int:
  raw = os.getenv(name, default)
  try:
    value = int(raw)
  except ValueError as exc:
    raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc
  if value <= 0:
    raise ConfigurationError(f"{name} must be a positive integer.")
  return value


def _optional_positive_float(name: str) -> float | None:
  raw = _optional_str(os.getenv(name))
  if raw is None:
    return None
  try:
    value = float(raw)
  except ValueError as exc:
    raise ConfigurationError(f"{name} must be a number, got {raw!r}.") from exc
  if value <= 0:
    raise ConfigurationError(f"{name} must be positive.")
  return value


def _log_level(raw: str | None) -> str:
  level = (raw or "INFO").strip().upper()
  if not isinstance(logging.getLevelName(level), int):
    raise ConfigurationError(f"PUSH_LOG_LEVEL must be a standard logging level, got {raw!r}.")
  return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  return Settings(
    region=resolve_region(),
    audit_table=(os.getenv("PUSH_AUDIT_TABLE") or AUDIT_TABLE_NAME).strip(),
    audit_enabled=_parse_bool(os.getenv("PUSH_AUDIT_ENABLED"), default=True),
    delivery_enabled=_parse_bool(os.getenv("PUSH_DELIVERY_ENABLED"), default=True),
    default_ttl_seconds=_positive_int("PUSH_DEFAULT_TTL_SECONDS", str(DEFAULT_TTL_SECONDS)),
    max_workers=_positive_int("PUSH_MAX_WORKERS", "1"),
    send_timeout_seconds=_optional_positive_float("PUSH_SEND_TIMEOUT_SECONDS"),
    aws_timeout_seconds=_positive_int("PUSH_AWS_TIMEOUT_SECONDS", "10"),
    legacy_data_mirroring=_parse_bool(os.getenv("PUSH_LEGACY_DATA_MIRRORING")),
    sns_endpoint_url=_optional_str(os.getenv("PUSH_SNS_ENDPOINT_URL")),
    dynamodb_endpoint_url=_optional_str(os.getenv("PUSH_DYNAMODB_ENDPOINT_URL")),
    log_level=_log_level(os.getenv("PUSH_LOG_LEVEL")),
    log_dir=_optional_str(os.getenv("PUSH_LOG_DIR")),
    log_max_bytes=_positive_int("PUSH_LOG_MAX_BYTES", "5242880"),
    log_backup_count=_positive_int("PUSH_LOG_BACKUP_COUNT", "10"),
  )
