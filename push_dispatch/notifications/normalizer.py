"""Alert field normalization between legacy and provider-native key names."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Legacy snake_case localization keys mapped to their APNs alert names.
LEGACY_ALERT_KEYS: dict[str, str] = {
  "body_loc_key": "loc-key",
  "body_loc_args": "loc-args",
  "title_loc_key": "title-loc-key",
  "title_loc_args": "title-loc-args",
}


def normalize_alert(alert: Mapping[str, Any]) -> dict[str, Any]:
  """Return a copy of ``alert`` with legacy localization keys rewritten."""
  normalized = dict(alert)
  for legacy_key, native_key in LEGACY_ALERT_KEYS.items():
    if legacy_key not in normalized:
      continue

    value = normalized.pop(legacy_key)
    # Empty values are dropped rather than forwarded under the native name.
    if value:
      normalized[native_key] = value

  return normalized
