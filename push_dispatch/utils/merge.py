"""Recursive mapping merge used for provider payload overrides."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
  """
  Return a new dict with ``override`` merged into ``base``.

  Nested mappings merge key by key. Lists, scalars and mismatched types take
  the override value, so a mapping merged onto a scalar replaces it and a
  scalar merged onto a mapping replaces the mapping.
  """
  merged: dict[str, Any] = copy.deepcopy(dict(base))
  for key, value in override.items():
    current = merged.get(key)
    if isinstance(current, Mapping) and isinstance(value, Mapping):
      merged[key] = deep_merge(current, value)
    else:
      merged[key] = copy.deepcopy(value)
  return merged
