"""Segment tag classification for audit analytics."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

FAVORITE_PREFIX = "fav"
LANGUAGE_PREFIX = "lang"


@dataclass(frozen=True)
class SegmentCounts:
  """Number of segment tags per bucket."""

  favorite: int = 0
  language: int = 0
  default: int = 0

  @property
  def total(self) -> int:
    return self.favorite + self.language + self.default

  def as_dict(self) -> dict[str, int]:
    return {"favorite": self.favorite, "language": self.language, "default": self.default}


def classify_segment(tag: str) -> str:
  """Return the bucket name for one tag based on the text before its first underscore."""
  prefix, separator, _ = tag.partition("_")
  if separator and prefix == FAVORITE_PREFIX:
    return "favorite"
  if separator and prefix == LANGUAGE_PREFIX:
    return "language"
  return "default"


def aggregate_segments(segments: Iterable[str]) -> SegmentCounts:
  counts = {"favorite": 0, "language": 0, "default": 0}
  for tag in segments:
    counts[classify_segment(tag)] += 1
  return SegmentCounts(**counts)
