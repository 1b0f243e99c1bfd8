"""Audit record derivation for notifications with user-visible content."""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from push_dispatch.notifications.segments import SegmentCounts, aggregate_segments

AUDIT_TABLE_NAME = "CustomSnsMessages"


@dataclass(frozen=True)
class AuditRecord:
  """Write-once record of one dispatch call."""

  body: str
  title: str
  endpoints: tuple[str, ...]
  org_id: str
  timestamp: int
  marketing: bool = False
  click_action: str | None = None
  link_type: str | None = None
  link_url: str | None = None
  identity_id: str | None = None
  segments: tuple[str, ...] | None = None
  segment_counts: SegmentCounts | None = None
  media_type: str | None = None
  media_url: str | None = None

  def to_item(self) -> dict[str, dict[str, Any]]:
    """Return the typed DynamoDB attribute map for this record."""
    item: dict[str, dict[str, Any]] = {
      "body": {"S": self.body},
      "title": {"S": self.title},
      "timestamp": {"N": str(self.timestamp)},
      "marketing": {"BOOL": self.marketing},
    }
    # DynamoDB rejects empty strings in key attributes and empty sets anywhere.
    if self.org_id:
      item["org_id"] = {"S": self.org_id}
    if self.endpoints:
      item["endpoints"] = {"SS": list(self.endpoints)}

    optional_strings = {
      "click_action": self.click_action,
      "link_type": self.link_type,
      "link_url": self.link_url,
      "identity_id": self.identity_id,
      "media_type": self.media_type,
      "media_url": self.media_url,
    }
    for name, value in optional_strings.items():
      if value:
        item[name] = {"S": value}

    if self.segments:
      item["segments"] = {"SS": list(self.segments)}
    if self.segment_counts is not None:
      item["segment_counts"] = {"M": {name: {"N": str(count)} for name, count in self.segment_counts.as_dict().items()}}

    return item


def _unique(values: Iterable[str]) -> tuple[str, ...]:
  """Deduplicate while keeping first-seen order."""
  return tuple(dict.fromkeys(value for value in values if value))


def _optional_str(value: Any) -> str | None:
  if value is None or value == "":
    return None
  return str(value)


def _deeplink_fields(data: Mapping[str, Any]) -> tuple[str | None, str | None]:
  """Extract link metadata when the deeplink targets an external URL."""
  deeplink = data.get("deeplink")
  if not isinstance(deeplink, Mapping):
    return None, None

  link_data = deeplink.get("data")
  if not isinstance(link_data, Mapping) or link_data.get("type") != "url":
    return None, None

  return "url", _optional_str(link_data.get("url"))


def build_audit_record(
  data: Mapping[str, Any] | None,
  alert: Mapping[str, Any],
  endpoints: Iterable[str],
  identity_id: str | None = None,
  segments: Iterable[str] | None = None,
  marketing: bool = False,
  timestamp: int | None = None,
) -> AuditRecord | None:
  """Build the audit record for a dispatch call, or ``None`` when the alert has no body."""
  body = alert.get("body")
  if not body:
    return None

  data = data or {}
  title = alert.get("title") or " "
  link_type, link_url = _deeplink_fields(data)

  segment_list = list(segments) if segments else []
  segment_counts = aggregate_segments(segment_list) if segment_list else None

  return AuditRecord(
    body=str(body),
    title=str(title),
    endpoints=_unique(endpoints),
    org_id=_optional_str(data.get("org_id")) or "",
    timestamp=int(time.time()) if timestamp is None else timestamp,
    marketing=bool(marketing),
    click_action=_optional_str(data.get("click_action")),
    link_type=link_type,
    link_url=link_url,
    identity_id=_optional_str(identity_id),
    segments=_unique(segment_list) or None,
    segment_counts=segment_counts,
    media_type=_optional_str(data.get("media_type")),
    media_url=_optional_str(data.get("media_url")),
  )
