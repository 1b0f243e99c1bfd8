"""Multi-provider SNS envelope assembly."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from push_dispatch.notifications.providers import ALL_PROVIDERS, Provider, compose_payload

DEFAULT_TTL_SECONDS = 604800

# SNS reads a per-protocol TTL from these attributes and ignores the ones it does not deliver to.
TTL_ATTRIBUTE_KEYS: tuple[str, ...] = (
  "AWS.SNS.MOBILE.APNS.TTL",
  "AWS.SNS.MOBILE.APNS_SANDBOX.TTL",
  "AWS.SNS.MOBILE.GCM.TTL",
)


@dataclass(frozen=True)
class Envelope:
  """Serialized provider payloads plus the transport attributes for one send."""

  message: dict[str, str]
  ttl: int
  attributes: dict[str, dict[str, str]]

  def to_json(self) -> str:
    return json.dumps(self.message)


def resolve_ttl(options: Mapping[str, Any] | None, default_ttl: int = DEFAULT_TTL_SECONDS) -> int:
  """Return the caller's ``time_to_live`` or the default."""
  if options and options.get("time_to_live") is not None:
    return int(options["time_to_live"])
  return default_ttl


def build_ttl_attributes(ttl: int) -> dict[str, dict[str, str]]:
  return {key: {"DataType": "String", "StringValue": str(ttl)} for key in TTL_ATTRIBUTE_KEYS}


def build_envelope(
  alert: Mapping[str, Any],
  data: Mapping[str, Any] | None,
  options: Mapping[str, Any] | None = None,
  providers: Iterable[Provider] = ALL_PROVIDERS,
  default: str = "",
  identity_id: str | None = None,
  *,
  legacy_data_mirroring: bool = False,
  default_ttl: int = DEFAULT_TTL_SECONDS,
) -> Envelope:
  """Compose every requested provider payload into one SNS JSON message."""
  message: dict[str, str] = {"default": default}
  for provider in providers:
    payload = compose_payload(provider, alert, data, options, identity_id, legacy_data_mirroring=legacy_data_mirroring)
    message[provider.value] = json.dumps(payload)

  ttl = resolve_ttl(options, default_ttl)
  return Envelope(message=message, ttl=ttl, attributes=build_ttl_attributes(ttl))
