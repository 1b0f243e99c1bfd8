"""Provider-native payload composition for APNs and GCM."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

from push_dispatch.notifications.contracts import UnknownProviderError
from push_dispatch.notifications.normalizer import normalize_alert
from push_dispatch.utils.merge import deep_merge

Composer = Callable[[Mapping[str, Any], Mapping[str, Any] | None, Mapping[str, Any] | None, str | None], dict[str, Any]]


class Provider(str, Enum):
  """Push channel families understood by the fan-out service."""

  APNS = "APNS"
  APNS_SANDBOX = "APNS_SANDBOX"
  GCM = "GCM"


ALL_PROVIDERS: tuple[Provider, ...] = (Provider.GCM, Provider.APNS, Provider.APNS_SANDBOX)


def _override_for(options: Mapping[str, Any] | None, key: str) -> Mapping[str, Any] | None:
  if not options:
    return None
  override = options.get(key)
  if isinstance(override, Mapping) and override:
    return override
  return None


def _inject_identity(payload: dict[str, Any], identity_id: str | None) -> dict[str, Any]:
  """Place the sender identity inside the payload's data section."""
  if not identity_id:
    return payload

  data_section = payload.get("data")
  data_section = dict(data_section) if isinstance(data_section, Mapping) else {}
  data_section["identity_id"] = identity_id
  payload["data"] = data_section
  return payload


def compose_apns(alert: Mapping[str, Any], data: Mapping[str, Any] | None, options: Mapping[str, Any] | None, identity_id: str | None) -> dict[str, Any]:
  """Build an APNs payload; sandbox and production share this shape."""
  payload: dict[str, Any] = {"aps": {"alert": normalize_alert(alert)}, "data": dict(data or {})}

  override = _override_for(options, Provider.APNS.value)
  if override is not None:
    payload = deep_merge(payload, override)

  return _inject_identity(payload, identity_id)


def compose_gcm(alert: Mapping[str, Any], data: Mapping[str, Any] | None, options: Mapping[str, Any] | None, identity_id: str | None) -> dict[str, Any]:
  """Build a GCM payload with the alert as the notification block."""
  payload: dict[str, Any] = {"notification": dict(alert), "data": dict(data or {})}

  override = _override_for(options, Provider.GCM.value)
  if override is not None:
    payload = deep_merge(payload, override)

  return _inject_identity(payload, identity_id)


COMPOSERS: dict[Provider, Composer] = {
  Provider.APNS: compose_apns,
  Provider.APNS_SANDBOX: compose_apns,
  Provider.GCM: compose_gcm,
}


def resolve_providers(names: Iterable[str | Provider]) -> tuple[Provider, ...]:
  """Convert provider names to enum members, rejecting unknown names."""
  resolved: list[Provider] = []
  for name in names:
    try:
      provider = Provider(name)
    except ValueError as exc:
      raise UnknownProviderError(f"No payload composer for provider {name!r}") from exc

    if provider not in resolved:
      resolved.append(provider)

  return tuple(resolved)


def _mirror_legacy_data(payload: dict[str, Any], data: Mapping[str, Any] | None) -> dict[str, Any]:
  """Copy data fields beside ``aps`` for iOS clients that predate the data block."""
  for key, value in (data or {}).items():
    payload.setdefault(key, value)
  return payload


def compose_payload(
  provider: Provider, alert: Mapping[str, Any], data: Mapping[str, Any] | None, options: Mapping[str, Any] | None, identity_id: str | None = None, *, legacy_data_mirroring: bool = False
) -> dict[str, Any]:
  """Compose one provider payload from the shared alert, data and options."""
  composer = COMPOSERS.get(provider)
  if composer is None:
    raise UnknownProviderError(f"No payload composer for provider {provider!r}")

  payload = composer(alert, data, options, identity_id)
  if legacy_data_mirroring and provider in (Provider.APNS, Provider.APNS_SANDBOX):
    payload = _mirror_legacy_data(payload, data)
  return payload
