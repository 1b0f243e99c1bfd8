"""Fan-out coordination of push sends and their audit record."""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any

from push_dispatch.notifications.audit import AUDIT_TABLE_NAME, build_audit_record
from push_dispatch.notifications.contracts import AuditStore, BatchPublishResult, PublishResult, PushDispatchError, PushTransport, TransportError
from push_dispatch.notifications.envelope import DEFAULT_TTL_SECONDS, Envelope, build_envelope
from push_dispatch.notifications.providers import ALL_PROVIDERS, Provider, resolve_providers


class PushDispatcher:
  """Publishes one logical alert to one or many SNS endpoints."""

  def __init__(
    self,
    transport: PushTransport,
    store: AuditStore,
    *,
    table_name: str = AUDIT_TABLE_NAME,
    max_workers: int = 1,
    send_timeout_seconds: float | None = None,
    legacy_data_mirroring: bool = False,
    default_ttl: int = DEFAULT_TTL_SECONDS,
    logger: logging.Logger | None = None,
  ) -> None:
    if max_workers < 1:
      raise ValueError("max_workers must be a positive integer.")
    self._transport = transport
    self._store = store
    self._table_name = table_name
    self._max_workers = max_workers
    self._send_timeout_seconds = send_timeout_seconds
    self._legacy_data_mirroring = legacy_data_mirroring
    self._default_ttl = default_ttl
    self._logger = logger or logging.getLogger(__name__)

  def publish_to_endpoint(
    self,
    endpoint: str,
    alert: Mapping[str, Any],
    data: Mapping[str, Any] | None,
    options: Mapping[str, Any] | None = None,
    providers: Iterable[str | Provider] = ALL_PROVIDERS,
    default: str = "",
    save: bool = True,
    identity_id: str | None = None,
    segments: Sequence[str] | None = None,
    marketing: bool = False,
  ) -> str | None:
    """Send to a single endpoint and return the transport message id."""
    # Unknown providers are a configuration error for the whole call, raised before input validation.
    resolved = resolve_providers(providers)
    if not endpoint or not alert:
      self._logger.warning("Skipping push publish: endpoint_present=%s alert_present=%s", bool(endpoint), bool(alert))
      return None

    envelope = self._build_envelope(alert, data, options, resolved, default, identity_id)
    message_id = self._send(endpoint, envelope)

    if save:
      self._save_audit(data, alert, [endpoint], identity_id, segments, marketing)

    return message_id

  def publish_to_endpoints(
    self,
    endpoints: Iterable[str],
    alert: Mapping[str, Any],
    data: Mapping[str, Any] | None,
    options: Mapping[str, Any] | None = None,
    providers: Iterable[str | Provider] = ALL_PROVIDERS,
    default: str = "",
    save: bool = True,
    identity_id: str | None = None,
    segments: Sequence[str] | None = None,
    marketing: bool = False,
  ) -> BatchPublishResult | None:
    """Send the same alert to every endpoint, isolating per-endpoint failures."""
    if isinstance(endpoints, str):
      raise TypeError("endpoints must be an iterable of endpoint ARNs, not a single string")

    resolved = resolve_providers(providers)
    targets = [endpoint for endpoint in endpoints or () if endpoint]
    if not targets or not alert:
      self._logger.warning("Skipping push fan-out: endpoint_count=%d alert_present=%s", len(targets), bool(alert))
      return None

    try:
      envelope = self._build_envelope(alert, data, options, resolved, default, identity_id)
    except Exception as exc:  # noqa: BLE001
      self._logger.error("Push envelope composition failed for %d endpoints: %s", len(targets), exc, exc_info=True)
      results = tuple(PublishResult(endpoint=endpoint, error=str(exc)) for endpoint in targets)
    else:
      results = self._fan_out(targets, envelope)

    audit_saved = False
    if save:
      audit_saved = self._save_audit(data, alert, targets, identity_id, segments, marketing)

    failures = sum(1 for result in results if not result.ok)
    self._logger.info("Push fan-out finished: endpoints=%d failed=%d audit_saved=%s", len(results), failures, audit_saved)
    return BatchPublishResult(results=results, audit_saved=audit_saved)

  def _build_envelope(
    self, alert: Mapping[str, Any], data: Mapping[str, Any] | None, options: Mapping[str, Any] | None, providers: tuple[Provider, ...], default: str, identity_id: str | None
  ) -> Envelope:
    return build_envelope(alert, data, options, providers, default, identity_id, legacy_data_mirroring=self._legacy_data_mirroring, default_ttl=self._default_ttl)

  def _send(self, endpoint: str, envelope: Envelope) -> str:
    message_id = self._transport.send(endpoint, envelope.to_json(), envelope.attributes)
    self._logger.debug("Push published endpoint=%s message_id=%s ttl=%d", endpoint, message_id, envelope.ttl)
    return message_id

  def _attempt(self, endpoint: str, envelope: Envelope) -> PublishResult:
    """Send to one endpoint, converting any failure into a result entry."""
    try:
      return PublishResult(endpoint=endpoint, message_id=self._send(endpoint, envelope))
    except PushDispatchError as exc:
      self._logger.error("Push publish to %s failed: %s", endpoint, exc)
      return PublishResult(endpoint=endpoint, error=str(exc))
    except Exception as exc:  # noqa: BLE001
      self._logger.error("Push publish to %s failed: %s", endpoint, exc, exc_info=True)
      return PublishResult(endpoint=endpoint, error=str(exc))

  def _fan_out(self, endpoints: list[str], envelope: Envelope) -> tuple[PublishResult, ...]:
    if self._max_workers == 1 or len(endpoints) == 1:
      return tuple(self._attempt(endpoint, envelope) for endpoint in endpoints)

    # Sends are submitted only when a slot is free, so the pool always has an idle thread for them and
    # the timeout clock starts with the send itself. A timed-out send gives up its slot while its thread
    # finishes in the background, so hung endpoints never starve the ones still queued.
    executor = ThreadPoolExecutor(max_workers=len(endpoints), thread_name_prefix="push-fanout")
    pending = deque(enumerate(endpoints))
    running: dict[Future[PublishResult], tuple[int, str, float]] = {}
    results: list[PublishResult | None] = [None] * len(endpoints)
    try:
      while pending or running:
        while pending and len(running) < self._max_workers:
          index, endpoint = pending.popleft()
          running[executor.submit(self._attempt, endpoint, envelope)] = (index, endpoint, time.monotonic())

        done, _ = wait(running, timeout=self._next_wait(running), return_when=FIRST_COMPLETED)
        for future in done:
          index, _, _ = running.pop(future)
          results[index] = future.result()

        if self._send_timeout_seconds is not None:
          now = time.monotonic()
          for future, (index, endpoint, started_at) in list(running.items()):
            if now - started_at >= self._send_timeout_seconds:
              del running[future]
              error = TransportError(f"Publish to {endpoint} timed out after {self._send_timeout_seconds}s")
              self._logger.error("Push publish to %s failed: %s", endpoint, error)
              results[index] = PublishResult(endpoint=endpoint, error=str(error))
    finally:
      executor.shutdown(wait=False)

    return tuple(result for result in results if result is not None)

  def _next_wait(self, running: dict[Future[PublishResult], tuple[int, str, float]]) -> float | None:
    """Seconds until the earliest running send reaches its timeout."""
    if self._send_timeout_seconds is None:
      return None
    earliest = min(started_at for _, _, started_at in running.values())
    return max(0.0, earliest + self._send_timeout_seconds - time.monotonic())

  def _save_audit(
    self, data: Mapping[str, Any] | None, alert: Mapping[str, Any], endpoints: Sequence[str], identity_id: str | None, segments: Sequence[str] | None, marketing: bool
  ) -> bool:
    """Persist the audit record on a best-effort basis; never raises."""
    try:
      record = build_audit_record(data, alert, endpoints, identity_id=identity_id, segments=segments, marketing=marketing)
      if record is None:
        return False
      self._store.put_item(self._table_name, record.to_item())
    except PushDispatchError as exc:
      self._logger.error("Push audit write failed table=%s: %s", self._table_name, exc)
      return False
    except Exception as exc:  # noqa: BLE001
      self._logger.error("Push audit write failed table=%s: %s", self._table_name, exc, exc_info=True)
      return False

    return True
