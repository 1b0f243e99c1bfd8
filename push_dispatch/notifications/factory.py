"""Factory helpers for the push dispatcher."""

from __future__ import annotations

import logging

from push_dispatch.config import Settings
from push_dispatch.notifications.contracts import AuditStore, PushTransport
from push_dispatch.notifications.dispatcher import PushDispatcher
from push_dispatch.notifications.sns_transport import NullPushTransport, SnsPushTransport
from push_dispatch.storage.dynamodb_audit_repo import DynamoAuditStore, NullAuditStore


def build_push_dispatcher(settings: Settings, *, logger: logging.Logger | None = None) -> PushDispatcher:
  """Construct a dispatcher wired to SNS and DynamoDB from configuration."""
  # Size the HTTP pool to the fan-out width so concurrent sends do not queue on connections.
  if settings.delivery_enabled:
    transport: PushTransport = SnsPushTransport(
      region=settings.region, endpoint_url=settings.sns_endpoint_url, timeout_seconds=settings.aws_timeout_seconds, max_pool_connections=max(settings.max_workers, 10)
    )
  else:
    transport = NullPushTransport()

  if settings.audit_enabled:
    store: AuditStore = DynamoAuditStore(region=settings.region, endpoint_url=settings.dynamodb_endpoint_url, timeout_seconds=settings.aws_timeout_seconds)
  else:
    store = NullAuditStore()

  return PushDispatcher(
    transport,
    store,
    table_name=settings.audit_table,
    max_workers=settings.max_workers,
    send_timeout_seconds=settings.send_timeout_seconds,
    legacy_data_mirroring=settings.legacy_data_mirroring,
    default_ttl=settings.default_ttl_seconds,
    logger=logger,
  )
