from __future__ import annotations

from dataclasses import replace

import pytest
from push_dispatch.config import Settings
from push_dispatch.notifications.factory import build_push_dispatcher
from push_dispatch.notifications.sns_transport import NullPushTransport, SnsPushTransport
from push_dispatch.storage.dynamodb_audit_repo import DynamoAuditStore, NullAuditStore


@pytest.fixture
def settings():
  return Settings(
    region="us-east-1",
    audit_table="PushAudit",
    audit_enabled=True,
    delivery_enabled=True,
    default_ttl_seconds=3600,
    max_workers=4,
    send_timeout_seconds=1.5,
    aws_timeout_seconds=3,
    legacy_data_mirroring=True,
    sns_endpoint_url=None,
    dynamodb_endpoint_url=None,
    log_level="INFO",
    log_dir=None,
    log_max_bytes=1024,
    log_backup_count=2,
  )


def test_build_push_dispatcher_wires_aws_adapters(settings, monkeypatch):
  built = []
  monkeypatch.setattr("push_dispatch.notifications.sns_transport.build_client", lambda service, **kwargs: built.append((service, kwargs)) or object())
  monkeypatch.setattr("push_dispatch.storage.dynamodb_audit_repo.build_client", lambda service, **kwargs: built.append((service, kwargs)) or object())

  dispatcher = build_push_dispatcher(settings)

  assert isinstance(dispatcher._transport, SnsPushTransport)
  assert isinstance(dispatcher._store, DynamoAuditStore)
  assert dispatcher._table_name == "PushAudit"
  assert dispatcher._max_workers == 4
  assert dispatcher._send_timeout_seconds == 1.5
  assert dispatcher._legacy_data_mirroring is True
  assert dispatcher._default_ttl == 3600
  assert [service for service, _ in built] == ["sns", "dynamodb"]
  assert built[0][1]["max_pool_connections"] == 10
  assert built[0][1]["region"] == "us-east-1"


def test_build_push_dispatcher_uses_null_adapters_when_disabled(settings):
  dispatcher = build_push_dispatcher(replace(settings, delivery_enabled=False, audit_enabled=False))

  assert isinstance(dispatcher._transport, NullPushTransport)
  assert isinstance(dispatcher._store, NullAuditStore)
