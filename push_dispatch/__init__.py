"""Multi-provider mobile push composition and SNS fan-out."""

from push_dispatch.notifications.contracts import (
  AuditStore,
  BatchPublishResult,
  ConfigurationError,
  PersistenceError,
  PublishResult,
  PushDispatchError,
  PushTransport,
  TransportError,
  UnknownProviderError,
)
from push_dispatch.notifications.dispatcher import PushDispatcher
from push_dispatch.notifications.providers import ALL_PROVIDERS, Provider

__all__ = [
  "ALL_PROVIDERS",
  "AuditStore",
  "BatchPublishResult",
  "ConfigurationError",
  "PersistenceError",
  "Provider",
  "PublishResult",
  "PushDispatchError",
  "PushDispatcher",
  "PushTransport",
  "TransportError",
  "UnknownProviderError",
]
