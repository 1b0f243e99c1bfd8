"""Contracts for mobile push fan-out and audit persistence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class PublishResult:
  """Outcome of a single endpoint publish attempt."""

  endpoint: str
  message_id: str | None = None
  error: str | None = None

  @property
  def ok(self) -> bool:
    return self.error is None


@dataclass(frozen=True)
class BatchPublishResult:
  """Collected outcomes of a multi-endpoint publish."""

  results: tuple[PublishResult, ...] = field(default_factory=tuple)
  audit_saved: bool = False

  @property
  def succeeded(self) -> list[PublishResult]:
    return [result for result in self.results if result.ok]

  @property
  def failed(self) -> list[PublishResult]:
    return [result for result in self.results if not result.ok]


class PushDispatchError(Exception):
  """Base class for all push dispatch failures."""


class ConfigurationError(PushDispatchError):
  """Exception raised for fatal setup problems such as a missing region."""


class UnknownProviderError(ConfigurationError):
  """Exception raised when a provider name has no payload composer."""


class TransportError(PushDispatchError):
  """Exception raised when the notification transport rejects a send."""


class PersistenceError(PushDispatchError):
  """Exception raised when the audit store rejects a write."""


class PushTransport(Protocol):
  """Delivery contract for the fan-out notification service."""

  def send(self, target: str, message: str, attributes: dict[str, dict[str, str]]) -> str:
    """Publish a serialized envelope to one target and return the message id."""


class AuditStore(Protocol):
  """Persistence contract for audit records."""

  def put_item(self, table: str, item: dict[str, dict[str, Any]]) -> None:
    """Write one typed attribute map to a table."""
