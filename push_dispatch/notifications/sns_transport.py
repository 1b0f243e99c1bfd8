"""AWS SNS mobile push transport."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from push_dispatch.config import resolve_region
from push_dispatch.notifications.contracts import TransportError
from push_dispatch.utils.aws import build_client

logger = logging.getLogger(__name__)


class SnsPushTransport:
  """Publish JSON-structured envelopes to SNS platform endpoints."""

  def __init__(self, *, region: str | None = None, endpoint_url: str | None = None, timeout_seconds: int = 10, max_pool_connections: int = 10, client: Any | None = None) -> None:
    self._region = resolve_region(region)
    self._client = client or build_client("sns", region=self._region, endpoint_url=endpoint_url, timeout_seconds=timeout_seconds, max_pool_connections=max_pool_connections)

  def send(self, target: str, message: str, attributes: dict[str, dict[str, str]]) -> str:
    """Publish one envelope and return the SNS message id."""
    try:
      response = self._client.publish(TargetArn=target, MessageStructure="json", Message=message, MessageAttributes=attributes)
    except ClientError as exc:
      code = exc.response.get("Error", {}).get("Code", "unknown")
      raise TransportError(f"SNS publish to {target} rejected (code={code}): {exc}") from exc
    except BotoCoreError as exc:
      raise TransportError(f"SNS publish to {target} failed: {exc}") from exc

    message_id = response.get("MessageId")
    if not message_id:
      raise TransportError(f"SNS publish to {target} returned no MessageId")
    return str(message_id)


class NullPushTransport:
  """No-op transport used when delivery is disabled."""

  def send(self, target: str, message: str, attributes: dict[str, dict[str, str]]) -> str:
    """Drop the envelope while recording a debug log."""
    logger.debug("Push delivery disabled; dropping publish target_present=%s", bool(target))
    return ""
