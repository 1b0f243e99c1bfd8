"""DynamoDB-backed audit record store."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from push_dispatch.config import resolve_region
from push_dispatch.notifications.contracts import PersistenceError
from push_dispatch.utils.aws import build_client

logger = logging.getLogger(__name__)


class DynamoAuditStore:
  """Write typed attribute maps with the low-level DynamoDB client."""

  def __init__(self, *, region: str | None = None, endpoint_url: str | None = None, timeout_seconds: int = 10, client: Any | None = None) -> None:
    self._region = resolve_region(region)
    self._client = client or build_client("dynamodb", region=self._region, endpoint_url=endpoint_url, timeout_seconds=timeout_seconds)

  def put_item(self, table: str, item: dict[str, dict[str, Any]]) -> None:
    """Persist one audit item."""
    try:
      self._client.put_item(TableName=table, Item=item)
    except ClientError as exc:
      code = exc.response.get("Error", {}).get("Code", "unknown")
      raise PersistenceError(f"DynamoDB put_item on {table} rejected (code={code}): {exc}") from exc
    except BotoCoreError as exc:
      raise PersistenceError(f"DynamoDB put_item on {table} failed: {exc}") from exc


class NullAuditStore:
  """No-op store used when audit persistence is disabled."""

  def put_item(self, table: str, item: dict[str, dict[str, Any]]) -> None:
    logger.debug("Audit persistence disabled; dropping item for table=%s", table)
