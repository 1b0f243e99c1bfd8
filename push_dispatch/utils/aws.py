"""Shared boto3 client construction."""

from __future__ import annotations

import os
from typing import Any

import boto3
from botocore.config import Config


def local_credentials(endpoint_url: str | None) -> dict[str, str]:
  """Return dummy credentials for local emulators when none are configured."""
  if endpoint_url and ("localhost" in endpoint_url or "127.0.0.1" in endpoint_url) and not os.getenv("AWS_ACCESS_KEY_ID"):
    return {"aws_access_key_id": "test", "aws_secret_access_key": "test"}
  return {}


def build_client(service_name: str, *, region: str, endpoint_url: str | None = None, timeout_seconds: int = 10, max_pool_connections: int = 10) -> Any:
  """Create a boto3 client with bounded connect/read timeouts."""
  session = boto3.session.Session()
  return session.client(
    service_name,
    region_name=region,
    endpoint_url=endpoint_url,
    config=Config(connect_timeout=timeout_seconds, read_timeout=timeout_seconds, max_pool_connections=max_pool_connections, retries={"max_attempts": 1, "mode": "standard"}),
    **local_credentials(endpoint_url),
  )
