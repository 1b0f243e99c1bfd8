"""Shared fixtures for dispatcher tests."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from push_dispatch.notifications.dispatcher import PushDispatcher


@pytest.fixture
def mock_transport():
  transport = MagicMock()
  transport.send.side_effect = lambda target, message, attributes: f"msg-{target}"
  return transport


@pytest.fixture
def mock_store():
  return MagicMock()


@pytest.fixture
def dispatcher(mock_transport, mock_store):
  return PushDispatcher(mock_transport, mock_store, logger=logging.getLogger("tests.dispatcher"))


@pytest.fixture
def alert():
  return {"title": "T", "body": "B"}


@pytest.fixture
def data():
  return {"org_id": "42", "click_action": "custom_msg"}


@pytest.fixture
def aws_region(monkeypatch):
  monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
  return "us-east-1"
