"""Send a one-off push notification to one or more SNS endpoints."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from push_dispatch.config import get_settings
from push_dispatch.core.logging import setup_logging
from push_dispatch.notifications.factory import build_push_dispatcher
from push_dispatch.notifications.providers import ALL_PROVIDERS

logger = logging.getLogger("scripts.publish_push")


def _json_object(raw: str) -> dict:
  value = json.loads(raw)
  if not isinstance(value, dict):
    raise argparse.ArgumentTypeError("expected a JSON object")
  return value


def main(argv: list[str] | None = None) -> int:
  """Publish from the command line and report per-endpoint outcomes."""
  parser = argparse.ArgumentParser(description="Publish a push notification through SNS.")
  parser.add_argument("endpoints", nargs="+", help="SNS platform endpoint ARNs.")
  parser.add_argument("--title", default="")
  parser.add_argument("--body", required=True)
  parser.add_argument("--data", type=_json_object, default={}, help="JSON object forwarded as the data block.")
  parser.add_argument("--options", type=_json_object, default={}, help="JSON object with provider overrides and time_to_live.")
  parser.add_argument("--provider", action="append", dest="providers", help="Provider to target; repeatable. Defaults to all.")
  parser.add_argument("--segment", action="append", dest="segments", help="Segment tag; repeatable.")
  parser.add_argument("--identity-id")
  parser.add_argument("--marketing", action="store_true")
  parser.add_argument("--no-save", action="store_true", help="Skip the audit record.")
  args = parser.parse_args(argv)

  settings = get_settings()
  setup_logging(settings)
  dispatcher = build_push_dispatcher(settings)

  alert = {"title": args.title, "body": args.body}
  result = dispatcher.publish_to_endpoints(
    args.endpoints,
    alert,
    args.data,
    args.options,
    providers=args.providers or [provider.value for provider in ALL_PROVIDERS],
    save=not args.no_save,
    identity_id=args.identity_id,
    segments=args.segments,
    marketing=args.marketing,
  )
  if result is None:
    return 1

  for outcome in result.results:
    if outcome.ok:
      logger.info("Published endpoint=%s message_id=%s", outcome.endpoint, outcome.message_id)
    else:
      logger.error("Failed endpoint=%s error=%s", outcome.endpoint, outcome.error)

  return 0 if not result.failed else 2


if __name__ == "__main__":
  sys.exit(main())
