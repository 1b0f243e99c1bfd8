from __future__ import annotations

from push_dispatch.notifications.audit import build_audit_record


def test_scenario_gcm_alert_builds_minimal_record():
  record = build_audit_record({"org_id": "42"}, {"title": "T", "body": "B"}, ["arn:1"], timestamp=1700000000)

  assert record is not None
  assert (record.body, record.title, record.org_id, record.marketing) == ("B", "T", "42", False)
  assert record.segments is None
  assert record.segment_counts is None

  item = record.to_item()
  assert item == {
    "body": {"S": "B"},
    "title": {"S": "T"},
    "timestamp": {"N": "1700000000"},
    "marketing": {"BOOL": False},
    "org_id": {"S": "42"},
    "endpoints": {"SS": ["arn:1"]},
  }


def test_no_record_without_body():
  assert build_audit_record({"org_id": "42"}, {"title": "T"}, ["arn:1"]) is None
  assert build_audit_record({"org_id": "42"}, {"title": "T", "body": ""}, ["arn:1"]) is None


def test_title_defaults_to_single_space():
  record = build_audit_record({}, {"body": "B", "title": ""}, ["arn:1"])

  assert record.title == " "
  assert record.to_item()["title"] == {"S": " "}


def test_endpoints_are_deduplicated_in_first_seen_order():
  record = build_audit_record({}, {"body": "B"}, ["arn:2", "arn:1", "arn:2", ""])

  assert record.endpoints == ("arn:2", "arn:1")


def test_url_deeplink_yields_link_fields():
  data = {"org_id": 7, "click_action": "custom_msg", "deeplink": {"data": {"type": "url", "url": "https://example.com/x"}}}

  record = build_audit_record(data, {"body": "B"}, ["arn:1"])
  item = record.to_item()

  assert record.org_id == "7"
  assert item["click_action"] == {"S": "custom_msg"}
  assert item["link_type"] == {"S": "url"}
  assert item["link_url"] == {"S": "https://example.com/x"}


def test_non_url_deeplink_has_no_link_fields():
  record = build_audit_record({"deeplink": {"data": {"type": "video", "id": "9"}}}, {"body": "B"}, ["arn:1"])

  assert record.link_type is None
  assert "link_type" not in record.to_item()


def test_segments_identity_media_and_marketing_are_recorded():
  data = {"org_id": "42", "media_type": "image", "media_url": "https://cdn.example.com/a.png"}

  record = build_audit_record(data, {"body": "B"}, ["arn:1"], identity_id="user-1", segments=["fav_team1", "lang_en", "promo", "promo"], marketing=True)
  item = record.to_item()

  assert item["marketing"] == {"BOOL": True}
  assert item["identity_id"] == {"S": "user-1"}
  assert item["segments"] == {"SS": ["fav_team1", "lang_en", "promo"]}
  assert item["segment_counts"] == {"M": {"favorite": {"N": "1"}, "language": {"N": "1"}, "default": {"N": "2"}}}
  assert item["media_type"] == {"S": "image"}
  assert item["media_url"] == {"S": "https://cdn.example.com/a.png"}


def test_timestamp_defaults_to_current_time(monkeypatch):
  monkeypatch.setattr("push_dispatch.notifications.audit.time.time", lambda: 1234.9)

  record = build_audit_record(None, {"body": "B"}, ["arn:1"])

  assert record.timestamp == 1234
  assert "org_id" not in record.to_item()
