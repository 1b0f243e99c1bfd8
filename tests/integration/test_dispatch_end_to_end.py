from __future__ import annotations

import json

import boto3
from botocore.stub import ANY, Stubber
from push_dispatch.notifications.dispatcher import PushDispatcher
from push_dispatch.notifications.envelope import build_ttl_attributes
from push_dispatch.notifications.sns_transport import SnsPushTransport
from push_dispatch.storage.dynamodb_audit_repo import DynamoAuditStore


def _client(service):
  return boto3.client(service, region_name="us-east-1", aws_access_key_id="test", aws_secret_access_key="test")


def test_fan_out_through_sns_and_dynamodb_with_one_disabled_endpoint(monkeypatch):
  monkeypatch.setattr("push_dispatch.notifications.audit.time.time", lambda: 1700000000)
  sns = _client("sns")
  dynamodb = _client("dynamodb")
  dispatcher = PushDispatcher(SnsPushTransport(region="us-east-1", client=sns), DynamoAuditStore(region="us-east-1", client=dynamodb))

  endpoints = ["arn:aws:sns:us-east-1:123456789012:endpoint/APNS/app/1", "arn:aws:sns:us-east-1:123456789012:endpoint/APNS/app/2", "arn:aws:sns:us-east-1:123456789012:endpoint/GCM/app/3"]
  alert = {"title": "Match day", "body": "Kick-off in 10 minutes", "body_loc_key": "KICKOFF"}
  data = {"org_id": "42", "click_action": "custom_msg", "deeplink": {"data": {"type": "url", "url": "https://example.com/match"}}}
  options = {"time_to_live": 600, "APNS": {"aps": {"sound": "whistle.caf"}}}
  attributes = build_ttl_attributes(600)

  with Stubber(sns) as sns_stub, Stubber(dynamodb) as dynamo_stub:
    sns_stub.add_response("publish", {"MessageId": "mid-1"}, expected_params={"TargetArn": endpoints[0], "MessageStructure": "json", "Message": ANY, "MessageAttributes": attributes})
    sns_stub.add_client_error("publish", service_error_code="EndpointDisabled", http_status_code=400)
    sns_stub.add_response("publish", {"MessageId": "mid-3"}, expected_params={"TargetArn": endpoints[2], "MessageStructure": "json", "Message": ANY, "MessageAttributes": attributes})
    dynamo_stub.add_response(
      "put_item",
      {},
      expected_params={
        "TableName": "CustomSnsMessages",
        "Item": {
          "body": {"S": "Kick-off in 10 minutes"},
          "title": {"S": "Match day"},
          "timestamp": {"N": "1700000000"},
          "marketing": {"BOOL": False},
          "org_id": {"S": "42"},
          "endpoints": {"SS": endpoints},
          "click_action": {"S": "custom_msg"},
          "link_type": {"S": "url"},
          "link_url": {"S": "https://example.com/match"},
          "identity_id": {"S": "coach-9"},
          "segments": {"SS": ["fav_team1", "lang_en"]},
          "segment_counts": {"M": {"favorite": {"N": "1"}, "language": {"N": "1"}, "default": {"N": "0"}}},
        },
      },
    )

    result = dispatcher.publish_to_endpoints(endpoints, alert, data, options, providers=["APNS", "GCM"], identity_id="coach-9", segments=["fav_team1", "lang_en"])

    sns_stub.assert_no_pending_responses()
    dynamo_stub.assert_no_pending_responses()

  assert [outcome.message_id for outcome in result.succeeded] == ["mid-1", "mid-3"]
  assert [outcome.endpoint for outcome in result.failed] == [endpoints[1]]
  assert result.audit_saved is True


def test_single_publish_message_body_matches_provider_shapes():
  sent = {}

  class _CapturingTransport:
    def send(self, target, message, attributes):
      sent.update(target=target, message=json.loads(message), attributes=attributes)
      return "mid"

  dispatcher = PushDispatcher(_CapturingTransport(), DynamoAuditStore(region="us-east-1", client=_client("dynamodb")))

  dispatcher.publish_to_endpoint("arn:1", {"body": "B", "title_loc_key": "T_KEY"}, {"org_id": "1"}, {"APNS": {"aps": {"badge": 2}}}, providers=["APNS", "GCM"], default="B", save=False, identity_id="u-1")

  apns = json.loads(sent["message"]["APNS"])
  gcm = json.loads(sent["message"]["GCM"])
  assert sent["message"]["default"] == "B"
  assert apns == {"aps": {"alert": {"body": "B", "title-loc-key": "T_KEY"}, "badge": 2}, "data": {"org_id": "1", "identity_id": "u-1"}}
  assert gcm == {"notification": {"body": "B", "title_loc_key": "T_KEY"}, "data": {"org_id": "1", "identity_id": "u-1"}}
