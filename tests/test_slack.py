"""
Tests for the Slack approval workflow.

Acceptance criteria:
- Drift alerts carry the proposal and Approve / Reject buttons for the brand
- Approve replaces the stored signature with the proposal, keeping its metrics
- Reject asks the reviewer for a comment; /reject-tone records it
- Malformed interaction payloads are rejected with 400
- An unreachable Slack endpoint surfaces as NotifierUnreachable
"""

import json

import httpx
import pytest
from httpx import AsyncClient

from backend.app.errors import NotifierUnreachable
from backend.app.models.tone_signature import SignatureTraits
from backend.app.services.notifier import APPROVE_ACTION, REJECT_ACTION, SlackNotifier

from .fakes import SIGNATURE_TRAITS, make_signature

RESPONSE_URL = "https://hooks.slack.test/actions/T000/1/abc"
PROPOSAL = {**SIGNATURE_TRAITS, "tone": "Playful", "emotional_appeal": "Curious"}


def _interaction(action_id: str, value: dict, response_url: str = RESPONSE_URL) -> dict:
    payload = {
        "type": "block_actions",
        "user": {"id": "U123"},
        "response_url": response_url,
        "actions": [{"action_id": action_id, "value": json.dumps(value)}],
    }
    return {"payload": json.dumps(payload)}


def test_drift_alert_blocks(notifier):
    alert = notifier.build_drift_alert("acme", SignatureTraits(**PROPOSAL))

    assert "`acme`" in alert["text"]
    section, actions = alert["blocks"]
    assert "Playful" in section["text"]["text"]
    approve, reject = actions["elements"]
    assert approve["action_id"] == APPROVE_ACTION
    assert json.loads(approve["value"]) == {"brand_id": "acme", "suggestion": PROPOSAL}
    assert reject["action_id"] == REJECT_ACTION
    assert json.loads(reject["value"]) == {"brand_id": "acme"}


def test_drift_alert_mentions_users(signature_store, review_store):
    notifier = SlackNotifier(
        signature_store, review_store, mention_user_ids=["U1", "U2"], mention_channel="@here",
    )

    alert = notifier.build_drift_alert("acme", SignatureTraits())

    assert alert["text"].startswith("<@U1> <@U2> ")


def test_drift_alert_falls_back_to_channel(signature_store, review_store):
    notifier = SlackNotifier(
        signature_store, review_store, mention_user_ids=[], mention_channel="@here",
    )

    alert = notifier.build_drift_alert("acme", SignatureTraits())

    assert alert["text"].startswith("@here ")


async def test_propose_correction_posts_to_webhook(notifier, slack_requests):
    await notifier.propose_correction("acme", SignatureTraits(**PROPOSAL))

    assert len(slack_requests) == 1
    request = slack_requests[0]
    assert str(request.url).startswith("https://hooks.slack.test/services/")
    assert len(json.loads(request.content)["blocks"]) == 2


async def test_send_without_webhook_is_skipped(signature_store, review_store, slack_http, slack_requests):
    notifier = SlackNotifier(signature_store, review_store, webhook_url="", http_client=slack_http)

    await notifier.send("hello")

    assert slack_requests == []


async def test_unreachable_slack_raises(signature_store, review_store):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    notifier = SlackNotifier(
        signature_store, review_store,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(NotifierUnreachable):
        await notifier.send("hello")


@pytest.mark.asyncio
async def test_approve_replaces_signature(client: AsyncClient, signature_store, slack_requests):
    await signature_store.upsert("acme", make_signature("acme"))

    response = await client.post(
        "/api/slack/interact",
        data=_interaction(APPROVE_ACTION, {"brand_id": "acme", "suggestion": PROPOSAL}),
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    stored = await signature_store.get("acme")
    assert stored.tone == "Playful"
    assert stored.emotional_appeal == "Curious"
    # The metrics snapshot of the replaced signature is kept
    assert stored.metrics.word_count == 12

    assert len(slack_requests) == 1
    assert str(slack_requests[0].url) == RESPONSE_URL
    assert "Approved" in json.loads(slack_requests[0].content)["text"]


@pytest.mark.asyncio
async def test_reject_asks_for_comment(client: AsyncClient, signature_store, slack_requests):
    await signature_store.upsert("acme", make_signature("acme"))

    response = await client.post(
        "/api/slack/interact", data=_interaction(REJECT_ACTION, {"brand_id": "acme"}),
    )

    assert response.status_code == 200
    assert (await signature_store.get("acme")).tone == SIGNATURE_TRAITS["tone"]
    assert len(slack_requests) == 1
    assert str(slack_requests[0].url) == RESPONSE_URL
    assert "/reject-tone acme" in json.loads(slack_requests[0].content)["text"]


@pytest.mark.asyncio
async def test_reject_command_records_comment(client: AsyncClient):
    response = await client.post("/api/slack/commands", data={
        "command": "/reject-tone",
        "text": "acme Too casual for our legal pages",
        "user_id": "U123",
    })

    assert response.status_code == 200
    assert "Rejection recorded" in response.json()["text"]

    rejections = (await client.get("/api/evaluations/rejections")).json()
    assert len(rejections) == 1
    assert rejections[0]["brand_id"] == "acme"
    assert rejections[0]["reviewer"] == "U123"
    assert rejections[0]["comment"] == "Too casual for our legal pages"


@pytest.mark.asyncio
async def test_reject_command_without_comment_shows_usage(client: AsyncClient):
    response = await client.post("/api/slack/commands", data={
        "command": "/reject-tone", "text": "acme", "user_id": "U123",
    })

    assert response.status_code == 200
    assert response.json()["text"].startswith("Usage:")
    assert (await client.get("/api/evaluations/rejections")).json() == []


@pytest.mark.asyncio
async def test_unknown_command(client: AsyncClient):
    response = await client.post("/api/slack/commands", data={"command": "/other", "text": "x"})

    assert response.status_code == 200
    assert "Unknown command" in response.json()["text"]


@pytest.mark.asyncio
async def test_bad_payload_is_400(client: AsyncClient):
    response = await client.post("/api/slack/interact", data={"payload": "{not json"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_non_object_payload_is_400(client: AsyncClient):
    response = await client.post("/api/slack/interact", data={"payload": json.dumps(["block_actions"])})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_action_without_brand_is_400(client: AsyncClient):
    response = await client.post(
        "/api/slack/interact", data=_interaction(APPROVE_ACTION, {"suggestion": PROPOSAL}),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_non_action_payload_is_acknowledged(client: AsyncClient, slack_requests):
    response = await client.post(
        "/api/slack/interact", data={"payload": json.dumps({"type": "view_closed"})},
    )

    assert response.status_code == 200
    assert slack_requests == []


async def test_propose_without_webhook_raises(signature_store, review_store, slack_http, slack_requests):
    notifier = SlackNotifier(signature_store, review_store, webhook_url="", http_client=slack_http)

    with pytest.raises(NotifierUnreachable):
        await notifier.propose_correction("acme", SignatureTraits(**PROPOSAL))

    assert slack_requests == []
