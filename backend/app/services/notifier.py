"""Slack approval workflow for proposed signature corrections."""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..errors import NotifierUnreachable
from ..models.review import Rejection
from ..models.tone_signature import SignatureTraits, TextMetrics, ToneSignature
from .review_store import ReviewStore
from .signature_store import SignatureStore

logger = logging.getLogger(__name__)

APPROVE_ACTION = "approve_signature_update"
REJECT_ACTION = "reject_signature_update"
REJECT_COMMAND = "/reject-tone"


class SlackNotifier:
    """
    Posts drift alerts with Approve / Reject buttons and handles the answers.

    Approve replaces the brand's signature with the proposal. Reject asks the
    reviewer for a comment, which is appended to the rejection log; nothing
    is retried.
    """

    def __init__(
        self,
        signatures: SignatureStore,
        reviews: ReviewStore,
        webhook_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        mention_user_ids: Optional[List[str]] = None,
        mention_channel: Optional[str] = None,
    ):
        self.signatures = signatures
        self.reviews = reviews
        self.webhook_url = settings.slack_webhook_url if webhook_url is None else webhook_url
        self.http_client = http_client
        self.timeout = timeout if timeout is not None else settings.notifier_timeout_seconds
        self.mention_user_ids = (
            settings.mention_user_ids if mention_user_ids is None else mention_user_ids
        )
        self.mention_channel = (
            settings.slack_notify_channel if mention_channel is None else mention_channel
        )

    async def _post(self, url: str, body: Dict[str, Any]) -> None:
        try:
            if self.http_client is not None:
                response = await self.http_client.post(url, json=body, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=body)
            response.raise_for_status()
        except httpx.TimeoutException:
            raise NotifierUnreachable(f"Slack did not answer within {self.timeout}s")
        except httpx.HTTPError as e:
            raise NotifierUnreachable(f"Slack request failed: {str(e)}")

    async def send(self, text: str, blocks: Optional[List[Dict[str, Any]]] = None) -> None:
        if not self.webhook_url:
            logger.warning("Slack webhook URL is not configured, skipping notification")
            return
        if not text and not blocks:
            logger.warning("Slack message requires either text or blocks")
            return
        await self._post(self.webhook_url, {"text": text, "blocks": blocks or []})
        logger.debug("Slack notification sent")

    async def send_to_response_url(self, response_url: str, message: Dict[str, Any]) -> None:
        await self._post(response_url, message)

    def _mention(self) -> str:
        if self.mention_user_ids:
            return " ".join(f"<@{user_id}>" for user_id in self.mention_user_ids) + " "
        if self.mention_channel:
            return f"{self.mention_channel} "
        return ""

    def build_drift_alert(self, brand_id: str, proposal: SignatureTraits) -> Dict[str, Any]:
        suggestion = proposal.model_dump()
        text = f"{self._mention()}📢 *Tone Drift Detected* for brand `{brand_id}`"
        blocks = [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*Suggested tone signature update:*\n```{json.dumps(suggestion, indent=2)}```",
                },
            },
            {
                "type": "actions",
                "elements": [
                    {
                        "type": "button",
                        "text": {"type": "plain_text", "text": "✅ Approve & Save"},
                        "style": "primary",
                        "action_id": APPROVE_ACTION,
                        "value": json.dumps({"brand_id": brand_id, "suggestion": suggestion}),
                    },
                    {
                        "type": "button",
                        "text": {"type": "plain_text", "text": "❌ Reject with Comment"},
                        "style": "danger",
                        "action_id": REJECT_ACTION,
                        "value": json.dumps({"brand_id": brand_id}),
                    },
                ],
            },
        ]
        return {"text": text, "blocks": blocks}

    async def propose_correction(self, brand_id: str, proposal: SignatureTraits) -> None:
        """Post the drift alert; raises when no webhook is configured."""
        if not self.webhook_url:
            raise NotifierUnreachable("Slack webhook URL is not configured")
        alert = self.build_drift_alert(brand_id, proposal)
        await self.send(alert["text"], alert["blocks"])

    async def on_approve(
        self, brand_id: str, proposal: SignatureTraits, reviewer: Optional[str] = None
    ) -> ToneSignature:
        """Persist the proposal, keeping the metrics snapshot of the current signature."""
        current = await self.signatures.get(brand_id)
        metrics = current.metrics if current else TextMetrics()
        signature = ToneSignature(brand_id=brand_id, metrics=metrics, **proposal.model_dump())
        saved = await self.signatures.upsert(brand_id, signature)
        logger.info(f"Signature correction for brand {brand_id} approved by {reviewer or 'unknown'}")
        return saved

    async def request_rejection_comment(self, response_url: str, brand_id: str) -> None:
        await self.send_to_response_url(response_url, {
            "text": (
                f"📝 Please reply with your rejection comment: "
                f"`{REJECT_COMMAND} {brand_id} <comment>`"
            ),
        })

    async def on_reject(self, brand_id: str, reviewer: str, comment: str) -> Rejection:
        return await self.reviews.append_rejection(brand_id, reviewer, comment)
