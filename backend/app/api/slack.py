"""Slack interactivity endpoints for the correction approval flow."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ..models.tone_signature import SignatureTraits
from ..services.notifier import APPROVE_ACTION, REJECT_ACTION, REJECT_COMMAND, SlackNotifier
from .deps import get_notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/slack", tags=["slack"])


async def _parse_form(request: Request) -> dict:
    try:
        form = await request.form()
    except Exception:
        raise HTTPException(status_code=400, detail="Unable to parse request body")
    return dict(form)


@router.post("/interact")
async def handle_interaction(
    request: Request,
    notifier: SlackNotifier = Depends(get_notifier),
):
    """Handle Approve / Reject button clicks on drift alerts."""
    form = await _parse_form(request)
    try:
        payload = json.loads(form.get("payload", ""))
    except (TypeError, ValueError):
        logger.error("Invalid JSON in Slack payload")
        raise HTTPException(status_code=400, detail="Bad payload")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Bad payload")

    actions = payload.get("actions") or []
    if payload.get("type") != "block_actions" or not actions:
        return {"ok": True}

    action = actions[0]
    reviewer = (payload.get("user") or {}).get("id", "unknown")
    response_url = payload.get("response_url")
    try:
        value = json.loads(action.get("value", ""))
        brand_id = value["brand_id"]
    except (TypeError, ValueError, KeyError):
        raise HTTPException(status_code=400, detail="Bad action value")

    if action.get("action_id") == APPROVE_ACTION:
        proposal = SignatureTraits(**(value.get("suggestion") or {}))
        await notifier.on_approve(brand_id, proposal, reviewer)
        if response_url:
            await notifier.send_to_response_url(response_url, {
                "text": f"✅ Approved tone signature for `{brand_id}`",
            })
    elif action.get("action_id") == REJECT_ACTION:
        if response_url:
            await notifier.request_rejection_comment(response_url, brand_id)

    return {"ok": True}


@router.post("/commands")
async def handle_command(
    request: Request,
    notifier: SlackNotifier = Depends(get_notifier),
):
    """Capture the rejection comment: `/reject-tone <brand_id> <comment>`."""
    form = await _parse_form(request)
    command = form.get("command", "")
    if command != REJECT_COMMAND:
        return {"response_type": "ephemeral", "text": f"❓ Unknown command: `{command}`"}

    brand_id, _, comment = (form.get("text") or "").strip().partition(" ")
    if not brand_id or not comment.strip():
        return {
            "response_type": "ephemeral",
            "text": f"Usage: `{REJECT_COMMAND} <brand_id> <comment>`",
        }

    reviewer = form.get("user_id") or form.get("user_name") or "unknown"
    await notifier.on_reject(brand_id, reviewer, comment.strip())
    return {"response_type": "ephemeral", "text": f"📝 Rejection recorded for `{brand_id}`"}
