"""Rejection log and evaluation feedback."""

import logging
from datetime import datetime, timezone
from typing import List

from supabase import Client

from ..errors import StoreError
from ..models.review import Feedback, FeedbackCreate, FeedbackSummary, Rejection

logger = logging.getLogger(__name__)


class ReviewStore:
    """Audit records written by human reviewers."""

    def __init__(self, client: Client):
        self.client = client

    async def append_rejection(self, brand_id: str, reviewer: str, comment: str) -> Rejection:
        try:
            response = self.client.table("tone_rejections").insert({
                "brand_id": brand_id,
                "reviewer": reviewer,
                "comment": comment,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except Exception as e:
            raise StoreError(f"Failed to record rejection: {str(e)}")
        logger.info(f"Recorded rejection for brand {brand_id} by {reviewer}")
        return Rejection(**response.data[0])

    async def list_rejections(self) -> List[Rejection]:
        try:
            response = self.client.table("tone_rejections").select("*").order(
                "created_at", desc=True
            ).execute()
        except Exception as e:
            raise StoreError(f"Failed to retrieve rejections: {str(e)}")
        return [Rejection(**row) for row in response.data]

    async def record_feedback(self, feedback: FeedbackCreate) -> Feedback:
        try:
            response = self.client.table("tone_feedback").insert({
                **feedback.model_dump(),
                "submitted_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except Exception as e:
            raise StoreError(f"Failed to record feedback: {str(e)}")
        return Feedback(**response.data[0])

    async def feedback_summary(self, evaluation_id: str) -> FeedbackSummary:
        try:
            response = self.client.table("tone_feedback").select("*").eq(
                "evaluation_id", evaluation_id
            ).execute()
        except Exception as e:
            raise StoreError(f"Failed to retrieve feedback: {str(e)}")
        helpful = sum(1 for row in response.data if row.get("helpful"))
        return FeedbackSummary(
            evaluation_id=evaluation_id,
            helpful=helpful,
            not_helpful=len(response.data) - helpful,
        )
