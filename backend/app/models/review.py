"""Reviewer-facing records: correction rejections and evaluation feedback."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Rejection(BaseModel):
    """A rejected signature correction, kept for audit."""

    id: str
    brand_id: str
    reviewer: str
    comment: str
    created_at: Optional[datetime] = None


class FeedbackCreate(BaseModel):
    evaluation_id: str
    user_id: str
    helpful: bool


class Feedback(FeedbackCreate):
    id: str
    submitted_at: Optional[datetime] = None


class FeedbackSummary(BaseModel):
    evaluation_id: str
    helpful: int
    not_helpful: int
