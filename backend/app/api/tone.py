"""Tone signature endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, constr

from ..services.tone import ToneService
from .deps import get_tone_service

router = APIRouter(prefix="/api/tone", tags=["tone"])


class AnalyzeTextRequest(BaseModel):
    text: constr(min_length=1)


class SaveSignatureRequest(BaseModel):
    text: constr(min_length=1)
    brand_id: Optional[str] = None


class RewriteRequest(BaseModel):
    text: constr(min_length=1)
    brand_id: str


@router.post("/signature/analyze")
async def analyze_signature(
    request: AnalyzeTextRequest,
    tone_service: ToneService = Depends(get_tone_service),
):
    """Analyze text and return its tone signature without saving it."""
    analysis = await tone_service.analyze_text(request.text)
    return analysis.model_dump()


@router.post("/signature/save", status_code=201)
async def save_signature(
    request: SaveSignatureRequest,
    tone_service: ToneService = Depends(get_tone_service),
):
    """Analyze text and store it as the brand's signature."""
    signature = await tone_service.analyze_and_save(request.text, request.brand_id)
    return signature.model_dump()


@router.post("/signature/rewrite")
async def rewrite(
    request: RewriteRequest,
    tone_service: ToneService = Depends(get_tone_service),
):
    """Rewrite text using the brand's stored signature."""
    rewritten = await tone_service.rewrite_text(request.text, request.brand_id)
    return {"brand_id": request.brand_id, "rewritten_text": rewritten}


@router.post("/signature/rewrite-evaluate")
async def rewrite_and_evaluate(
    request: RewriteRequest,
    tone_service: ToneService = Depends(get_tone_service),
):
    """Rewrite text, then score the rewrite and record the evaluation."""
    result = await tone_service.rewrite_with_evaluation(request.text, request.brand_id)
    return result.model_dump()


@router.get("/signature/{brand_id}")
async def get_signature(
    brand_id: str,
    tone_service: ToneService = Depends(get_tone_service),
):
    signature = await tone_service.require_signature(brand_id)
    return signature.model_dump()


@router.get("/brands", response_model=List[str])
async def list_brands(tone_service: ToneService = Depends(get_tone_service)):
    """List brand ids with a stored signature."""
    return await tone_service.list_brands()


@router.post("/brands/detect")
async def detect_brand(
    request: AnalyzeTextRequest,
    tone_service: ToneService = Depends(get_tone_service),
):
    """Find the stored brand whose tone best matches the text."""
    match = await tone_service.detect_brand(request.text)
    return match.model_dump()
