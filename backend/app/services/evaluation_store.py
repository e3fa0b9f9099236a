"""Append-only evaluation history per brand."""

from typing import List, Optional

from supabase import Client

from ..errors import StoreError
from ..models.evaluation import Evaluation, EvaluationCreate, EvaluationPage

TABLE = "tone_evaluations"


class EvaluationStore:
    """Access to the `tone_evaluations` table."""

    def __init__(self, client: Client):
        self.client = client

    async def append(self, evaluation: EvaluationCreate) -> Evaluation:
        try:
            response = self.client.table(TABLE).insert(evaluation.model_dump(mode="json")).execute()
        except Exception as e:
            raise StoreError(f"Failed to store evaluation: {str(e)}")
        return Evaluation(**response.data[0])

    async def list_by_brand(self, brand_id: str) -> List[Evaluation]:
        """All evaluations of a brand, oldest first."""
        try:
            response = self.client.table(TABLE).select("*").eq(
                "brand_id", brand_id
            ).order("created_at").execute()
        except Exception as e:
            raise StoreError(f"Failed to retrieve evaluations: {str(e)}")
        return [Evaluation(**row) for row in response.data]

    async def search(
        self,
        brand_id: Optional[str] = None,
        min_score: float = 0.0,
        max_score: float = 1.0,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> EvaluationPage:
        """
        Filter evaluations by brand, score range and creation date.

        Dates are inclusive `YYYY-MM-DD` strings. Results are newest first.
        """
        query = self.client.table(TABLE).select("*", count="exact")
        if brand_id:
            query = query.eq("brand_id", brand_id)
        query = query.gte("score", min_score).lte("score", max_score)
        if start_date:
            query = query.gte("created_at", start_date)
        if end_date:
            query = query.lte("created_at", f"{end_date}T23:59:59.999999")

        offset = (page - 1) * limit
        try:
            response = query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
        except Exception as e:
            raise StoreError(f"Failed to search evaluations: {str(e)}")

        items = [Evaluation(**row) for row in response.data]
        total = response.count if response.count is not None else len(items)
        return EvaluationPage(items=items, total=total, page=page, limit=limit)
