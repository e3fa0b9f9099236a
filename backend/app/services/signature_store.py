"""Tone signature persistence, one active signature per brand."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from supabase import Client

from ..errors import StoreError
from ..models.tone_signature import ToneSignature

logger = logging.getLogger(__name__)

TABLE = "tone_signatures"


class SignatureStore:
    """Reads and replaces brand signatures in the `tone_signatures` table."""

    def __init__(self, client: Client):
        self.client = client

    async def get(self, brand_id: str) -> Optional[ToneSignature]:
        try:
            response = self.client.table(TABLE).select("*").eq("brand_id", brand_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to retrieve signature: {str(e)}")
        if not response.data:
            return None
        return ToneSignature(**response.data[0])

    async def list_all(self) -> List[ToneSignature]:
        try:
            response = self.client.table(TABLE).select("*").execute()
        except Exception as e:
            raise StoreError(f"Failed to list signatures: {str(e)}")
        return [ToneSignature(**row) for row in response.data]

    async def list_brand_ids(self) -> List[str]:
        try:
            response = self.client.table(TABLE).select("brand_id").execute()
        except Exception as e:
            raise StoreError(f"Failed to list brands: {str(e)}")
        return [row["brand_id"] for row in response.data]

    async def upsert(self, brand_id: str, signature: ToneSignature) -> ToneSignature:
        """Replace the brand's signature wholesale (last writer wins)."""
        row = signature.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
        row["brand_id"] = brand_id
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            response = self.client.table(TABLE).upsert(row, on_conflict="brand_id").execute()
        except Exception as e:
            raise StoreError(f"Failed to save signature: {str(e)}")
        logger.info(f"Saved tone signature for brand {brand_id}")
        return ToneSignature(**response.data[0])
