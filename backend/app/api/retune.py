"""Manual retune trigger."""

from fastapi import APIRouter, Depends

from ..services.retune import SweepSupervisor
from .deps import get_supervisor

router = APIRouter(prefix="/api/retune", tags=["retune"])


@router.post("/sweep")
async def run_sweep(supervisor: SweepSupervisor = Depends(get_supervisor)):
    """Run one retune sweep now; 409 if a sweep is already running."""
    report = await supervisor.trigger()
    return report.model_dump()
