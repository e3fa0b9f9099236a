"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import evaluations, retune, slack, tone
from .api.deps import build_supervisor, get_oracle
from .config import settings
from .errors import ToneCheckError
from .services.evaluation_store import EvaluationStore
from .services.notifier import SlackNotifier
from .services.retune import ticker
from .services.review_store import ReviewStore
from .services.signature_store import SignatureStore
from .services.supabase import get_supabase_client
from .services.tone import ToneService

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the retune ticker in the background when enabled."""
    runner = None
    if settings.retune_enabled:
        db = get_supabase_client()
        signatures = SignatureStore(db)
        evaluations_store = EvaluationStore(db)
        supervisor = build_supervisor(
            signatures,
            evaluations_store,
            ToneService(signatures, evaluations_store, get_oracle()),
            SlackNotifier(signatures, ReviewStore(db)),
        )
        app.state.supervisor = supervisor
        runner = asyncio.create_task(
            supervisor.run(ticker(settings.retune_interval_minutes * 60))
        )
        logger.info(f"Retune sweeps scheduled every {settings.retune_interval_minutes} minutes")
    yield
    if runner is not None:
        runner.cancel()
        await asyncio.gather(runner, return_exceptions=True)
        await app.state.supervisor.shutdown()


app = FastAPI(title="ToneCheck API", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ToneCheckError)
async def tone_check_error_handler(request: Request, exc: ToneCheckError):
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": type(exc).__name__},
    )


# Include routers
app.include_router(tone.router)
app.include_router(evaluations.router)
app.include_router(slack.router)
app.include_router(retune.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
