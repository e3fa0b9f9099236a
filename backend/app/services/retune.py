"""Periodic retune sweep: detect drift per brand and propose corrections."""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, Optional, Set

from ..errors import MissingSignature, SweepInProgress
from ..models.retune import SweepReport, SweepState
from .drift import DriftDetector
from .notifier import SlackNotifier
from .signature_store import SignatureStore
from .tone import ToneService

logger = logging.getLogger(__name__)


class RetuneScheduler:
    """
    One sweep over every brand with a stored signature.

    Brands are processed independently: a failure for one brand is logged,
    recorded in the report, and the sweep moves on. Proposals for the same
    brand are serialized by a per-brand lock.
    """

    def __init__(
        self,
        signatures: SignatureStore,
        detector: DriftDetector,
        tone_service: ToneService,
        notifier: SlackNotifier,
        max_concurrency: int = 1,
    ):
        self.signatures = signatures
        self.detector = detector
        self.tone_service = tone_service
        self.notifier = notifier
        self.max_concurrency = max(1, max_concurrency)
        self.state = SweepState.IDLE
        self._brand_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def _enter(self, state: SweepState, brand_id: Optional[str] = None) -> None:
        self.state = state
        if brand_id:
            logger.debug(f"[{brand_id}] {state.value}")

    async def sweep(self) -> SweepReport:
        report = SweepReport(started_at=datetime.now(timezone.utc))
        self._enter(SweepState.SCANNING_BRANDS)
        try:
            brand_ids = await self.signatures.list_brand_ids()
        except Exception as e:
            logger.error(f"Retune sweep could not list brands: {e}")
            report.failures["*"] = str(e)
            report.finished_at = datetime.now(timezone.utc)
            self._enter(SweepState.IDLE)
            return report

        slots = asyncio.Semaphore(self.max_concurrency)

        async def run(brand_id: str) -> None:
            async with slots:
                await self.process_brand(brand_id, report)

        await asyncio.gather(*(run(brand_id) for brand_id in brand_ids))

        report.brands_scanned = len(brand_ids)
        report.finished_at = datetime.now(timezone.utc)
        self._enter(SweepState.IDLE)
        logger.info(
            f"Retune sweep done: {report.brands_scanned} brands, "
            f"{len(report.drifted_brands)} drifted, {len(report.proposals_sent)} proposals, "
            f"{len(report.failures)} failures"
        )
        return report

    async def process_brand(self, brand_id: str, report: SweepReport) -> None:
        async with self._brand_locks[brand_id]:
            try:
                drifted = await self.detector.find_drifted(brand_id)
                if not drifted:
                    self._enter(SweepState.NO_DRIFT, brand_id)
                    return

                self._enter(SweepState.DRIFT_FOUND, brand_id)
                report.drifted_brands.append(brand_id)
                logger.info(f"Tone drift detected for {brand_id}: {len(drifted)} low-alignment evaluations")

                signature = await self.signatures.get(brand_id)
                if signature is None:
                    raise MissingSignature(brand_id)

                self._enter(SweepState.REQUESTING_CORRECTION, brand_id)
                proposal = await self.tone_service.suggest_updated_signature(signature, drifted)

                self._enter(SweepState.NOTIFYING, brand_id)
                await self.notifier.propose_correction(brand_id, proposal)
                report.proposals_sent.append(brand_id)
                logger.info(f"Correction proposal sent for brand {brand_id}")
            except Exception as e:
                logger.error(f"Retune failed for brand {brand_id}: {e}")
                report.failures[brand_id] = str(e)


async def ticker(interval_seconds: float, immediate: bool = False) -> AsyncIterator[int]:
    """Yield a tick number every `interval_seconds`."""
    tick = 0
    if not immediate:
        await asyncio.sleep(interval_seconds)
    while True:
        yield tick
        tick += 1
        await asyncio.sleep(interval_seconds)


class SweepSupervisor:
    """Consumes ticks and runs at most one sweep at a time."""

    def __init__(self, scheduler: RetuneScheduler):
        self.scheduler = scheduler
        self._in_flight = asyncio.Semaphore(1)
        self._tasks: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._in_flight.locked()

    async def on_tick(self) -> Optional[SweepReport]:
        """Run a sweep, or return None when one is already in flight."""
        if self._in_flight.locked():
            logger.warning("Previous retune sweep still running, skipping tick")
            return None
        async with self._in_flight:
            return await self.scheduler.sweep()

    async def trigger(self) -> SweepReport:
        report = await self.on_tick()
        if report is None:
            raise SweepInProgress("A retune sweep is already running")
        return report

    async def run(self, ticks: AsyncIterator[int]) -> None:
        """Dispatch each tick without waiting, so late ticks hit the guard."""
        async for tick in ticks:
            logger.debug(f"Retune tick {tick}")
            task = asyncio.create_task(self.on_tick())
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def shutdown(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
