"""Seller Sync Scheduler - Periodic seller synchronization

Owns its APScheduler instance. The application creates one at startup and
keeps it on `app.state`; tests call `run_once()` directly instead of
waiting on the timer. Overlapping runs are not prevented; the sync is an
idempotent upsert.
"""
from typing import Dict, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..config.settings import settings
from ..services.seller_service import SellerService
from ..utils.logger import get_logger, set_correlation_id
from ..utils.idgen import generate_correlation_id

logger = get_logger(__name__)


JOB_ID = "sync_sellers"


class SellerSyncScheduler:
    """Runs the seller sync on a fixed interval"""

    def __init__(
        self,
        seller_service: Optional[SellerService] = None,
        interval_hours: Optional[int] = None
    ):
        self._seller_service = seller_service
        self.interval_hours = interval_hours or settings.seller_sync_interval_hours
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._is_running = False
        self.last_summary: Optional[Dict[str, int]] = None

    @property
    def seller_service(self) -> SellerService:
        if self._seller_service is None:
            self._seller_service = SellerService()
        return self._seller_service

    def start(self) -> None:
        """Start the scheduler (needs a running event loop)"""
        if self._is_running:
            logger.warning("Seller sync scheduler already running")
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self._run_job,
            trigger=IntervalTrigger(hours=self.interval_hours),
            id=JOB_ID,
            name="Sync sellers from business API",
            replace_existing=True
        )
        self.scheduler.start()
        self._is_running = True
        logger.info(f"Seller sync scheduler started (every {self.interval_hours}h)")

    def stop(self) -> None:
        """Stop the scheduler"""
        if self.scheduler:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
        if self._is_running:
            self._is_running = False
            logger.info("Seller sync scheduler stopped")

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running"""
        return self._is_running

    async def run_once(self) -> Dict[str, int]:
        """Run one sync now; errors propagate to the caller"""
        set_correlation_id(generate_correlation_id())
        summary = await self.seller_service.sync_sellers()
        self.last_summary = summary
        return summary

    async def _run_job(self) -> None:
        try:
            await self.run_once()
        except Exception as e:
            logger.error(f"Scheduled seller sync failed: {e}", exc_info=True)
