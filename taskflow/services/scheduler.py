# taskflow/services/scheduler.py
"""
Scheduler service that keeps the purchase dashboard cache warm
"""

import logging
from typing import Any, Dict

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from taskflow.services.cache import TimedCache
from taskflow.services.errors import SheetsUnavailable
from taskflow.services.purchase import PurchaseService

logger = logging.getLogger(__name__)


class PurchaseCacheScheduler:
    """Refreshes the purchase dashboard cache once per staleness window"""

    def __init__(self, service: PurchaseService, cache: TimedCache):
        self.service = service
        self.cache = cache
        self.scheduler = AsyncIOScheduler()
        self.is_running = False

    def start(self):
        """Start the scheduler"""
        if self.is_running:
            return
        if not self.service.client.configured:
            logger.info("Google Sheets not configured; purchase cache refresh disabled")
            return

        self.scheduler.add_job(
            self.refresh_purchase_cache,
            trigger=IntervalTrigger(seconds=self.cache.ttl_seconds),
            id='refresh_purchase_cache',
            name='Refresh Purchase Dashboard Cache',
            replace_existing=True,
            max_instances=1,
        )
        self.scheduler.start()
        self.is_running = True
        logger.info("Purchase cache scheduler started")

    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown()
            self.is_running = False
            logger.info("Purchase cache scheduler stopped")

    def refresh_purchase_cache(self):
        """Reload the dashboard from the spreadsheet, keeping the old data on failure"""
        try:
            self.cache.set(self.service.get_dashboard_data())
            logger.info("Purchase dashboard cache refreshed")
        except SheetsUnavailable as e:
            logger.error(f"Error refreshing purchase dashboard cache: {e}")

    def get_status(self) -> Dict[str, Any]:
        jobs = [
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
            }
            for job in self.scheduler.get_jobs()
        ] if self.is_running else []
        return {"is_running": self.is_running, "jobs": jobs}
