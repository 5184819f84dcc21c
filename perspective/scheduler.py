import asyncio
import logging

from perspective.config import settings
from perspective.ingestion import RefreshController

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Triggers a non-forced refresh every N seconds. The controller's own
    backoff decides whether each tick actually reaches upstream.
    """

    def __init__(self, controller: RefreshController, interval_seconds: int = settings.AUTO_REFRESH_INTERVAL_SECONDS):
        self.controller = controller
        self.interval_seconds = interval_seconds

    async def run(self):
        """Entry point for the background task. Runs until cancelled."""
        logger.info("RefreshScheduler started, refreshing every %ds", self.interval_seconds)
        while True:
            await self.tick()
            await asyncio.sleep(self.interval_seconds)

    async def tick(self):
        # refresh() blocks on the jitter sleep and the HTTP call
        articles = await asyncio.to_thread(self.controller.refresh)
        logger.info(f"Scheduled refresh served {len(articles)} articles")
