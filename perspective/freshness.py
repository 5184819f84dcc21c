import logging
from datetime import datetime, timezone

from perspective.errors import StoreUnavailable
from perspective.ingestion import IngestionState
from perspective.schemas import FreshnessResponse
from perspective.store import ArticleStore

logger = logging.getLogger(__name__)


class FreshnessReporter:
    """Reports when the article store last received an article and how healthy ingestion is."""

    def __init__(self, store: ArticleStore, state: IngestionState):
        self.store = store
        self.state = state

    def get_status(self) -> FreshnessResponse:
        try:
            last_updated = self.store.latest_created_at()
        except StoreUnavailable as e:
            logger.error(f"Error getting last updated time: {e}")
            return FreshnessResponse(last_updated=datetime.now(timezone.utc), status="error")

        if last_updated is None:
            last_updated = datetime.now(timezone.utc)

        status = "success" if self.state.consecutive_errors == 0 else "warning"
        return FreshnessResponse(last_updated=last_updated, status=status)
