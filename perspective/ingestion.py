import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from perspective.config import settings
from perspective.errors import RateLimited, StoreUnavailable, UpstreamError
from perspective.fetcher import GNewsFetcher
from perspective.schemas import ArticleCreate, ArticleResponse
from perspective.store import DEFAULT_LIST_LIMIT, ArticleStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Backoff policy
# ---------------------------------------------------------------------------

def backoff_interval(
    consecutive_errors: int,
    base_seconds: float = settings.REFRESH_BASE_INTERVAL_SECONDS,
    max_factor: int = settings.MAX_BACKOFF_FACTOR,
) -> float:
    """
    Minimum wait between upstream calls after `consecutive_errors` failures:
    base * min(2 ** consecutive_errors, max_factor).
    """
    return base_seconds * min(2 ** consecutive_errors, max_factor)


@dataclass
class IngestionState:
    """In-memory refresh state. Reset on process restart."""
    last_call_at: float = 0.0                   # epoch seconds of the last upstream attempt
    rate_limit_reset_at: Optional[float] = None  # no upstream call before this
    consecutive_errors: int = 0


# ---------------------------------------------------------------------------
# Refresh controller
# ---------------------------------------------------------------------------

class RefreshController:
    """
    Decides whether to call upstream, persists new articles, and always hands
    back a displayable article list. No failure escapes refresh().
    """

    def __init__(
        self,
        store: ArticleStore,
        fetcher: GNewsFetcher,
        state: Optional[IngestionState] = None,
        base_interval_seconds: float = settings.REFRESH_BASE_INTERVAL_SECONDS,
        max_backoff_factor: int = settings.MAX_BACKOFF_FACTOR,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.fetcher = fetcher
        self.state = state or IngestionState()
        self.base_interval_seconds = base_interval_seconds
        self.max_backoff_factor = max_backoff_factor
        self._clock = clock

    def current_interval(self) -> float:
        """Minimum seconds between non-forced upstream calls given the current error streak."""
        return backoff_interval(self.state.consecutive_errors, self.base_interval_seconds, self.max_backoff_factor)

    def refresh(self, force_refresh: bool = False, limit: int = DEFAULT_LIST_LIMIT) -> List[ArticleResponse]:
        """
        Fetch from upstream if the rate/backoff policy allows it, store new
        articles, and return the stored article list.

        Args:
            force_refresh: ignore the minimum interval (never the 429 cooldown)
            limit: maximum number of articles to return
        """
        state = self.state

        if not self.fetcher.is_configured:
            logger.error("GNews API key not configured, serving stored articles")
            return self.store.list_articles(limit)

        now = self._clock()

        if state.rate_limit_reset_at is not None and now < state.rate_limit_reset_at:
            wait = int(state.rate_limit_reset_at - now) + 1
            logger.info(f"Rate limit cooldown active, {wait}s until next upstream call")
            return self.store.list_articles(limit)

        interval = self.current_interval()
        elapsed = now - state.last_call_at
        if not force_refresh and elapsed < interval:
            logger.info(
                f"Skipping upstream call, last call was {int(elapsed)}s ago "
                f"(backoff {interval / self.base_interval_seconds:g}x, {interval / 60:g} min)"
            )
            return self.store.list_articles(limit)

        # Recorded before the call so a slow request does not let another refresh through
        state.last_call_at = now

        try:
            articles = self.fetcher.fetch_latest()
        except RateLimited as e:
            state.rate_limit_reset_at = e.reset_at
            state.consecutive_errors += 1
            logger.error(f"Upstream rate limit exceeded, cooling down until {e.reset_at:.0f}")
            return self.store.list_articles(limit)
        except UpstreamError as e:
            state.consecutive_errors += 1
            logger.error(f"Upstream fetch failed ({state.consecutive_errors} in a row): {e.detail}")
            return self.store.list_articles(limit)
        except Exception:
            state.consecutive_errors += 1
            logger.exception(f"Unexpected error during upstream fetch ({state.consecutive_errors} in a row)")
            return self.store.list_articles(limit)

        stored = self._persist(articles)

        state.consecutive_errors = 0
        state.rate_limit_reset_at = None
        logger.info(f"Refresh complete: {stored} new of {len(articles)} fetched")

        return self.store.list_articles(limit)

    def _persist(self, articles: List[ArticleCreate]) -> int:
        """Insert articles whose title prefix is not already stored. Returns the number inserted."""
        inserted = 0
        try:
            for article in articles:
                if self.store.has_similar_title(article.title):
                    logger.debug(f"Skipping duplicate '{article.title[:60]}'")
                    continue
                self.store.insert_article(article)
                inserted += 1
        except StoreUnavailable as e:
            logger.warning(f"Article store unavailable while persisting, dropped remaining articles: {e}")
        return inserted
