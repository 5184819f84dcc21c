import logging
import random
import re
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

import httpx

from perspective.classifier import classify
from perspective.config import Settings, settings as default_settings
from perspective.errors import RateLimited, UpstreamError
from perspective.schemas import ArticleCreate

logger = logging.getLogger(__name__)

RATE_LIMIT_HEADERS = ("X-RateLimit-Reset", "RateLimit-Reset")
JITTER_SECONDS = (1.0, 3.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def strip_html(text: Optional[str]) -> str:
    """Remove HTML tags from a string, returning clean plain text."""
    return re.sub(r"<[^>]+>", "", text or "").strip()


def parse_published_at(value: Optional[str]) -> datetime:
    """
    Parse an upstream ISO-8601 timestamp ("2024-01-15T10:00:00Z") into a UTC datetime.
    Falls back to the current time if the value is missing or unparseable.
    """
    if value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        except ValueError:
            logger.warning(f"Unparseable publishedAt value '{value}', using current time")
    return datetime.now(timezone.utc)


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) else None


def _source_name(source) -> str:
    """GNews sends `source` as an object; tolerate a bare name string."""
    if isinstance(source, dict):
        return _text(source.get("name")) or "Unknown"
    return _text(source) or "Unknown"


def parse_rate_limit_reset(headers, now: float, default_cooldown: float) -> float:
    """
    Work out when a 429 cooldown ends, as epoch seconds.

    The header is either a relative offset in seconds or an absolute epoch
    timestamp in milliseconds; values longer than 10 digits are taken as the
    latter. This is a heuristic, not a contract of the provider.
    """
    raw = None
    for name in RATE_LIMIT_HEADERS:
        raw = headers.get(name)
        if raw:
            break

    if not raw:
        return now + default_cooldown

    raw = raw.strip()
    # isdigit() also accepts superscripts and other digits int() rejects
    if not (raw.isascii() and raw.isdecimal()):
        logger.warning(f"Unrecognized rate-limit reset header '{raw}', using default cooldown")
        return now + default_cooldown

    if len(raw) > 10:
        return int(raw) / 1000.0
    return now + int(raw)


# ---------------------------------------------------------------------------
# GNews fetcher: one call per invocation, no retries
# ---------------------------------------------------------------------------

class GNewsFetcher:
    """
    Fetches the latest top headlines from the GNews API and normalizes them
    into ArticleCreate objects. Retry and backoff are the controller's job.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = default_settings.GNEWS_ENDPOINT,
        language: str = default_settings.GNEWS_LANGUAGE,
        max_results: int = default_settings.GNEWS_MAX_RESULTS,
        user_agent: str = default_settings.GNEWS_USER_AGENT,
        timeout: float = default_settings.REQUEST_TIMEOUT_SECONDS,
        default_cooldown: float = default_settings.RATE_LIMIT_DEFAULT_COOLDOWN_SECONDS,
        client: Optional[httpx.Client] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        jitter: tuple[float, float] = JITTER_SECONDS,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.language = language
        self.max_results = max_results
        self.user_agent = user_agent
        self.timeout = timeout
        self.default_cooldown = default_cooldown
        self._client = client  # injected in tests; otherwise one client per call
        self._clock = clock
        self._sleep = sleep
        self.jitter = jitter

    @classmethod
    def from_settings(cls, config: Settings) -> "GNewsFetcher":
        return cls(
            api_key=config.GNEWS_API_KEY,
            endpoint=config.GNEWS_ENDPOINT,
            language=config.GNEWS_LANGUAGE,
            max_results=config.GNEWS_MAX_RESULTS,
            user_agent=config.GNEWS_USER_AGENT,
            timeout=config.REQUEST_TIMEOUT_SECONDS,
            default_cooldown=config.RATE_LIMIT_DEFAULT_COOLDOWN_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def fetch_latest(self) -> List[ArticleCreate]:
        """
        Call the top-headlines endpoint once and return normalized articles.

        Raises:
            RateLimited: upstream answered 429
            UpstreamError: any other failure, including empty results
        """
        # Random delay so calls never land on an exact fixed interval
        self._sleep(random.uniform(*self.jitter))

        params = {"token": self.api_key, "lang": self.language, "max": self.max_results}
        headers = {"User-Agent": self.user_agent}

        logger.info(f"Fetching top headlines from {self.endpoint}")
        try:
            if self._client is not None:
                response = self._client.get(self.endpoint, params=params, headers=headers)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(self.endpoint, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamError(f"request failed: {e}") from e

        if response.status_code == 429:
            reset_at = parse_rate_limit_reset(response.headers, self._clock(), self.default_cooldown)
            raise RateLimited(reset_at)

        if not response.is_success:
            raise UpstreamError(f"status {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"invalid JSON payload: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamError("unexpected payload shape")
        if data.get("errors") is not None:
            raise UpstreamError(f"upstream errors: {data['errors']}")
        if not data.get("articles"):
            raise UpstreamError("no articles returned")

        articles = [a for a in (self._normalize(item) for item in data["articles"]) if a is not None]
        if not articles:
            raise UpstreamError("no usable articles returned")

        logger.info(f"Fetched {len(articles)} articles")
        return articles

    def _normalize(self, item) -> Optional[ArticleCreate]:
        """Map one upstream item to an ArticleCreate, or None if it is malformed or has no title."""
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed upstream item: {item!r}")
            return None

        title = strip_html(_text(item.get("title")))
        if not title:
            logger.warning("Skipping upstream item with no title")
            return None

        description = strip_html(_text(item.get("description"))) or None
        return ArticleCreate(
            id=f"gn-{uuid.uuid4().hex}",
            title=title,
            description=description,
            content=strip_html(_text(item.get("content"))) or None,
            source=_source_name(item.get("source")),
            published_at=parse_published_at(_text(item.get("publishedAt"))),
            url=_text(item.get("url")),
            image_url=_text(item.get("image")),
            category=classify(title, description),
        )
