import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from perspective.errors import StoreUnavailable
from perspective.models import Article
from perspective.schemas import ArticleCreate, ArticleResponse
from perspective.seed import SEED_ARTICLES

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20
DEFAULT_RELATED_LIMIT = 3
DEDUP_PREFIX_LENGTH = 30
ALL_CATEGORIES = "all"


def seed_fallback(category: Optional[str] = None) -> List[ArticleResponse]:
    """
    Transient copies of the seed set, newest first, narrowed to `category`.
    Only served while the store is unreachable.
    """
    seeds = sorted(SEED_ARTICLES, key=lambda a: a.published_at, reverse=True)
    if category and category != ALL_CATEGORIES:
        seeds = [a for a in seeds if a.category == category]
    return [ArticleResponse(**a.model_dump()) for a in seeds]


class ArticleStore:
    """
    Article table access over SQLAlchemy sessions.

    Listing calls never raise: an unreachable store or an empty table falls
    back to the built-in seed set. Write and probe calls used by ingestion
    raise StoreUnavailable so the caller can decide what to do.
    """

    def __init__(self, session_factory):
        # session_factory: callable returning a new Session (e.g. SessionLocal)
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Open a session and translate any SQLAlchemy failure into StoreUnavailable."""
        db = None
        try:
            db = self._session_factory()
            yield db
        except SQLAlchemyError as e:
            if db is not None:
                db.rollback()
            raise StoreUnavailable(str(e)) from e
        finally:
            if db is not None:
                db.close()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def _query_articles(self, limit: int, category: Optional[str]) -> List[ArticleResponse]:
        with self._session() as db:
            query = db.query(Article)
            if category and category != ALL_CATEGORIES:
                query = query.filter(Article.category == category)
            rows = query.order_by(Article.published_at.desc()).limit(limit).all()
            return [ArticleResponse.model_validate(row) for row in rows]

    def list_articles(self, limit: int = DEFAULT_LIST_LIMIT, category: Optional[str] = None) -> List[ArticleResponse]:
        """
        Newest articles first, optionally filtered to one category.

        An empty table is seeded and re-read. An unreachable store, or a seed
        write that fails, serves transient seed copies, so unfiltered listings
        are never empty. A category with no stored articles yields an empty list.
        """
        try:
            articles = self._query_articles(limit, category)
            if articles or self._count_articles():
                return articles

            self._persist_seed()
            articles = self._query_articles(limit, category)
            if articles:
                return articles
        except StoreUnavailable as e:
            logger.error(f"Article store unavailable, serving seed articles: {e}")

        return seed_fallback(category)[:limit]

    def _count_articles(self) -> int:
        with self._session() as db:
            return db.query(func.count(Article.id)).scalar()

    def _persist_seed(self) -> None:
        """Best-effort insert of the seed set into an empty table."""
        try:
            with self._session() as db:
                logger.info("No articles found in store, seeding with built-in articles")
                for seed in SEED_ARTICLES:
                    fields = seed.model_dump()
                    fields["id"] = f"mock-{uuid.uuid4().hex[:12]}"
                    db.add(Article(**fields))
                db.commit()
                logger.info(f"Persisted {len(SEED_ARTICLES)} seed articles")
        except StoreUnavailable as e:
            logger.warning(f"Could not persist seed articles: {e}")

    def list_related(
        self, category: str, exclude_id: str, limit: int = DEFAULT_RELATED_LIMIT
    ) -> List[ArticleResponse]:
        """Other articles in the same category, newest first. Empty on failure."""
        try:
            with self._session() as db:
                rows = (
                    db.query(Article)
                    .filter(Article.category == category, Article.id != exclude_id)
                    .order_by(Article.published_at.desc())
                    .limit(limit)
                    .all()
                )
                return [ArticleResponse.model_validate(row) for row in rows]
        except StoreUnavailable as e:
            logger.error(f"Failed to fetch related articles for '{exclude_id}': {e}")
            return []

    # ------------------------------------------------------------------
    # Single article
    # ------------------------------------------------------------------

    def get_article(self, article_id: str) -> Optional[ArticleResponse]:
        """Return the article, or None if it does not exist or the store is down."""
        try:
            with self._session() as db:
                row = db.get(Article, article_id)
                return ArticleResponse.model_validate(row) if row is not None else None
        except StoreUnavailable as e:
            logger.error(f"Failed to fetch article '{article_id}': {e}")
            return None

    def increment_view_count(self, article_id: str) -> bool:
        """Add one to the article's view count. Returns False if nothing was updated."""
        try:
            with self._session() as db:
                result = db.execute(
                    update(Article)
                    .where(Article.id == article_id)
                    .values(view_count=Article.view_count + 1)
                )
                db.commit()
                return result.rowcount > 0
        except StoreUnavailable as e:
            logger.error(f"Failed to increment view count for '{article_id}': {e}")
            return False

    def insert_article(self, article: ArticleCreate) -> None:
        """Insert a new article. Raises StoreUnavailable on failure."""
        with self._session() as db:
            db.add(Article(**article.model_dump()))
            db.commit()

    # ------------------------------------------------------------------
    # Ingestion and freshness probes (raise StoreUnavailable)
    # ------------------------------------------------------------------

    def has_similar_title(self, title: str, prefix_length: int = DEDUP_PREFIX_LENGTH) -> bool:
        """
        True if a stored title contains the first `prefix_length` chars of `title`, ignoring case.

        Case folding is done by the database; SQLite's lower() only folds ASCII,
        so "Über" and "über" count as different prefixes there.
        """
        prefix = title[:prefix_length]
        with self._session() as db:
            match = (
                db.query(Article.id)
                .filter(Article.title.icontains(prefix, autoescape=True))
                .first()
            )
            return match is not None

    def latest_created_at(self) -> Optional[datetime]:
        """Creation time of the most recently stored article, or None for an empty table."""
        with self._session() as db:
            return db.query(func.max(Article.created_at)).scalar()
