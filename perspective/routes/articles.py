import logging
import secrets
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from perspective.config import settings
from perspective.database import get_db
from perspective.freshness import FreshnessReporter
from perspective.ingestion import RefreshController
from perspective.models import Article
from perspective.schemas import (
    ArticleResponse,
    FreshnessResponse,
    RefreshRequest,
    RefreshResponse,
    VoteRequest,
    VoteResponse,
)
from perspective.services import get_controller, get_freshness, get_store
from perspective.store import DEFAULT_LIST_LIMIT, DEFAULT_RELATED_LIMIT, ArticleStore
from perspective.votes import cast_vote, get_vote

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/articles", response_model=List[ArticleResponse])
def list_articles(
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=100),
    category: Optional[str] = None,
    store: ArticleStore = Depends(get_store),
):
    """Newest articles first, optionally filtered by category ("all" means no filter)."""
    articles = store.list_articles(limit, category)
    logger.info(f"[/articles] Returning {len(articles)} articles (category={category or 'all'})")
    return articles


@router.get("/articles/{article_id}", response_model=ArticleResponse)
def read_article(article_id: str, store: ArticleStore = Depends(get_store)):
    """Return a single article and count the view."""
    article = store.get_article(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    if store.increment_view_count(article_id):
        article.view_count += 1
    return article


@router.get("/articles/{article_id}/related", response_model=List[ArticleResponse])
def related_articles(
    article_id: str,
    limit: int = Query(DEFAULT_RELATED_LIMIT, ge=1, le=20),
    store: ArticleStore = Depends(get_store),
):
    """Other articles from the same category as the given one."""
    article = store.get_article(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return store.list_related(article.category, article_id, limit)


@router.post("/refresh", response_model=RefreshResponse)
def refresh(request: RefreshRequest, controller: RefreshController = Depends(get_controller)):
    """
    Trigger an ingestion refresh. Blocks until complete.
    When REFRESH_TOKEN is configured the request must carry it.
    """
    expected = settings.REFRESH_TOKEN
    if expected and not secrets.compare_digest(request.token or "", expected):
        logger.warning("[/refresh] Rejected request with invalid token")
        raise HTTPException(status_code=401, detail="Invalid token")

    articles = controller.refresh(force_refresh=request.force_refresh)
    logger.info(f"[/refresh] Served {len(articles)} articles (force={request.force_refresh})")
    return RefreshResponse(timestamp=datetime.now(timezone.utc), count=len(articles), articles=articles)


@router.get("/last-updated", response_model=FreshnessResponse)
def last_updated(freshness: FreshnessReporter = Depends(get_freshness)):
    return freshness.get_status()


@router.post("/articles/{article_id}/vote", response_model=VoteResponse)
def vote(article_id: str, request: VoteRequest, db: Session = Depends(get_db)):
    """Cast, change or (by repeating it) remove a vote on an article."""
    if db.get(Article, article_id) is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return cast_vote(db, article_id, request.user_id, request.value)


@router.get("/articles/{article_id}/vote")
def read_vote(article_id: str, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return {"vote": get_vote(db, article_id, user_id)}
