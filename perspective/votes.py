import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from perspective.models import ArticleVote
from perspective.schemas import VoteResponse

logger = logging.getLogger(__name__)


def vote_score(db: Session, article_id: str) -> int:
    """Sum of all vote values cast on an article (0 when there are none)."""
    return db.query(func.coalesce(func.sum(ArticleVote.value), 0)).filter(
        ArticleVote.article_id == article_id
    ).scalar()


def get_vote(db: Session, article_id: str, user_id: str) -> int:
    """The user's current vote on an article, 0 if they have not voted."""
    vote = (
        db.query(ArticleVote)
        .filter(ArticleVote.article_id == article_id, ArticleVote.user_id == user_id)
        .first()
    )
    return vote.value if vote else 0


def cast_vote(db: Session, article_id: str, user_id: str, value: int) -> VoteResponse:
    """
    Record a user's vote on an article. One row per (article, user).

    Casting the same value again removes the vote; a different value replaces it.

    Returns:
        the user's resulting vote and the article's new score
    """
    value = max(-1, min(1, value))

    existing = (
        db.query(ArticleVote)
        .filter(ArticleVote.article_id == article_id, ArticleVote.user_id == user_id)
        .first()
    )

    if existing is not None and existing.value == value:
        db.delete(existing)
        result = 0
    elif existing is not None:
        existing.value = value
        result = value
    else:
        db.add(ArticleVote(article_id=article_id, user_id=user_id, value=value))
        result = value

    db.commit()

    new_score = vote_score(db, article_id)
    logger.info(f"Vote on '{article_id}' by '{user_id}': {result} (score={new_score})")
    return VoteResponse(vote=result, new_score=new_score)
