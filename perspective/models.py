from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint

from perspective.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Article(Base):
    __tablename__ = "articles"

    # "gn-..." for upstream articles, "mock-..." for persisted seed articles
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    source = Column(String, nullable=False)          # upstream source name, e.g. "Reuters"
    published_at = Column(DateTime, nullable=False, index=True)
    url = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    category = Column(String, nullable=False, default="World", index=True)

    # --- Counters ---
    view_count = Column(Integer, nullable=False, default=0)
    like_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
    upvote_count = Column(Integer, nullable=False, default=0)  # signed

    # --- Metadata ---
    created_at = Column(DateTime, default=utcnow)  # when the store received it


class ArticleVote(Base):
    __tablename__ = "article_votes"
    __table_args__ = (UniqueConstraint("article_id", "user_id", name="uq_article_votes_article_user"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(String, ForeignKey("articles.id"), nullable=False, index=True)
    user_id = Column(String, nullable=False)
    value = Column(Integer, nullable=False)  # -1, 0 or 1
    created_at = Column(DateTime, default=utcnow)
