from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ArticleCreate(BaseModel):
    """Normalized article ready to be stored, produced by the fetcher or the seed set."""
    id: str
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    source: str
    published_at: datetime
    url: Optional[str] = None
    image_url: Optional[str] = None
    category: str = "World"
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    upvote_count: int = 0


class ArticleResponse(ArticleCreate):
    """Stored article as returned by the store and the API."""
    created_at: Optional[datetime] = None

    # Allows Pydantic to read data directly from SQLAlchemy model instances
    model_config = ConfigDict(from_attributes=True)


class RefreshRequest(BaseModel):
    force_refresh: bool = False
    token: Optional[str] = None


class RefreshResponse(BaseModel):
    timestamp: datetime
    count: int
    articles: List[ArticleResponse]


class FreshnessResponse(BaseModel):
    last_updated: datetime
    status: Literal["success", "warning", "error"]


class VoteRequest(BaseModel):
    user_id: str = Field(min_length=1)
    value: int


class VoteResponse(BaseModel):
    vote: int
    new_score: int
