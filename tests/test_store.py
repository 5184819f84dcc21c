"""
Unit tests for ArticleStore: in-memory SQLite, plus an unreachable database
for the fallback paths.
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from perspective.database import Base
from perspective.errors import StoreUnavailable
from perspective.models import Article
from perspective.schemas import ArticleCreate
from perspective.seed import SEED_ARTICLES
from perspective.store import ArticleStore, seed_fallback


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return ArticleStore(session_factory)


@pytest.fixture
def broken_store():
    # SQLite cannot open a file in a directory that does not exist
    engine = create_engine("sqlite:////nonexistent-dir/perspective/news.db")
    yield ArticleStore(sessionmaker(bind=engine))
    engine.dispose()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_article(**kwargs) -> ArticleCreate:
    defaults = {
        "id": "gn-1",
        "title": "Storm hits coastal town",
        "source": "Example News",
        "published_at": datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        "category": "World",
    }
    defaults.update(kwargs)
    return ArticleCreate(**defaults)


def count_rows(session_factory) -> int:
    db = session_factory()
    try:
        return db.query(Article).count()
    finally:
        db.close()


# ---------------------------------------------------------------------------
# list_articles
# ---------------------------------------------------------------------------

class TestListArticles:
    def test_newest_first(self, store):
        store.insert_article(make_article(id="old", published_at=datetime(2025, 1, 1, tzinfo=timezone.utc)))
        store.insert_article(make_article(id="new", published_at=datetime(2025, 1, 3, tzinfo=timezone.utc)))
        store.insert_article(make_article(id="mid", published_at=datetime(2025, 1, 2, tzinfo=timezone.utc)))

        assert [a.id for a in store.list_articles()] == ["new", "mid", "old"]

    def test_limit_is_applied(self, store):
        for i in range(5):
            store.insert_article(make_article(id=f"gn-{i}", title=f"Story {i}"))

        assert len(store.list_articles(limit=2)) == 2

    def test_category_filter_is_exact(self, store):
        store.insert_article(make_article(id="tech", category="Technology"))
        store.insert_article(make_article(id="world", category="World"))

        assert [a.id for a in store.list_articles(category="Technology")] == ["tech"]

    def test_all_sentinel_disables_filter(self, store):
        store.insert_article(make_article(id="tech", category="Technology"))
        store.insert_article(make_article(id="world", category="World"))

        assert {a.id for a in store.list_articles(category="all")} == {"tech", "world"}

    def test_empty_store_is_seeded_and_served(self, store, session_factory):
        articles = store.list_articles()

        assert len(articles) == len(SEED_ARTICLES)
        assert count_rows(session_factory) == len(SEED_ARTICLES)
        assert all(a.id.startswith("mock-") for a in articles)
        # served from storage, so the store stamped them
        assert all(a.created_at is not None for a in articles)

    def test_seed_is_persisted_only_once(self, store, session_factory):
        store.list_articles()
        store.list_articles()

        assert count_rows(session_factory) == len(SEED_ARTICLES)

    def test_empty_category_on_populated_table_is_empty(self, store, session_factory):
        store.insert_article(make_article(id="world", category="World"))
        articles = store.list_articles(category="Health")

        assert articles == []
        assert count_rows(session_factory) == 1

    def test_seeded_articles_resolve_by_id(self, store):
        for article in store.list_articles():
            assert store.get_article(article.id) is not None

    def test_empty_store_with_category_serves_persisted_seed(self, store):
        articles = store.list_articles(category="Health")

        assert [a.category for a in articles] == ["Health"]
        assert store.get_article(articles[0].id) is not None

    def test_unreachable_store_serves_seed(self, broken_store):
        articles = broken_store.list_articles()

        assert len(articles) == len(SEED_ARTICLES)
        assert {a.id for a in articles} == {a.id for a in SEED_ARTICLES}

    def test_unreachable_store_narrows_seed_to_category(self, broken_store):
        articles = broken_store.list_articles(category="Health")

        assert [a.category for a in articles] == ["Health"]

    def test_unreachable_store_never_mixes_categories(self, broken_store):
        assert broken_store.list_articles(category="Sports") == []


class TestSeedFallback:
    def test_spans_distinct_categories(self):
        categories = [a.category for a in seed_fallback()]
        assert len(set(categories)) == len(categories)

    def test_category_without_seed_is_empty(self):
        assert seed_fallback("Sports") == []

    def test_all_returns_full_set(self):
        assert len(seed_fallback("all")) == len(SEED_ARTICLES)

    def test_sorted_newest_first(self):
        dates = [a.published_at for a in seed_fallback()]
        assert dates == sorted(dates, reverse=True)


# ---------------------------------------------------------------------------
# Single-article operations
# ---------------------------------------------------------------------------

class TestGetArticle:
    def test_returns_article(self, store):
        store.insert_article(make_article(id="gn-1"))
        assert store.get_article("gn-1").title == "Storm hits coastal town"

    def test_missing_returns_none(self, store):
        assert store.get_article("nope") is None

    def test_unreachable_returns_none(self, broken_store):
        assert broken_store.get_article("gn-1") is None


class TestIncrementViewCount:
    def test_increments_by_one(self, store):
        store.insert_article(make_article(id="gn-1"))
        assert store.increment_view_count("gn-1") is True
        assert store.increment_view_count("gn-1") is True

        assert store.get_article("gn-1").view_count == 2

    def test_missing_article_returns_false(self, store):
        assert store.increment_view_count("nope") is False

    def test_unreachable_returns_false(self, broken_store):
        assert broken_store.increment_view_count("gn-1") is False


class TestListRelated:
    def test_same_category_excluding_current(self, store):
        store.insert_article(make_article(id="a", category="Science"))
        store.insert_article(make_article(id="b", category="Science"))
        store.insert_article(make_article(id="c", category="Health"))

        assert [a.id for a in store.list_related("Science", "a")] == ["b"]

    def test_limit_is_applied(self, store):
        for i in range(5):
            store.insert_article(make_article(id=f"s-{i}", category="Science"))

        assert len(store.list_related("Science", "other", limit=3)) == 3

    def test_unreachable_returns_empty(self, broken_store):
        assert broken_store.list_related("Science", "a") == []


# ---------------------------------------------------------------------------
# Ingestion probes
# ---------------------------------------------------------------------------

class TestHasSimilarTitle:
    def test_matches_on_first_thirty_chars_case_insensitive(self, store):
        store.insert_article(make_article(title="Global Markets Rally as Inflation Concerns Ease"))
        assert store.has_similar_title("GLOBAL MARKETS RALLY AS INFLATION FEARS FADE") is True

    def test_different_prefix_does_not_match(self, store):
        store.insert_article(make_article(title="Global Markets Rally as Inflation Concerns Ease"))
        assert store.has_similar_title("Global Markets Slump as Inflation Returns") is False

    def test_prefix_found_inside_longer_title(self, store):
        store.insert_article(make_article(title="BREAKING: Storm hits coastal town overnight"))
        assert store.has_similar_title("Storm hits coastal town") is True

    def test_non_ascii_prefix_with_same_case_matches(self, store):
        # case folding is left to the database; SQLite only folds ASCII
        store.insert_article(make_article(title="Über die Brücke: Stadt feiert neue Verbindung"))
        assert store.has_similar_title("Über die Brücke: Stadt feiert neue Verbindung heute") is True

    def test_like_wildcards_are_literal(self, store):
        store.insert_article(make_article(title="Storm hits coastal town"))
        assert store.has_similar_title("Storm hits % town") is False

    def test_unreachable_raises(self, broken_store):
        with pytest.raises(StoreUnavailable):
            broken_store.has_similar_title("anything")


class TestInsertAndLatest:
    def test_latest_created_at_none_when_empty(self, store):
        assert store.latest_created_at() is None

    def test_latest_created_at_after_insert(self, store):
        store.insert_article(make_article())
        assert isinstance(store.latest_created_at(), datetime)

    def test_insert_unreachable_raises(self, broken_store):
        with pytest.raises(StoreUnavailable):
            broken_store.insert_article(make_article())

    def test_latest_unreachable_raises(self, broken_store):
        with pytest.raises(StoreUnavailable):
            broken_store.latest_created_at()
