"""Process-wide wiring of the store, refresh controller and freshness reporter."""
from perspective.config import settings
from perspective.database import SessionLocal
from perspective.fetcher import GNewsFetcher
from perspective.freshness import FreshnessReporter
from perspective.ingestion import RefreshController
from perspective.store import ArticleStore

store = ArticleStore(SessionLocal)
controller = RefreshController(store, GNewsFetcher.from_settings(settings))
freshness = FreshnessReporter(store, controller.state)


# FastAPI dependencies, overridden in tests
def get_store() -> ArticleStore:
    return store


def get_controller() -> RefreshController:
    return controller


def get_freshness() -> FreshnessReporter:
    return freshness
