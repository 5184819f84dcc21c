import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from perspective.config import settings
from perspective.database import Base, engine
from perspective.routes.articles import router
from perspective.scheduler import RefreshScheduler
from perspective.services import controller

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    logger.info("Creating database tables if they don't exist...")
    Base.metadata.create_all(bind=engine)

    task = None
    if settings.AUTO_REFRESH_ENABLED:
        logger.info("Starting background news refresh...")
        scheduler = RefreshScheduler(controller, settings.AUTO_REFRESH_INTERVAL_SECONDS)
        task = asyncio.create_task(scheduler.run())

    yield

    # --- Shutdown ---
    if task is not None:
        logger.info("Shutting down background refresh...")
        task.cancel()


app = FastAPI(
    title="Perspective News API",
    description="Ingests top headlines and serves them with a freshness signal.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router)
