from contextlib import asynccontextmanager

from ggbench.util.logging import get_logger
from ggbench.util.postgres import dispose_engine, get_sessionmaker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app):
    # generation requests hold no session while the model endpoint responds,
    # so the pool only needs to cover the short load and save transactions
    get_sessionmaker()
    logger.info("Admin API starting")

    yield

    dispose_engine()
