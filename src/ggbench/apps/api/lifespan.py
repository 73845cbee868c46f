from contextlib import asynccontextmanager

from ggbench.util.cache import build_cache
from ggbench.util.logging import get_logger
from ggbench.util.postgres import dispose_engine, get_sessionmaker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app):
    get_sessionmaker()
    app.state.cache = build_cache()
    logger.info("Public API starting", cache_enabled=app.state.cache is not None)

    yield

    if app.state.cache is not None:
        app.state.cache.close()
    dispose_engine()
