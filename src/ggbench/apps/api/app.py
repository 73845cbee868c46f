import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from scalar_fastapi import get_scalar_api_reference

from ggbench.apps.api.routers.comparison import comparison_router
from ggbench.apps.api.routers.prompt import prompt_router
from ggbench.apps.api.routers.user import user_router
from ggbench.server.errors import register_exception_handlers
from ggbench.util.logging import configure_logging

from .config import settings
from .lifespan import lifespan

configure_logging(humanize=settings.HUMANIZE_LOGS, level=settings.LOG_LEVEL)

allow_origins = os.environ.get("CORS_ALLOWED_ORIGIN", "").split(",")


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app, malformed_requests_as_400=True)

app.include_router(user_router)
app.include_router(comparison_router)
app.include_router(prompt_router)


@app.get("/scalar", include_in_schema=False)
async def scalar_docs():
    return get_scalar_api_reference(
        openapi_url="/openapi.json",
        title="GGBench API",
    )
