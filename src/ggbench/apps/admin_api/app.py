import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from scalar_fastapi import get_scalar_api_reference

from ggbench.apps.admin_api.routers.animations import animation_router
from ggbench.apps.admin_api.routers.generations import generation_router
from ggbench.apps.admin_api.routers.models import model_router
from ggbench.apps.admin_api.routers.prompts import prompt_router
from ggbench.server.errors import register_exception_handlers
from ggbench.util.logging import configure_logging

from .config import settings
from .lifespan import lifespan

configure_logging(humanize=settings.HUMANIZE_LOGS, level=settings.LOG_LEVEL)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ALLOWED_ORIGIN", "").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(prompt_router)
app.include_router(model_router)
app.include_router(animation_router)
app.include_router(generation_router)


@app.get("/scalar", include_in_schema=False)
async def scalar_docs():
    return get_scalar_api_reference(
        openapi_url="/openapi.json",
        title="GGBench Admin API",
    )
