from fastapi import Depends
from fastapi.routing import APIRouter

from ggbench.apps.admin_api.config import settings
from ggbench.apps.admin_api.transport_types.requests import GenerationRequest
from ggbench.apps.admin_api.transport_types.responses import GenerationResponse
from ggbench.auth.permissions import PERM
from ggbench.generation.pipeline import client_for, generate_animation
from ggbench.scoring.rating import parse_framework
from ggbench.server.auth import AuthManager
from ggbench.util.logging import get_logger
from ggbench.util.postgres import get_sessionmaker

logger = get_logger(__name__)

generation_router = APIRouter()

am = AuthManager(
    jwt_secret=settings.JWT_SECRET_KEY,
    jwt_algorithm=settings.ALGORITHM,
)


def get_client_factory():
    return client_for


# sync handler: runs on the threadpool while the model endpoint responds
@generation_router.post(
    "/api/generation",
    dependencies=[Depends(am.require_any_scopes([PERM.ANIMATION.GENERATE]))],
    response_model=GenerationResponse,
)
def generate(
    request: GenerationRequest,
    session_factory=Depends(get_sessionmaker),
    client_factory=Depends(get_client_factory),
):
    framework = parse_framework(request.framework)

    logger.info(
        "Generating animation",
        model_id=request.model_id,
        prompt_id=request.prompt_id,
        framework=framework.value,
    )

    result = generate_animation(
        request.model_id,
        request.prompt_id,
        framework,
        session_factory=session_factory,
        client_factory=client_factory,
        timeout=settings.GENERATION_TIMEOUT_SECONDS,
        max_attempts=settings.GENERATION_MAX_ATTEMPTS,
    )

    return result.to_dict()
