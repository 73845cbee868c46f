from typing import Optional

from fastapi import Depends, Query
from fastapi.routing import APIRouter
from sqlalchemy import select
from sqlalchemy.orm import Session

from ggbench.apps.admin_api.config import settings
from ggbench.apps.admin_api.transport_types.generic import ListResponse
from ggbench.apps.admin_api.transport_types.responses import AnimationResponse
from ggbench.auth.permissions import PERM
from ggbench.models.animation import Animation
from ggbench.scoring.rating import parse_framework
from ggbench.server.auth import AuthManager
from ggbench.util.postgres import get_managed_session

animation_router = APIRouter()

am = AuthManager(
    jwt_secret=settings.JWT_SECRET_KEY,
    jwt_algorithm=settings.ALGORITHM,
)


@animation_router.get(
    "/api/animation",
    dependencies=[Depends(am.require_any_scopes([PERM.ANIMATION.READ]))],
    response_model=ListResponse[AnimationResponse],
)
def get_animations(
    db: Session = Depends(get_managed_session),
    model_id: Optional[int] = Query(None),
    prompt_id: Optional[int] = Query(None),
    framework: Optional[str] = Query(None),
    include_code: bool = Query(True),
):
    query = select(Animation).order_by(Animation.created.desc(), Animation.id.desc())

    if model_id is not None:
        query = query.where(Animation.model_id == model_id)

    if prompt_id is not None:
        query = query.where(Animation.prompt_id == prompt_id)

    if framework is not None:
        query = query.where(Animation.framework == parse_framework(framework).value)

    animations = list(db.scalars(query).unique())

    return {
        "data": [
            animation.to_dict(include_code=include_code) for animation in animations
        ],
        "total": len(animations),
    }
