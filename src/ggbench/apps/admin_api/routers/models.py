import datetime
from typing import Optional

import humps
from fastapi import Depends, HTTPException, status
from fastapi.routing import APIRouter
from sqlalchemy import select
from sqlalchemy.orm import Session

from ggbench.apps.admin_api.config import settings
from ggbench.apps.admin_api.transport_types.generic import ListResponse
from ggbench.apps.admin_api.transport_types.requests import (
    CreateModelRequest,
    UpdateModelRequest,
)
from ggbench.apps.admin_api.transport_types.responses import (
    ModelCreatedResponse,
    ModelResponse,
)
from ggbench.auth.permissions import PERM
from ggbench.errors import ValidationError
from ggbench.models.model import Model
from ggbench.server.auth import AuthManager
from ggbench.util.logging import get_logger
from ggbench.util.postgres import get_managed_session

logger = get_logger(__name__)

model_router = APIRouter()

NULLABLE_FIELDS = frozenset({"additional_headers"})

am = AuthManager(
    jwt_secret=settings.JWT_SECRET_KEY,
    jwt_algorithm=settings.ALGORITHM,
)


def _ensure_name_available(db: Session, name: str, model_id: Optional[int] = None):
    query = select(Model.id).where(Model.name == name)
    if model_id is not None:
        query = query.where(Model.id != model_id)

    if db.scalar(query) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Model with name {name!r} already exists",
        )


@model_router.get(
    "/api/model",
    dependencies=[
        Depends(
            am.require_any_scopes([PERM.MODEL.ADMIN, PERM.MODEL.READ, PERM.MODEL.WRITE])
        ),
    ],
    response_model=ListResponse[ModelResponse],
)
def get_models(
    db: Session = Depends(get_managed_session),
    enabled: Optional[bool] = None,
):
    query = select(Model).order_by(Model.created.desc(), Model.id.desc())
    if enabled is not None:
        query = query.where(Model.enabled == enabled)

    models = list(db.scalars(query))

    return {
        "data": [model.to_dict() for model in models],
        "total": len(models),
    }


@model_router.post(
    "/api/model",
    dependencies=[Depends(am.require_any_scopes([PERM.MODEL.ADMIN, PERM.MODEL.WRITE]))],
    response_model=ModelCreatedResponse,
)
def register_model(
    model_request: CreateModelRequest,
    db: Session = Depends(get_managed_session),
):
    name = model_request.name.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Model name cannot be empty",
        )

    _ensure_name_available(db, name)

    model = Model(
        name=name,
        enabled=model_request.enabled,
        api_type=model_request.api_type,
        api_endpoint=model_request.api_endpoint,
        api_key=model_request.api_key,
        temperature=model_request.temperature,
        max_tokens=model_request.max_tokens,
        additional_headers=model_request.additional_headers,
    )
    db.add(model)
    db.flush()

    logger.info("Model registered", model_id=model.id, name=model.name)

    return {
        "id": model.id,
    }


@model_router.patch(
    "/api/model/{model_id}",
    dependencies=[Depends(am.require_any_scopes([PERM.MODEL.ADMIN, PERM.MODEL.WRITE]))],
    response_model=ModelResponse,
)
def update_model(
    model_id: int,
    model_update: UpdateModelRequest,
    db: Session = Depends(get_managed_session),
):
    model = db.get(Model, model_id)

    if not model:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Model with id {model_id} not found",
        )

    update_data = model_update.model_dump(exclude_unset=True)

    # additional_headers is the only column that may be cleared
    nulled = sorted(
        field
        for field, value in update_data.items()
        if value is None and field not in NULLABLE_FIELDS
    )
    if nulled:
        raise ValidationError(
            f"Fields cannot be null: {', '.join(humps.camelize(field) for field in nulled)}"
        )

    if "name" in update_data:
        name = (update_data.pop("name") or "").strip()
        if not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Model name cannot be empty",
            )
        _ensure_name_available(db, name, model_id=model.id)
        model.name = name

    # standings are only ever changed by votes
    for field, value in update_data.items():
        setattr(model, field, value)

    model.last_modified = datetime.datetime.now(datetime.timezone.utc).replace(
        tzinfo=None
    )
    db.flush()
    db.refresh(model)

    logger.info(
        "Model updated", model_id=model.id, fields=sorted(update_data.keys())
    )

    return model.to_dict()
