import datetime
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.routing import APIRouter
from sqlalchemy import select
from sqlalchemy.orm import Session

from ggbench.apps.admin_api.config import settings
from ggbench.apps.admin_api.transport_types.generic import ListResponse
from ggbench.apps.admin_api.transport_types.requests import (
    CreatePromptRequest,
    UpdatePromptRequest,
)
from ggbench.apps.admin_api.transport_types.responses import (
    PromptCreatedResponse,
    PromptResponse,
)
from ggbench.auth.permissions import PERM
from ggbench.constants import PROMPT_STATUS
from ggbench.errors import ValidationError
from ggbench.models.prompt import Prompt, Tag, normalize_tags
from ggbench.server.auth import AuthManager
from ggbench.util.logging import get_logger
from ggbench.util.postgres import get_managed_session

logger = get_logger(__name__)

prompt_router = APIRouter()

am = AuthManager(
    jwt_secret=settings.JWT_SECRET_KEY,
    jwt_algorithm=settings.ALGORITHM,
)


def _parse_status(value) -> PROMPT_STATUS:
    try:
        return PROMPT_STATUS(value)
    except ValueError:
        valid = ", ".join(prompt_status.value for prompt_status in PROMPT_STATUS)
        raise ValidationError(f"Invalid prompt status {value!r}. Must be one of: {valid}")


def _ensure_text_available(db: Session, text: str, prompt_id: Optional[int] = None):
    query = select(Prompt.id).where(Prompt.text == text)
    if prompt_id is not None:
        query = query.where(Prompt.id != prompt_id)

    if db.scalar(query) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Prompt already exists",
        )


@prompt_router.get(
    "/api/prompt",
    dependencies=[
        Depends(
            am.require_any_scopes(
                [PERM.PROMPT.ADMIN, PERM.PROMPT.READ, PERM.PROMPT.WRITE]
            )
        ),
    ],
    response_model=ListResponse[PromptResponse],
)
def get_prompts(
    db: Session = Depends(get_managed_session),
    status_filter: Optional[str] = Query(None, alias="status"),
    tag: Optional[str] = None,
):
    query = select(Prompt).order_by(Prompt.created.desc(), Prompt.id.desc())

    if status_filter is not None:
        query = query.where(Prompt.status == _parse_status(status_filter).value)

    if tag:
        normalized = normalize_tags([tag])
        query = query.where(Prompt.tags.any(Tag.name.in_(normalized)))

    prompts = list(db.scalars(query))

    return {
        "data": [prompt.to_dict() for prompt in prompts],
        "total": len(prompts),
    }


@prompt_router.post(
    "/api/prompt",
    dependencies=[
        Depends(am.require_any_scopes([PERM.PROMPT.ADMIN, PERM.PROMPT.WRITE]))
    ],
    response_model=PromptCreatedResponse,
)
def create_prompt(
    request: CreatePromptRequest,
    db: Session = Depends(get_managed_session),
):
    text = request.text.strip()
    if not text:
        raise ValidationError("Prompt text cannot be empty")

    prompt_status = _parse_status(request.status)
    _ensure_text_available(db, text)

    prompt = Prompt(text=text, status=prompt_status.value)
    db.add(prompt)
    prompt.set_tags(request.tags or [])
    db.flush()

    logger.info("Prompt created", prompt_id=prompt.id, status=prompt.status)

    return {
        "id": prompt.id,
    }


@prompt_router.patch(
    "/api/prompt/{prompt_id}",
    dependencies=[
        Depends(am.require_any_scopes([PERM.PROMPT.ADMIN, PERM.PROMPT.WRITE]))
    ],
    response_model=PromptResponse,
)
def update_prompt(
    prompt_id: int,
    request: UpdatePromptRequest,
    db: Session = Depends(get_managed_session),
):
    prompt = db.get(Prompt, prompt_id)

    if not prompt:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Prompt with id {prompt_id} not found",
        )

    update_data = request.model_dump(exclude_unset=True)

    if update_data.get("text") is not None:
        text = update_data["text"].strip()
        if not text:
            raise ValidationError("Prompt text cannot be empty")
        _ensure_text_available(db, text, prompt_id=prompt.id)
        prompt.text = text

    if update_data.get("status") is not None:
        prompt.status = _parse_status(update_data["status"]).value

    if "tags" in update_data:
        prompt.set_tags(update_data["tags"] or [])

    prompt.last_modified = datetime.datetime.now(datetime.timezone.utc).replace(
        tzinfo=None
    )
    db.flush()
    db.refresh(prompt)

    logger.info("Prompt updated", prompt_id=prompt.id)

    return prompt.to_dict()
