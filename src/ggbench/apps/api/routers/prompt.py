from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from ggbench.apps.api.config import settings
from ggbench.auth.permissions import PERM
from ggbench.constants import PROMPT_STATUS
from ggbench.models.prompt import Prompt
from ggbench.server.auth import AuthManager
from ggbench.util.logging import get_logger
from ggbench.util.postgres import get_managed_session

from ..transport_types.requests import SubmitPromptRequest
from ..transport_types.responses import PromptSubmittedResponse

logger = get_logger(__name__)

prompt_router = APIRouter()

am = AuthManager(
    jwt_secret=settings.JWT_SECRET_KEY,
    jwt_algorithm=settings.ALGORITHM,
)


@prompt_router.post(
    "/api/prompt/submit",
    dependencies=[Depends(am.require_any_scopes([PERM.PROMPT.SUBMIT]))],
    response_model=PromptSubmittedResponse,
)
def submit_prompt(
    request: SubmitPromptRequest,
    user_id: int = Depends(am.get_current_user_id),
    db: Session = Depends(get_managed_session),
):
    text = request.text.strip()
    if not text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Prompt text cannot be empty",
        )

    if db.scalar(select(Prompt.id).where(Prompt.text == text)) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Prompt already exists",
        )

    # submissions wait for an admin to activate them
    prompt = Prompt(text=text, status=PROMPT_STATUS.INACTIVE.value)
    db.add(prompt)
    prompt.set_tags(request.tags or [])
    db.flush()
    db.refresh(prompt)

    logger.info("Prompt submitted", prompt_id=prompt.id, user_id=user_id)

    return {
        "id": prompt.id,
        "text": prompt.text,
        "status": prompt.status,
        "tags": sorted(tag.name for tag in prompt.tags),
        "created": prompt.created,
    }
