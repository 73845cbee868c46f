"""
Animation generation: ask a model for code, validate it, store it.

The database session used to read the model and prompt is closed before the
LLM call starts and a fresh one is opened to store the result, so no
connection is held while waiting on the upstream endpoint.
"""

import datetime
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import sqlalchemy.exc
from sqlalchemy import select

from ggbench.clients.openai import OpenAICompatibleClient
from ggbench.constants import FRAMEWORK
from ggbench.errors import NotFound
from ggbench.models.animation import Animation
from ggbench.models.model import Model
from ggbench.models.prompt import Prompt
from ggbench.util.logging import get_logger
from ggbench.util.postgres import managed_session
from ggbench.util.text import extract_code

from .templates import TEMPLATES, build_prompt

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class GenerationSettings:
    model_id: int
    model_name: str
    api_endpoint: str
    api_key: str
    temperature: float
    max_tokens: int
    additional_headers: Optional[dict] = None


@dataclass(frozen=True)
class GeneratedCode:
    code: str
    attempts: int
    used_fallback: bool


@dataclass(frozen=True)
class GenerationResult:
    animation_id: int
    framework: FRAMEWORK
    code: str
    attempts: int
    used_fallback: bool

    def to_dict(self):
        return {
            "animation_id": self.animation_id,
            "framework": self.framework.value,
            "code": self.code,
            "attempts": self.attempts,
            "used_fallback": self.used_fallback,
        }


def client_for(
    settings: GenerationSettings, timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> OpenAICompatibleClient:
    return OpenAICompatibleClient(
        base_url=settings.api_endpoint,
        api_key=settings.api_key,
        timeout=timeout,
        default_headers=settings.additional_headers,
    )


def load_generation_request(db, model_id, prompt_id) -> Tuple[GenerationSettings, str]:
    model = db.scalar(select(Model).where(Model.id == model_id, Model.enabled.is_(True)))
    if model is None:
        raise NotFound("Model not found or disabled")

    prompt = db.scalar(select(Prompt).where(Prompt.id == prompt_id))
    if prompt is None:
        raise NotFound("Prompt not found")

    settings = GenerationSettings(
        model_id=model.id,
        model_name=model.name,
        api_endpoint=model.api_endpoint,
        api_key=model.api_key,
        temperature=model.temperature,
        max_tokens=model.max_tokens,
        additional_headers=model.additional_headers or None,
    )
    return settings, prompt.text


def generate_code(
    client,
    settings: GenerationSettings,
    description: str,
    framework: FRAMEWORK,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> GeneratedCode:
    """
    Ask the model for code until it passes the framework check.

    After ``max_attempts`` invalid responses the framework's fallback snippet
    is returned. Transport failures are not retried here; they surface as
    UpstreamUnavailable from the client.
    """
    template = TEMPLATES[framework]
    prompt = build_prompt(framework, description)

    for attempt in range(1, max_attempts + 1):
        raw = client.send_prompt(
            model=settings.model_name,
            prompt=prompt,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )
        code = template.finalize(extract_code(raw))

        if template.is_valid(code):
            logger.info(
                "Generated animation code",
                model=settings.model_name,
                framework=framework.value,
                attempt=attempt,
            )
            return GeneratedCode(code=code, attempts=attempt, used_fallback=False)

        logger.warning(
            "Generated code failed validation",
            model=settings.model_name,
            framework=framework.value,
            attempt=attempt,
            max_attempts=max_attempts,
        )

    return GeneratedCode(
        code=template.fallback, attempts=max_attempts, used_fallback=True
    )


def find_animation(db, model_id, prompt_id, framework: FRAMEWORK) -> Optional[Animation]:
    return db.scalar(
        select(Animation).where(
            Animation.model_id == model_id,
            Animation.prompt_id == prompt_id,
            Animation.framework == framework.value,
        )
    )


def _replace_code(db, animation, code):
    animation.code = code
    animation.created = datetime.datetime.now(datetime.timezone.utc).replace(
        tzinfo=None
    )
    db.flush()
    return animation


def save_animation(db, model_id, prompt_id, framework: FRAMEWORK, code) -> Animation:
    """
    Insert the animation, or replace the code of the existing one for this
    model, prompt and framework.

    A concurrent generation can insert the same row between the lookup and the
    insert; the insert runs in a savepoint so that case falls back to an update.
    """
    animation = find_animation(db, model_id, prompt_id, framework)
    if animation is not None:
        return _replace_code(db, animation, code)

    animation = Animation(
        model_id=model_id,
        prompt_id=prompt_id,
        framework=framework.value,
        code=code,
    )
    try:
        with db.begin_nested():
            db.add(animation)
            db.flush()
    except sqlalchemy.exc.IntegrityError:
        logger.info(
            "Animation inserted concurrently, updating instead",
            model_id=model_id,
            prompt_id=prompt_id,
            framework=framework.value,
        )
        return _replace_code(
            db, find_animation(db, model_id, prompt_id, framework), code
        )

    return animation


def generate_animation(
    model_id,
    prompt_id,
    framework: FRAMEWORK,
    session_factory=None,
    client_factory: Optional[Callable] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> GenerationResult:
    with managed_session(session_factory) as db:
        settings, description = load_generation_request(db, model_id, prompt_id)

    client = (client_factory or client_for)(settings, timeout)
    generated = generate_code(
        client, settings, description, framework, max_attempts=max_attempts
    )

    with managed_session(session_factory) as db:
        animation = save_animation(
            db, settings.model_id, prompt_id, framework, generated.code
        )
        animation_id = animation.id

    return GenerationResult(
        animation_id=animation_id,
        framework=framework,
        code=generated.code,
        attempts=generated.attempts,
        used_fallback=generated.used_fallback,
    )
