import datetime
from typing import Dict, List, Optional

from .generic import Base


class StandingResponse(Base):
    elo_score: int
    wins: int
    losses: int
    ties: int
    vote_count: int


class ModelResponse(Base):
    id: int
    created: datetime.datetime
    last_modified: Optional[datetime.datetime] = None
    name: str
    enabled: bool
    api_type: str
    api_endpoint: str
    temperature: float
    max_tokens: int
    standings: Dict[str, StandingResponse]


class ModelCreatedResponse(Base):
    id: int


class PromptResponse(Base):
    id: int
    created: datetime.datetime
    last_modified: Optional[datetime.datetime] = None
    text: str
    status: str
    tags: List[str]
    usage: int


class PromptCreatedResponse(Base):
    id: int


class AnimationModel(Base):
    id: int
    name: str


class AnimationPrompt(Base):
    id: int
    text: str
    tags: List[str]


class AnimationResponse(Base):
    id: int
    created: datetime.datetime
    framework: str
    model: AnimationModel
    prompt: AnimationPrompt
    code: Optional[str] = None


class GenerationResponse(Base):
    animation_id: int
    framework: str
    code: str
    attempts: int
    used_fallback: bool
