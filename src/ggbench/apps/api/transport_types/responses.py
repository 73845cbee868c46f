import datetime
from typing import List, Optional

from .generic import Base


class ModelReference(Base):
    id: int
    name: str


class ComparisonSideResponse(Base):
    id: int
    code: str
    framework: str
    model: ModelReference


class ComparisonResponse(Base):
    id: str
    prompt: str
    framework: str
    animation_a: ComparisonSideResponse
    animation_b: ComparisonSideResponse


class RatingChangeResponse(Base):
    id: int
    name: str
    framework: str
    old_rating: int
    new_rating: int
    wins: int
    losses: int
    ties: int


class EloUpdateResponse(Base):
    model_a: RatingChangeResponse
    model_b: RatingChangeResponse


class VoteResponse(Base):
    success: bool
    vote_id: int
    elo_update: EloUpdateResponse


class LeaderboardEntryResponse(Base):
    """Model standing within one framework."""

    rank: int
    id: int
    name: str
    elo_score: int
    wins: int
    losses: int
    ties: int
    total_votes: int
    win_rate: float
    trend: str


class UserResponse(Base):
    id: int
    username: str
    is_admin: bool


class LoginResponse(Base):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class SignupResponse(LoginResponse):
    pass


class PromptSubmittedResponse(Base):
    id: int
    text: str
    status: str
    tags: List[str]
    created: Optional[datetime.datetime] = None
