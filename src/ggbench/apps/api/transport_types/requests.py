from typing import List, Optional

from .generic import Base


class VoteRequest(Base):
    # left optional so that missing fields are reported by the rating engine
    animation_a_id: Optional[int] = None
    animation_b_id: Optional[int] = None
    winner: Optional[str] = None


class SignupRequest(Base):
    username: str
    password: str


class LoginRequest(Base):
    username: str
    password: str


class SubmitPromptRequest(Base):
    text: str
    tags: Optional[List[str]] = None
