from typing import Dict, List, Optional

from .generic import Base


class CreateModelRequest(Base):
    name: str
    api_endpoint: str
    api_key: str
    api_type: str = "openai"
    temperature: float = 0.7
    max_tokens: int = 4000
    additional_headers: Optional[Dict[str, str]] = None
    enabled: bool = True


class UpdateModelRequest(Base):
    name: Optional[str] = None
    api_endpoint: Optional[str] = None
    api_key: Optional[str] = None
    api_type: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    additional_headers: Optional[Dict[str, str]] = None
    enabled: Optional[bool] = None


class CreatePromptRequest(Base):
    text: str
    tags: Optional[List[str]] = None
    status: str = "active"


class UpdatePromptRequest(Base):
    text: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = None


class GenerationRequest(Base):
    model_id: int
    prompt_id: int
    framework: str = "p5js"
