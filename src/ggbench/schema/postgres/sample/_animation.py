"""
One generated artifact: the code a model wrote for a prompt in a given framework.

Regenerating replaces the code in place, so there is at most one animation per model, prompt and framework.
"""

from sqlalchemy import (
    TIMESTAMP,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
    func,
)

from .._metadata import metadata

animation = Table(
    "animations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column("model_id", Integer, ForeignKey("models.id"), nullable=False),
    Column("prompt_id", Integer, ForeignKey("prompts.id"), nullable=False),
    # one of ggbench.constants.FRAMEWORK
    Column("framework", String, nullable=False),
    Column("code", String, nullable=False),
    UniqueConstraint(
        "model_id", "prompt_id", "framework", name="unique_animation_per_framework"
    ),
    # pair selection joins animations on prompt within a framework
    Index("ix_animations_framework_prompt", "framework", "prompt_id"),
    Index("ix_animations_model_id", "model_id"),
    comment=__doc__.strip(),
)
