"""
An append-only record of one completed comparison between two animations of the same prompt and framework.
"""

from sqlalchemy import (
    TIMESTAMP,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    func,
)

from .._metadata import metadata

vote = Table(
    "votes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column("animation_a_id", Integer, ForeignKey("animations.id"), nullable=False),
    Column("animation_b_id", Integer, ForeignKey("animations.id"), nullable=False),
    # one of ggbench.constants.WINNER
    Column("winner", String, nullable=False),
    CheckConstraint("winner IN ('A', 'B', 'TIE')", name="valid_winner"),
    Index("ix_votes_animation_a_id", "animation_a_id"),
    Index("ix_votes_animation_b_id", "animation_b_id"),
    Index("ix_votes_created", "created"),
    comment=__doc__.strip(),
)
