"""
A text description of an animation that every model is asked to produce.
"""

from sqlalchemy import TIMESTAMP, Column, Integer, String, Table, func, text

from .._metadata import metadata

prompt = Table(
    "prompts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column("last_modified", TIMESTAMP(timezone=False), nullable=True),
    Column("text", String, unique=True, nullable=False),
    # one of ggbench.constants.PROMPT_STATUS
    Column(
        "status",
        String,
        nullable=False,
        default="active",
        server_default=text("'active'"),
    ),
    comment=__doc__.strip(),
)
