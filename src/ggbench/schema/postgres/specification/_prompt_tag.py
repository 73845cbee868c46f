from sqlalchemy import Column, ForeignKey, Integer, Table, UniqueConstraint

from .._metadata import metadata

prompt_tag = Table(
    "prompt_tags",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "prompt_id",
        Integer,
        ForeignKey("prompts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("tag_id", Integer, ForeignKey("tags.id"), nullable=False),
    UniqueConstraint("prompt_id", "tag_id", name="unique_prompt_tag"),
)
