from sqlalchemy import TIMESTAMP, Column, Integer, String, Table, func

from .._metadata import metadata

tag = Table(
    "tags",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column("name", String, unique=True, nullable=False),
)
