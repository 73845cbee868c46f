"""
A registered account. Voting is anonymous; accounts exist to submit prompts and to administer the benchmark.
"""

from sqlalchemy import TIMESTAMP, Boolean, Column, Integer, String, Table, func, text

from .._metadata import metadata

user = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column("username", String, unique=True, nullable=False),
    Column("username_normalized", String, unique=True, nullable=False),
    Column("password_hash", String, nullable=False),
    Column(
        "is_admin", Boolean, nullable=False, default=False, server_default=text("false")
    ),
    comment=__doc__.strip(),
)
