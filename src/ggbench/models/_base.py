from sqlalchemy.orm import DeclarativeBase

from ggbench.schema.postgres import metadata


class Base(DeclarativeBase):
    metadata = metadata
