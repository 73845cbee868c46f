from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.orm import Mapped, object_session, relationship

import ggbench.schema.postgres as schema

from ._base import Base


class Tag(Base):
    __table__ = schema.specification.tag

    prompts: Mapped[List["Prompt"]] = relationship(  # noqa: F821
        "Prompt",
        uselist=True,
        back_populates="tags",
        secondary=schema.specification.prompt_tag,
        viewonly=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
        }


class Prompt(Base):
    __table__ = schema.specification.prompt

    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        uselist=True,
        back_populates="prompts",
        secondary=schema.specification.prompt_tag,
        lazy="selectin",
    )

    animations: Mapped[List["Animation"]] = relationship(  # noqa: F821
        "Animation", uselist=True, back_populates="prompt"
    )

    def set_tags(self, names: Iterable[str]):
        session = object_session(self)
        self.tags = get_or_create_tags(session, names)

    def to_dict(self):
        return {
            "id": self.id,
            "created": self.created,
            "last_modified": self.last_modified,
            "text": self.text,
            "status": self.status,
            "tags": sorted(tag.name for tag in self.tags),
            "usage": self.usage,
        }

    @property
    def usage(self):
        """Number of animations generated for this prompt."""
        session = object_session(self)
        return session.scalar(
            select(func.count(1)).where(schema.sample.animation.c.prompt_id == self.id)
        )


def normalize_tags(names: Iterable[str]) -> List[str]:
    """Lowercase, strip and de-duplicate tag names, keeping first-seen order."""
    seen = []
    for name in names:
        normalized = name.strip().lower()
        if normalized and normalized not in seen:
            seen.append(normalized)
    return seen


def get_or_create_tags(db, names: Iterable[str]) -> List[Tag]:
    normalized = normalize_tags(names)
    if not normalized:
        return []

    existing = {
        tag.name: tag for tag in db.scalars(select(Tag).where(Tag.name.in_(normalized)))
    }

    tags = []
    for name in normalized:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
        tags.append(tag)

    return tags
