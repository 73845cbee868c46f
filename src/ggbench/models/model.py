from dataclasses import dataclass
from typing import Dict, List, NamedTuple

from sqlalchemy import Column
from sqlalchemy.orm import Mapped, relationship

import ggbench.schema.postgres as schema
from ggbench.constants import FRAMEWORK

from ._base import Base


class FrameworkColumns(NamedTuple):
    elo_score: Column
    wins: Column
    losses: Column
    ties: Column


_model = schema.specification.model

FRAMEWORK_COLUMNS: Dict[FRAMEWORK, FrameworkColumns] = {
    FRAMEWORK.P5JS: FrameworkColumns(
        elo_score=_model.c.p5js_elo_score,
        wins=_model.c.p5js_wins,
        losses=_model.c.p5js_losses,
        ties=_model.c.p5js_ties,
    ),
    FRAMEWORK.THREEJS: FrameworkColumns(
        elo_score=_model.c.threejs_elo_score,
        wins=_model.c.threejs_wins,
        losses=_model.c.threejs_losses,
        ties=_model.c.threejs_ties,
    ),
    FRAMEWORK.SVG: FrameworkColumns(
        elo_score=_model.c.svg_elo_score,
        wins=_model.c.svg_wins,
        losses=_model.c.svg_losses,
        ties=_model.c.svg_ties,
    ),
}


@dataclass(frozen=True)
class Standing:
    """A model's rating and tallies within one framework."""

    elo_score: int
    wins: int
    losses: int
    ties: int

    @property
    def vote_count(self):
        return self.wins + self.losses + self.ties

    def to_dict(self):
        return {
            "elo_score": self.elo_score,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "vote_count": self.vote_count,
        }


class Model(Base):
    __table__ = schema.specification.model

    animations: Mapped[List["Animation"]] = relationship(  # noqa: F821
        "Animation",
        uselist=True,
        back_populates="model",
    )

    def standing(self, framework: FRAMEWORK) -> Standing:
        columns = FRAMEWORK_COLUMNS[framework]
        return Standing(
            elo_score=getattr(self, columns.elo_score.key),
            wins=getattr(self, columns.wins.key),
            losses=getattr(self, columns.losses.key),
            ties=getattr(self, columns.ties.key),
        )

    def to_dict(self, include_standings=True):
        ret = {
            "id": self.id,
            "created": self.created,
            "last_modified": self.last_modified,
            "name": self.name,
            "enabled": bool(self.enabled),
            "api_type": self.api_type,
            "api_endpoint": self.api_endpoint,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        if include_standings:
            ret["standings"] = {
                framework.value: self.standing(framework).to_dict()
                for framework in FRAMEWORK
            }

        return ret
