from sqlalchemy.orm import relationship

import ggbench.schema.postgres as schema

from ._base import Base


class Vote(Base):
    __table__ = schema.scoring.vote

    animation_a = relationship(
        "Animation", foreign_keys=[schema.scoring.vote.c.animation_a_id]
    )
    animation_b = relationship(
        "Animation", foreign_keys=[schema.scoring.vote.c.animation_b_id]
    )

    def to_dict(self):
        return {
            "id": self.id,
            "created": self.created,
            "animation_a_id": self.animation_a_id,
            "animation_b_id": self.animation_b_id,
            "winner": self.winner,
        }
