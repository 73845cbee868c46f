from sqlalchemy.orm import relationship

import ggbench.schema.postgres as schema

from ._base import Base


class Animation(Base):
    __table__ = schema.sample.animation

    model = relationship("Model", back_populates="animations", lazy="joined")
    prompt = relationship("Prompt", back_populates="animations", lazy="joined")

    def to_dict(self, include_code=True):
        ret = {
            "id": self.id,
            "created": self.created,
            "framework": self.framework,
            "model": {"id": self.model.id, "name": self.model.name},
            "prompt": {
                "id": self.prompt.id,
                "text": self.prompt.text,
                "tags": sorted(tag.name for tag in self.prompt.tags),
            },
        }

        if include_code:
            ret["code"] = self.code

        return ret
