from typing import List

import ggbench.schema.postgres as schema
from ggbench.auth.permissions import ADMIN_SCOPES, USER_SCOPES

from ._base import Base


class User(Base):
    __table__ = schema.auth.user

    @property
    def scopes(self) -> List[str]:
        if self.is_admin:
            return list(ADMIN_SCOPES)
        return list(USER_SCOPES)

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "is_admin": bool(self.is_admin),
        }
