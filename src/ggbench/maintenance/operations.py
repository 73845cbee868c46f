"""
Administrative operations run from the command line.
"""

from sqlalchemy import delete, select, update

import ggbench.schema.postgres as schema
from ggbench.auth import hash_password
from ggbench.constants import DEFAULT_ELO_SCORE
from ggbench.models.model import FRAMEWORK_COLUMNS
from ggbench.models.user import User
from ggbench.util.logging import get_logger

logger = get_logger(__name__)


def reset_ratings(db, default_score: int = DEFAULT_ELO_SCORE):
    """
    Put every model back at ``default_score`` with empty tallies and drop all votes.

    Votes and tallies are cleared together so that each model's vote count keeps
    matching the number of votes that reference its animations.
    """
    model = schema.specification.model

    values = {}
    for columns in FRAMEWORK_COLUMNS.values():
        values[columns.elo_score] = default_score
        values[columns.wins] = 0
        values[columns.losses] = 0
        values[columns.ties] = 0

    deleted_votes = db.execute(delete(schema.scoring.vote)).rowcount
    reset_models = db.execute(update(model).values(values)).rowcount

    logger.info(
        "Ratings reset",
        models=reset_models,
        deleted_votes=deleted_votes,
        default_score=default_score,
    )

    return reset_models, deleted_votes


def create_admin(db, username: str, password: str) -> User:
    """Create an admin account, or promote and re-password an existing one."""
    username = username.strip()
    if not username:
        raise ValueError("username must have some contents")

    user = db.scalar(select(User).where(User.username_normalized == username.lower()))

    if user is None:
        user = User(
            username=username,
            username_normalized=username.lower(),
            password_hash=hash_password(password),
            is_admin=True,
        )
        db.add(user)
        logger.info("Admin created", username=username)
    else:
        user.password_hash = hash_password(password)
        user.is_admin = True
        logger.info("Existing user promoted to admin", username=user.username)

    db.flush()
    return user
