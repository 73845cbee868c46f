"""
Rating updates driven by votes.

A vote is recorded and both models' framework standings are updated in the
same transaction. Model rows are locked in ascending id order before the
read-modify-write so that concurrent votes touching the same model serialize
instead of losing updates.
"""

from dataclasses import dataclass
from typing import Optional

import sqlalchemy.exc
from sqlalchemy import select, update

import ggbench.schema.postgres as schema
from ggbench.constants import FRAMEWORK, WINNER
from ggbench.errors import NotFound, PersistenceConflict, ValidationError
from ggbench.models.model import FRAMEWORK_COLUMNS
from ggbench.models.vote import Vote
from ggbench.util.cache import Cache
from ggbench.util.elo import K_FACTOR, Outcome, apply_result
from ggbench.util.logging import get_logger
from ggbench.util.postgres import is_conflict_error, managed_session

from .leaderboard import leaderboard_cache_key

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class RatingChange:
    model_id: int
    name: str
    old_rating: int
    new_rating: int
    wins: int
    losses: int
    ties: int

    def to_dict(self):
        return {
            "id": self.model_id,
            "name": self.name,
            "old_rating": self.old_rating,
            "new_rating": self.new_rating,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
        }


@dataclass(frozen=True)
class VoteResult:
    vote_id: int
    framework: FRAMEWORK
    winner: WINNER
    model_a: RatingChange
    model_b: RatingChange

    def to_dict(self):
        return {
            "vote_id": self.vote_id,
            "framework": self.framework.value,
            "winner": self.winner.value,
            "model_a": self.model_a.to_dict(),
            "model_b": self.model_b.to_dict(),
        }


def parse_winner(token) -> WINNER:
    if token is None or token == "":
        raise ValidationError("Missing required field: winner")

    try:
        return WINNER(token)
    except ValueError:
        raise ValidationError(
            f"Invalid winner value {token!r}. Must be one of: A, B, TIE"
        )


def parse_framework(value) -> FRAMEWORK:
    try:
        return FRAMEWORK(value)
    except ValueError:
        valid = ", ".join(framework.value for framework in FRAMEWORK)
        raise ValidationError(f"Invalid framework {value!r}. Must be one of: {valid}")


def parse_animation_id(value, field_name) -> int:
    if value is None:
        raise ValidationError(f"Missing required field: {field_name}")

    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid animation id for {field_name}: {value!r}")

    return value


def _tally(wins, losses, ties, score):
    if score == 1.0:
        return wins + 1, losses, ties
    elif score == 0.0:
        return wins, losses + 1, ties
    else:
        return wins, losses, ties + 1


def apply_vote(
    db,
    animation_a_id,
    animation_b_id,
    winner,
    k_factor: float = K_FACTOR,
) -> VoteResult:
    """
    Record one vote and update both models' standings inside the caller's transaction.

    Raises NotFound when either animation (or its model) is missing and
    ValidationError for malformed input or a pair that could never have been
    presented (same animation, same model, different prompt or framework).
    Nothing is written unless every check passes.
    """
    animation_a_id = parse_animation_id(animation_a_id, "animationAId")
    animation_b_id = parse_animation_id(animation_b_id, "animationBId")
    winner = parse_winner(winner) if not isinstance(winner, WINNER) else winner

    if animation_a_id == animation_b_id:
        raise ValidationError("An animation cannot be compared with itself")

    animation = schema.sample.animation
    animations = {
        row.id: row
        for row in db.execute(
            select(
                animation.c.id,
                animation.c.model_id,
                animation.c.prompt_id,
                animation.c.framework,
            ).where(animation.c.id.in_([animation_a_id, animation_b_id]))
        )
    }

    missing = [
        animation_id
        for animation_id in (animation_a_id, animation_b_id)
        if animation_id not in animations
    ]
    if missing:
        raise NotFound(f"Animation(s) not found: {', '.join(map(str, missing))}")

    animation_a = animations[animation_a_id]
    animation_b = animations[animation_b_id]

    if animation_a.prompt_id != animation_b.prompt_id:
        raise ValidationError("Animations must belong to the same prompt")

    if animation_a.framework != animation_b.framework:
        raise ValidationError("Animations must use the same framework")

    if animation_a.model_id == animation_b.model_id:
        raise ValidationError("Animations must come from different models")

    framework = FRAMEWORK(animation_a.framework)
    columns = FRAMEWORK_COLUMNS[framework]
    model = schema.specification.model

    standings = {
        row.id: row
        for row in db.execute(
            select(
                model.c.id,
                model.c.name,
                columns.elo_score.label("elo_score"),
                columns.wins.label("wins"),
                columns.losses.label("losses"),
                columns.ties.label("ties"),
            )
            .where(model.c.id.in_([animation_a.model_id, animation_b.model_id]))
            .order_by(model.c.id)
            .with_for_update()
        )
    }

    if len(standings) != 2:
        raise NotFound("Model(s) for the compared animations not found")

    standing_a = standings[animation_a.model_id]
    standing_b = standings[animation_b.model_id]

    outcome = Outcome.from_winner(winner)
    new_rating_a, new_rating_b = apply_result(
        standing_a.elo_score, standing_b.elo_score, outcome, k_factor
    )

    changes = []
    for standing, new_rating, score in (
        (standing_a, new_rating_a, outcome.score_a),
        (standing_b, new_rating_b, outcome.score_b),
    ):
        wins, losses, ties = _tally(
            standing.wins, standing.losses, standing.ties, score
        )
        db.execute(
            update(model)
            .where(model.c.id == standing.id)
            .values(
                {
                    columns.elo_score: new_rating,
                    columns.wins: wins,
                    columns.losses: losses,
                    columns.ties: ties,
                }
            )
        )
        changes.append(
            RatingChange(
                model_id=standing.id,
                name=standing.name,
                old_rating=standing.elo_score,
                new_rating=new_rating,
                wins=wins,
                losses=losses,
                ties=ties,
            )
        )

    vote = Vote(
        animation_a_id=animation_a_id,
        animation_b_id=animation_b_id,
        winner=winner.value,
    )
    db.add(vote)
    db.flush()

    logger.info(
        "Vote applied",
        vote_id=vote.id,
        framework=framework.value,
        winner=winner.value,
        model_a_id=changes[0].model_id,
        model_b_id=changes[1].model_id,
        model_a_rating=f"{changes[0].old_rating}->{changes[0].new_rating}",
        model_b_rating=f"{changes[1].old_rating}->{changes[1].new_rating}",
    )

    return VoteResult(
        vote_id=vote.id,
        framework=framework,
        winner=winner,
        model_a=changes[0],
        model_b=changes[1],
    )


def record_vote(
    animation_a_id,
    animation_b_id,
    winner,
    session_factory=None,
    cache: Optional[Cache] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    k_factor: float = K_FACTOR,
) -> VoteResult:
    """
    Apply a vote in its own transaction, retrying on serialization failures and deadlocks.

    Raises PersistenceConflict when every attempt conflicted.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            with managed_session(session_factory) as db:
                result = apply_vote(
                    db, animation_a_id, animation_b_id, winner, k_factor=k_factor
                )
            break
        except sqlalchemy.exc.DBAPIError as error:
            if not is_conflict_error(error):
                raise
            logger.warning(
                "Vote conflicted with a concurrent write",
                attempt=attempt,
                max_attempts=max_attempts,
            )
    else:
        raise PersistenceConflict(
            f"Vote could not be recorded after {max_attempts} attempts"
        )

    if cache is not None:
        cache.delete(leaderboard_cache_key(result.framework))

    return result
