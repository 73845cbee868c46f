"""
Selection of the next comparison to show a voter.

A candidate is an unordered pair of animations for the same prompt and
framework, produced by two different enabled models, that no vote references
yet (in either order). Once any vote exists for a pair it is never offered
again, ties included. Concurrent requests may be handed the same pair; both
votes are still accepted.
"""

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from sqlalchemy import and_, exists, or_, select

import ggbench.schema.postgres as schema
from ggbench.constants import FRAMEWORK
from ggbench.errors import NotFound
from ggbench.models.model import FRAMEWORK_COLUMNS
from ggbench.util.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComparisonSide:
    animation_id: int
    code: str
    model_id: int
    model_name: str

    def to_dict(self):
        return {
            "id": self.animation_id,
            "code": self.code,
            "model": {"id": self.model_id, "name": self.model_name},
        }


@dataclass(frozen=True)
class Comparison:
    prompt_id: int
    prompt: str
    framework: FRAMEWORK
    animation_a: ComparisonSide
    animation_b: ComparisonSide

    @property
    def id(self):
        return f"{self.animation_a.animation_id}-{self.animation_b.animation_id}"

    def to_dict(self):
        return {
            "id": self.id,
            "prompt": self.prompt,
            "framework": self.framework.value,
            "animation_a": {
                **self.animation_a.to_dict(),
                "framework": self.framework.value,
            },
            "animation_b": {
                **self.animation_b.to_dict(),
                "framework": self.framework.value,
            },
        }


@dataclass(frozen=True)
class CandidatePair:
    animation_a_id: int
    animation_b_id: int
    model_a_id: int
    model_b_id: int


def candidate_pairs_query(framework: FRAMEWORK):
    animation = schema.sample.animation
    model = schema.specification.model
    vote = schema.scoring.vote

    a1 = animation.alias("a1")
    a2 = animation.alias("a2")
    m1 = model.alias("m1")
    m2 = model.alias("m2")

    already_voted = exists().where(
        or_(
            and_(vote.c.animation_a_id == a1.c.id, vote.c.animation_b_id == a2.c.id),
            and_(vote.c.animation_a_id == a2.c.id, vote.c.animation_b_id == a1.c.id),
        )
    )

    return (
        select(
            a1.c.id.label("animation_a_id"),
            a2.c.id.label("animation_b_id"),
            a1.c.model_id.label("model_a_id"),
            a2.c.model_id.label("model_b_id"),
        )
        .select_from(
            a1.join(
                a2,
                and_(
                    a1.c.prompt_id == a2.c.prompt_id,
                    a1.c.framework == a2.c.framework,
                    # canonical order only de-duplicates unordered pairs
                    a1.c.id < a2.c.id,
                ),
            )
            .join(m1, m1.c.id == a1.c.model_id)
            .join(m2, m2.c.id == a2.c.model_id)
        )
        .where(
            a1.c.framework == framework.value,
            a1.c.model_id != a2.c.model_id,
            m1.c.enabled.is_(True),
            m2.c.enabled.is_(True),
            ~already_voted,
        )
        .order_by(a1.c.id, a2.c.id)
    )


def find_candidate_pairs(db, framework: FRAMEWORK) -> List[CandidatePair]:
    return [
        CandidatePair(
            animation_a_id=row.animation_a_id,
            animation_b_id=row.animation_b_id,
            model_a_id=row.model_a_id,
            model_b_id=row.model_b_id,
        )
        for row in db.execute(candidate_pairs_query(framework))
    ]


def model_vote_counts(db, framework: FRAMEWORK, model_ids) -> dict:
    model = schema.specification.model
    columns = FRAMEWORK_COLUMNS[framework]

    return {
        row.id: row.vote_count
        for row in db.execute(
            select(
                model.c.id,
                (columns.wins + columns.losses + columns.ties).label("vote_count"),
            ).where(model.c.id.in_(list(model_ids)))
        )
    }


def least_exposed(
    candidates: Sequence[CandidatePair], vote_counts: dict
) -> List[CandidatePair]:
    """Keep only the candidates whose two models have the fewest combined votes."""

    def exposure(candidate):
        return vote_counts.get(candidate.model_a_id, 0) + vote_counts.get(
            candidate.model_b_id, 0
        )

    lowest = min(exposure(candidate) for candidate in candidates)
    return [candidate for candidate in candidates if exposure(candidate) == lowest]


def load_comparison(
    db, framework: FRAMEWORK, animation_a_id: int, animation_b_id: int
) -> Comparison:
    animation = schema.sample.animation
    model = schema.specification.model
    prompt = schema.specification.prompt

    rows = {
        row.animation_id: row
        for row in db.execute(
            select(
                animation.c.id.label("animation_id"),
                animation.c.code,
                model.c.id.label("model_id"),
                model.c.name.label("model_name"),
                prompt.c.id.label("prompt_id"),
                prompt.c.text.label("prompt_text"),
            )
            .select_from(
                animation.join(model, model.c.id == animation.c.model_id).join(
                    prompt, prompt.c.id == animation.c.prompt_id
                )
            )
            .where(animation.c.id.in_([animation_a_id, animation_b_id]))
        )
    }

    if animation_a_id not in rows or animation_b_id not in rows:
        raise NotFound("Selected animations disappeared before they could be loaded")

    def side(row):
        return ComparisonSide(
            animation_id=row.animation_id,
            code=row.code,
            model_id=row.model_id,
            model_name=row.model_name,
        )

    row_a = rows[animation_a_id]
    return Comparison(
        prompt_id=row_a.prompt_id,
        prompt=row_a.prompt_text,
        framework=framework,
        animation_a=side(row_a),
        animation_b=side(rows[animation_b_id]),
    )


def next_pair(
    db,
    framework: FRAMEWORK,
    balance_exposure: bool = True,
    rng: Optional[random.Random] = None,
) -> Optional[Comparison]:
    """
    Pick the next comparison for ``framework``, or None when every pair has been voted on.

    With ``balance_exposure`` the choice is restricted to the pairs whose
    models have the fewest combined votes in this framework before picking at
    random. The lower animation id is always side A.
    """
    rng = rng or random

    candidates = find_candidate_pairs(db, framework)
    if not candidates:
        logger.info("No comparisons available", framework=framework.value)
        return None

    if balance_exposure:
        model_ids = {c.model_a_id for c in candidates} | {
            c.model_b_id for c in candidates
        }
        candidates = least_exposed(
            candidates, model_vote_counts(db, framework, model_ids)
        )

    chosen = rng.choice(candidates)
    logger.debug(
        "Selected comparison",
        framework=framework.value,
        animation_a_id=chosen.animation_a_id,
        animation_b_id=chosen.animation_b_id,
        candidate_count=len(candidates),
    )

    return load_comparison(db, framework, chosen.animation_a_id, chosen.animation_b_id)
