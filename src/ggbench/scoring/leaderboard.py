"""
Read projection of enabled models' framework standings.

Results may be cached for a bounded TTL. The untagged leaderboard of a
framework is invalidated whenever a vote in that framework is recorded;
tag-filtered variants simply expire.
"""

from typing import List, Optional

from sqlalchemy import and_, exists, select

import ggbench.schema.postgres as schema
from ggbench.constants import DEFAULT_ELO_SCORE, FRAMEWORK, TREND
from ggbench.models.model import FRAMEWORK_COLUMNS
from ggbench.models.prompt import normalize_tags
from ggbench.util.cache import Cache, cached_json

DEFAULT_CACHE_TTL_SECONDS = 60


def leaderboard_cache_key(framework: FRAMEWORK, tag: Optional[str] = None) -> str:
    return f"leaderboard:{framework.value}:{tag or '*'}"


def win_rate(wins: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(wins / total * 100, 1)


def trend(elo_score: int) -> str:
    if elo_score > DEFAULT_ELO_SCORE:
        return TREND.UP.value
    elif elo_score < DEFAULT_ELO_SCORE:
        return TREND.DOWN.value
    return TREND.STABLE.value


def _tag_filter(framework: FRAMEWORK, tag: str):
    model = schema.specification.model
    animation = schema.sample.animation
    prompt_tag = schema.specification.prompt_tag
    tag_table = schema.specification.tag

    return exists(
        select(animation.c.id)
        .select_from(
            animation.join(
                prompt_tag, prompt_tag.c.prompt_id == animation.c.prompt_id
            ).join(tag_table, tag_table.c.id == prompt_tag.c.tag_id)
        )
        .where(
            and_(
                animation.c.model_id == model.c.id,
                animation.c.framework == framework.value,
                tag_table.c.name == tag,
            )
        )
    )


def query_leaderboard(db, framework: FRAMEWORK, tag: Optional[str] = None) -> List[dict]:
    model = schema.specification.model
    columns = FRAMEWORK_COLUMNS[framework]

    query = (
        select(
            model.c.id,
            model.c.name,
            columns.elo_score.label("elo_score"),
            columns.wins.label("wins"),
            columns.losses.label("losses"),
            columns.ties.label("ties"),
        )
        .where(model.c.enabled.is_(True))
        .order_by(columns.elo_score.desc(), columns.wins.desc(), model.c.name)
    )

    if tag:
        query = query.where(_tag_filter(framework, tag))

    entries = []
    for rank, row in enumerate(db.execute(query), start=1):
        total = row.wins + row.losses + row.ties
        entries.append(
            {
                "rank": rank,
                "id": row.id,
                "name": row.name,
                "elo_score": row.elo_score,
                "wins": row.wins,
                "losses": row.losses,
                "ties": row.ties,
                "total_votes": total,
                "win_rate": win_rate(row.wins, total),
                "trend": trend(row.elo_score),
            }
        )

    return entries


def get_leaderboard(
    db,
    framework: FRAMEWORK,
    tag: Optional[str] = None,
    cache: Optional[Cache] = None,
    ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
) -> List[dict]:
    if tag:
        normalized = normalize_tags([tag])
        tag = normalized[0] if normalized else None

    return cached_json(
        cache,
        leaderboard_cache_key(framework, tag),
        ttl_seconds,
        lambda: query_leaderboard(db, framework, tag),
    )
