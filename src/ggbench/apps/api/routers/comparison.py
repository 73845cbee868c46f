from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ggbench.apps.api.config import settings
from ggbench.scoring.leaderboard import get_leaderboard
from ggbench.scoring.pairing import next_pair
from ggbench.scoring.rating import parse_framework, record_vote
from ggbench.server.dependencies import get_cache
from ggbench.util.cache import Cache
from ggbench.util.logging import get_logger
from ggbench.util.postgres import get_managed_session, get_sessionmaker

from ..transport_types.requests import VoteRequest
from ..transport_types.responses import (
    ComparisonResponse,
    LeaderboardEntryResponse,
    VoteResponse,
)

logger = get_logger(__name__)
comparison_router = APIRouter()

NO_STORE = "no-store, max-age=0"


@comparison_router.get("/api/voting/next", response_model=ComparisonResponse)
def get_next_comparison(
    response: Response,
    framework: str = Query("p5js"),
    db: Session = Depends(get_managed_session),
):
    response.headers["Cache-Control"] = NO_STORE
    framework = parse_framework(framework)

    comparison = next_pair(db, framework, balance_exposure=settings.PAIR_BALANCING)
    if comparison is None:
        logger.info("No comparisons left", framework=framework.value)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "No more comparisons available"},
            headers={"Cache-Control": NO_STORE},
        )

    return comparison.to_dict()


@comparison_router.post("/api/voting/vote", response_model=VoteResponse)
def post_vote(
    request: VoteRequest,
    response: Response,
    session_factory=Depends(get_sessionmaker),
    cache: Optional[Cache] = Depends(get_cache),
):
    response.headers["Cache-Control"] = NO_STORE

    result = record_vote(
        request.animation_a_id,
        request.animation_b_id,
        request.winner,
        session_factory=session_factory,
        cache=cache,
        max_attempts=settings.VOTE_MAX_ATTEMPTS,
        k_factor=settings.ELO_K_FACTOR,
    )

    logger.info(
        "Vote recorded",
        vote_id=result.vote_id,
        framework=result.framework.value,
        winner=result.winner.value,
    )

    return {
        "success": True,
        "vote_id": result.vote_id,
        "elo_update": {
            "model_a": {
                **result.model_a.to_dict(),
                "framework": result.framework.value,
            },
            "model_b": {
                **result.model_b.to_dict(),
                "framework": result.framework.value,
            },
        },
    }


@comparison_router.get(
    "/api/leaderboard", response_model=List[LeaderboardEntryResponse]
)
def get_leaderboard_entries(
    framework: str = Query("p5js"),
    tag: Optional[str] = Query(None),
    db: Session = Depends(get_managed_session),
    cache: Optional[Cache] = Depends(get_cache),
):
    framework = parse_framework(framework)

    return get_leaderboard(
        db,
        framework,
        tag=tag,
        cache=cache,
        ttl_seconds=settings.LEADERBOARD_CACHE_TTL,
    )
