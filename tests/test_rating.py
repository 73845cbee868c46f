import pytest
import sqlalchemy.exc
from conftest import make_animation, make_model, make_prompt
from sqlalchemy import func, select

import ggbench.scoring.rating as rating
from ggbench.constants import FRAMEWORK, WINNER
from ggbench.errors import NotFound, PersistenceConflict, ValidationError
from ggbench.models.model import Model
from ggbench.models.vote import Vote
from ggbench.scoring.leaderboard import leaderboard_cache_key
from ggbench.scoring.rating import apply_vote, record_vote


class FakePgError(Exception):
    def __init__(self, pgcode):
        super().__init__(f"pgcode {pgcode}")
        self.pgcode = pgcode


def _conflict(pgcode="40001"):
    return sqlalchemy.exc.OperationalError("UPDATE models", {}, FakePgError(pgcode))


@pytest.fixture
def matchup(db):
    """Two models with one p5.js animation each for the same prompt."""

    def build(rating_a=1000, rating_b=1000):
        model_a = make_model(
            db, "model-a", standings={FRAMEWORK.P5JS: (rating_a, 0, 0, 0)}
        )
        model_b = make_model(
            db, "model-b", standings={FRAMEWORK.P5JS: (rating_b, 0, 0, 0)}
        )
        prompt = make_prompt(db, "a pendulum")
        animation_a = make_animation(db, model_a, prompt)
        animation_b = make_animation(db, model_b, prompt)
        db.commit()
        return model_a.id, model_b.id, animation_a.id, animation_b.id

    return build


def _standing(db, model_id, framework=FRAMEWORK.P5JS):
    db.expire_all()
    return db.get(Model, model_id).standing(framework)


def _vote_count(db):
    return db.scalar(select(func.count(Vote.id)))


def test_equal_ratings_a_wins(db, matchup):
    model_a_id, model_b_id, animation_a_id, animation_b_id = matchup()

    result = apply_vote(db, animation_a_id, animation_b_id, "A")
    db.commit()

    assert (result.model_a.old_rating, result.model_a.new_rating) == (1000, 1016)
    assert (result.model_b.old_rating, result.model_b.new_rating) == (1000, 984)
    assert result.framework is FRAMEWORK.P5JS
    assert result.winner is WINNER.A

    standing_a = _standing(db, model_a_id)
    standing_b = _standing(db, model_b_id)
    assert (standing_a.elo_score, standing_a.wins, standing_a.losses) == (1016, 1, 0)
    assert (standing_b.elo_score, standing_b.wins, standing_b.losses) == (984, 0, 1)
    assert _vote_count(db) == 1


def test_underdog_b_wins(db, matchup):
    model_a_id, model_b_id, animation_a_id, animation_b_id = matchup(1200, 1000)

    apply_vote(db, animation_a_id, animation_b_id, "B")
    db.commit()

    assert _standing(db, model_a_id).elo_score == 1176
    assert _standing(db, model_b_id).elo_score == 1024
    assert _standing(db, model_b_id).wins == 1


def test_tie_leaves_equal_ratings_and_counts_ties(db, matchup):
    model_a_id, model_b_id, animation_a_id, animation_b_id = matchup()

    apply_vote(db, animation_a_id, animation_b_id, "TIE")
    db.commit()

    for model_id in (model_a_id, model_b_id):
        standing = _standing(db, model_id)
        assert standing.elo_score == 1000
        assert (standing.wins, standing.losses, standing.ties) == (0, 0, 1)


def test_other_frameworks_are_untouched(db, matchup):
    model_a_id, _, animation_a_id, animation_b_id = matchup()

    apply_vote(db, animation_a_id, animation_b_id, "A")
    db.commit()

    for framework in (FRAMEWORK.THREEJS, FRAMEWORK.SVG):
        standing = _standing(db, model_a_id, framework)
        assert standing.elo_score == 1000
        assert standing.vote_count == 0


def test_vote_order_does_not_matter_for_sides(db, matchup):
    model_a_id, model_b_id, animation_a_id, animation_b_id = matchup()

    # the caller's A is the animation it passed first
    result = apply_vote(db, animation_b_id, animation_a_id, "A")
    db.commit()

    assert result.model_a.model_id == model_b_id
    assert _standing(db, model_b_id).elo_score == 1016
    assert _standing(db, model_a_id).elo_score == 984


@pytest.mark.parametrize(
    "winner, message",
    [
        (None, "Missing required field: winner"),
        ("", "Missing required field: winner"),
        ("C", "Invalid winner value"),
        ("a", "Invalid winner value"),
    ],
)
def test_invalid_winner_writes_nothing(db, matchup, winner, message):
    model_a_id, _, animation_a_id, animation_b_id = matchup()

    with pytest.raises(ValidationError, match=message):
        apply_vote(db, animation_a_id, animation_b_id, winner)
    db.rollback()

    assert _vote_count(db) == 0
    assert _standing(db, model_a_id).elo_score == 1000


@pytest.mark.parametrize(
    "animation_a_id, animation_b_id, message",
    [
        (None, 1, "Missing required field: animationAId"),
        (1, None, "Missing required field: animationBId"),
        (0, 1, "Invalid animation id"),
        (True, 2, "Invalid animation id"),
        ("1", 2, "Invalid animation id"),
        (1, 1, "cannot be compared with itself"),
    ],
)
def test_invalid_animation_ids(db, animation_a_id, animation_b_id, message):
    with pytest.raises(ValidationError, match=message):
        apply_vote(db, animation_a_id, animation_b_id, "A")


def test_unknown_animation_is_not_found(db, matchup):
    _, _, animation_a_id, _ = matchup()

    with pytest.raises(NotFound, match="9999"):
        apply_vote(db, animation_a_id, 9999, "A")
    db.rollback()

    assert _vote_count(db) == 0


def test_animations_must_share_prompt_and_framework(db):
    model_a = make_model(db, "model-a")
    model_b = make_model(db, "model-b")
    prompt_1 = make_prompt(db, "waves")
    prompt_2 = make_prompt(db, "sparks")
    waves_a = make_animation(db, model_a, prompt_1)
    sparks_b = make_animation(db, model_b, prompt_2)
    waves_svg_b = make_animation(db, model_b, prompt_1, FRAMEWORK.SVG)
    db.commit()

    with pytest.raises(ValidationError, match="same prompt"):
        apply_vote(db, waves_a.id, sparks_b.id, "A")

    with pytest.raises(ValidationError, match="same framework"):
        apply_vote(db, waves_a.id, waves_svg_b.id, "A")


def test_tally_matches_vote_count(db):
    models = [make_model(db, f"model-{i}") for i in range(3)]
    prompt = make_prompt(db, "lava lamp")
    animations = [make_animation(db, model, prompt) for model in models]
    db.commit()

    for (first, second), winner in zip(
        [(0, 1), (0, 2), (1, 2)], ["A", "TIE", "B"]
    ):
        apply_vote(db, animations[first].id, animations[second].id, winner)
    db.commit()

    total = sum(
        _standing(db, model.id).vote_count for model in models
    )
    assert total == 2 * _vote_count(db) == 6


def test_record_vote_commits_and_invalidates_cache(
    db, session_factory, matchup, fake_cache
):
    model_a_id, _, animation_a_id, animation_b_id = matchup()
    key = leaderboard_cache_key(FRAMEWORK.P5JS)
    fake_cache.set_json(key, [{"stale": True}])

    result = record_vote(
        animation_a_id,
        animation_b_id,
        "A",
        session_factory=session_factory,
        cache=fake_cache,
    )

    assert result.model_a.new_rating == 1016
    assert _standing(db, model_a_id).elo_score == 1016
    assert fake_cache.get_json(key) is None
    assert key in fake_cache.deleted


def test_record_vote_without_cache(db, session_factory, matchup):
    _, _, animation_a_id, animation_b_id = matchup()

    result = record_vote(
        animation_a_id, animation_b_id, "TIE", session_factory=session_factory
    )

    assert result.winner is WINNER.TIE
    assert _vote_count(db) == 1


@pytest.mark.parametrize("pgcode", ["40001", "40P01"])
def test_record_vote_retries_conflicts(
    db, session_factory, matchup, monkeypatch, pgcode
):
    _, _, animation_a_id, animation_b_id = matchup()
    real_apply_vote = rating.apply_vote
    attempts = []

    def flaky_apply_vote(*args, **kwargs):
        attempts.append(1)
        if len(attempts) == 1:
            raise _conflict(pgcode)
        return real_apply_vote(*args, **kwargs)

    monkeypatch.setattr(rating, "apply_vote", flaky_apply_vote)

    record_vote(animation_a_id, animation_b_id, "A", session_factory=session_factory)

    assert len(attempts) == 2
    assert _vote_count(db) == 1


def test_record_vote_gives_up_after_max_attempts(
    db, session_factory, matchup, monkeypatch, fake_cache
):
    _, _, animation_a_id, animation_b_id = matchup()
    attempts = []

    def always_conflicts(*args, **kwargs):
        attempts.append(1)
        raise _conflict()

    monkeypatch.setattr(rating, "apply_vote", always_conflicts)

    with pytest.raises(PersistenceConflict):
        record_vote(
            animation_a_id,
            animation_b_id,
            "A",
            session_factory=session_factory,
            cache=fake_cache,
            max_attempts=3,
        )

    assert len(attempts) == 3
    assert _vote_count(db) == 0
    assert fake_cache.deleted == []


def test_record_vote_does_not_retry_other_database_errors(
    session_factory, matchup, monkeypatch
):
    _, _, animation_a_id, animation_b_id = matchup()
    attempts = []

    def broken(*args, **kwargs):
        attempts.append(1)
        raise _conflict("23505")

    monkeypatch.setattr(rating, "apply_vote", broken)

    with pytest.raises(sqlalchemy.exc.OperationalError):
        record_vote(
            animation_a_id, animation_b_id, "A", session_factory=session_factory
        )

    assert len(attempts) == 1
