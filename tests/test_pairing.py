import random

import pytest
from conftest import make_animation, make_model, make_prompt

from ggbench.constants import FRAMEWORK
from ggbench.models.model import Model
from ggbench.models.vote import Vote
from ggbench.scoring.pairing import CandidatePair, least_exposed, next_pair


def _pair_ids(comparison):
    return (comparison.animation_a.animation_id, comparison.animation_b.animation_id)


def _all_pairs_seen(db, framework, seeds=range(40), **kwargs):
    seen = set()
    for seed in seeds:
        comparison = next_pair(db, framework, rng=random.Random(seed), **kwargs)
        if comparison is not None:
            seen.add(_pair_ids(comparison))
    return seen


def test_no_animations_returns_none(db):
    assert next_pair(db, FRAMEWORK.P5JS) is None


def test_single_enabled_model_returns_none(db):
    model = make_model(db, "solo")
    disabled = make_model(db, "disabled", enabled=False)
    prompt = make_prompt(db, "a bouncing ball")
    make_animation(db, model, prompt)
    make_animation(db, disabled, prompt)

    assert next_pair(db, FRAMEWORK.P5JS) is None


def test_returns_pair_with_lower_id_as_side_a(db):
    model_a = make_model(db, "model-a")
    model_b = make_model(db, "model-b")
    prompt = make_prompt(db, "a spinning cube")
    first = make_animation(db, model_b, prompt)
    second = make_animation(db, model_a, prompt)

    comparison = next_pair(db, FRAMEWORK.P5JS)

    assert comparison is not None
    assert _pair_ids(comparison) == (first.id, second.id)
    assert comparison.animation_a.model_name == "model-b"
    assert comparison.animation_b.model_name == "model-a"
    assert comparison.prompt == "a spinning cube"
    assert comparison.framework is FRAMEWORK.P5JS
    assert comparison.id == f"{first.id}-{second.id}"


def test_comparison_to_dict(db):
    model_a = make_model(db, "model-a")
    model_b = make_model(db, "model-b")
    prompt = make_prompt(db, "rain")
    first = make_animation(db, model_a, prompt, code="function draw() {}")
    make_animation(db, model_b, prompt)

    payload = next_pair(db, FRAMEWORK.P5JS).to_dict()

    assert payload["prompt"] == "rain"
    assert payload["framework"] == "p5js"
    assert payload["animation_a"] == {
        "id": first.id,
        "code": "function draw() {}",
        "framework": "p5js",
        "model": {"id": model_a.id, "name": "model-a"},
    }
    assert payload["animation_b"]["framework"] == "p5js"


@pytest.mark.parametrize(
    "voted_order",
    ["same", "reversed"],
)
def test_voted_pair_is_exhausted(db, voted_order):
    model_a = make_model(db, "model-a")
    model_b = make_model(db, "model-b")
    prompt = make_prompt(db, "fireworks")
    first = make_animation(db, model_a, prompt)
    second = make_animation(db, model_b, prompt)

    if voted_order == "same":
        db.add(Vote(animation_a_id=first.id, animation_b_id=second.id, winner="A"))
    else:
        db.add(Vote(animation_a_id=second.id, animation_b_id=first.id, winner="B"))
    db.flush()

    assert next_pair(db, FRAMEWORK.P5JS) is None
    # exhaustion is stable across calls
    assert next_pair(db, FRAMEWORK.P5JS) is None


def test_tie_voted_pair_never_returns(db):
    models = [make_model(db, f"model-{i}") for i in range(3)]
    prompt = make_prompt(db, "a flock of birds")
    a, b, c = [make_animation(db, model, prompt) for model in models]

    db.add(Vote(animation_a_id=a.id, animation_b_id=b.id, winner="TIE"))
    db.flush()

    seen = _all_pairs_seen(db, FRAMEWORK.P5JS, balance_exposure=False)

    assert seen == {(a.id, c.id), (b.id, c.id)}


def test_never_pairs_across_prompts_or_frameworks(db):
    model_a = make_model(db, "model-a")
    model_b = make_model(db, "model-b")
    prompt_1 = make_prompt(db, "ocean waves")
    prompt_2 = make_prompt(db, "city skyline")
    make_animation(db, model_a, prompt_1, FRAMEWORK.P5JS)
    make_animation(db, model_b, prompt_2, FRAMEWORK.P5JS)
    make_animation(db, model_b, prompt_1, FRAMEWORK.SVG)

    assert next_pair(db, FRAMEWORK.P5JS) is None
    assert next_pair(db, FRAMEWORK.SVG) is None


def test_pairs_are_scoped_to_the_requested_framework(db):
    model_a = make_model(db, "model-a")
    model_b = make_model(db, "model-b")
    prompt = make_prompt(db, "a clock")
    svg_a = make_animation(db, model_a, prompt, FRAMEWORK.SVG)
    svg_b = make_animation(db, model_b, prompt, FRAMEWORK.SVG)

    assert next_pair(db, FRAMEWORK.P5JS) is None
    assert next_pair(db, FRAMEWORK.THREEJS) is None

    comparison = next_pair(db, FRAMEWORK.SVG)
    assert _pair_ids(comparison) == (svg_a.id, svg_b.id)
    assert comparison.framework is FRAMEWORK.SVG


def test_disabled_model_is_never_offered(db):
    enabled = [make_model(db, f"model-{i}") for i in range(2)]
    disabled = make_model(db, "retired", enabled=False)
    prompt = make_prompt(db, "snowfall")
    a, b = [make_animation(db, model, prompt) for model in enabled]
    make_animation(db, disabled, prompt)

    seen = _all_pairs_seen(db, FRAMEWORK.P5JS)

    assert seen == {(a.id, b.id)}


def test_balancing_prefers_least_exposed_models(db):
    busy = {FRAMEWORK.P5JS: (1100, 40, 10, 0)}
    busy_a = make_model(db, "busy-a", standings=busy)
    busy_b = make_model(db, "busy-b", standings=busy)
    fresh_a = make_model(db, "fresh-a")
    fresh_b = make_model(db, "fresh-b")
    prompt = make_prompt(db, "a galaxy")
    for model in (busy_a, busy_b, fresh_a, fresh_b):
        make_animation(db, model, prompt)

    for seed in range(20):
        comparison = next_pair(
            db, FRAMEWORK.P5JS, balance_exposure=True, rng=random.Random(seed)
        )
        names = {comparison.animation_a.model_name, comparison.animation_b.model_name}
        assert names == {"fresh-a", "fresh-b"}


def test_balancing_disabled_offers_every_pair(db):
    busy = {FRAMEWORK.P5JS: (1100, 40, 10, 0)}
    make_model(db, "busy", standings=busy)
    make_model(db, "fresh-a")
    make_model(db, "fresh-b")
    prompt = make_prompt(db, "fog")
    for model in db.query(Model).all():
        make_animation(db, model, prompt)

    seen = _all_pairs_seen(db, FRAMEWORK.P5JS, seeds=range(100), balance_exposure=False)

    assert len(seen) == 3


def test_least_exposed():
    candidates = [
        CandidatePair(1, 2, 10, 20),
        CandidatePair(1, 3, 10, 30),
        CandidatePair(2, 3, 20, 30),
    ]
    vote_counts = {10: 5, 20: 0, 30: 1}

    assert least_exposed(candidates, vote_counts) == [CandidatePair(2, 3, 20, 30)]
