from conftest import make_animation, make_model, make_prompt
from sqlalchemy import func, select

from ggbench.auth import verify_password
from ggbench.constants import FRAMEWORK
from ggbench.maintenance.__main__ import get_parser
from ggbench.maintenance.operations import create_admin, reset_ratings
from ggbench.models.model import Model
from ggbench.models.user import User
from ggbench.models.vote import Vote


def test_reset_ratings_clears_standings_and_votes(db):
    played = {
        FRAMEWORK.P5JS: (1040, 3, 1, 0),
        FRAMEWORK.SVG: (960, 0, 2, 1),
    }
    model_a = make_model(db, "model-a", standings=played)
    model_b = make_model(db, "model-b")
    prompt = make_prompt(db, "rain")
    first = make_animation(db, model_a, prompt)
    second = make_animation(db, model_b, prompt)
    db.add(Vote(animation_a_id=first.id, animation_b_id=second.id, winner="A"))
    db.commit()

    models, votes = reset_ratings(db)
    db.commit()

    assert (models, votes) == (2, 1)
    assert db.scalar(select(func.count(Vote.id))) == 0

    db.expire_all()
    for model in db.scalars(select(Model)):
        for framework in FRAMEWORK:
            standing = model.standing(framework)
            assert standing.elo_score == 1000
            assert standing.vote_count == 0


def test_reset_ratings_custom_score(db):
    make_model(db, "model-a")
    db.commit()

    reset_ratings(db, default_score=1500)
    db.commit()
    db.expire_all()

    model = db.scalar(select(Model))
    assert model.standing(FRAMEWORK.THREEJS).elo_score == 1500


def test_create_admin_creates_and_promotes(db):
    admin = create_admin(db, "Root", "s3cret!")
    db.commit()

    assert admin.is_admin
    assert admin.username_normalized == "root"
    assert verify_password("s3cret!", admin.password_hash)

    db.add(
        User(
            username="regular",
            username_normalized="regular",
            password_hash="x",
            is_admin=False,
        )
    )
    db.commit()

    promoted = create_admin(db, "REGULAR", "another-one")
    db.commit()

    assert promoted.username == "regular"
    assert promoted.is_admin
    assert verify_password("another-one", promoted.password_hash)
    assert db.scalar(select(func.count(User.id))) == 2


def test_parser_commands():
    parser = get_parser()

    options = parser.parse_args(["reset-ratings", "--yes", "--default-score", "1200"])
    assert options.command == "reset-ratings"
    assert options.yes
    assert options.default_score == 1200

    options = parser.parse_args(["create-admin", "--username", "ops"])
    assert options.command == "create-admin"
    assert options.username == "ops"
    assert options.password is None
