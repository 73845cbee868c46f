import pytest
import sqlalchemy.exc
from conftest import RecordingLogger, make_model
from fastapi import HTTPException
from sqlalchemy import func, select

import ggbench.util.postgres as postgres
from ggbench.errors import NotFound, ValidationError
from ggbench.models.model import Model
from ggbench.util.postgres import is_conflict_error, managed_session


@pytest.fixture
def recorded(monkeypatch):
    recorder = RecordingLogger()
    monkeypatch.setattr(postgres, "logger", recorder)
    return recorder


def test_managed_session_commits(session_factory, db):
    with managed_session(session_factory) as session:
        make_model(session, "committed")

    assert db.scalar(select(func.count(Model.id))) == 1


@pytest.mark.parametrize(
    "error",
    [
        NotFound("Animation(s) not found: 9"),
        ValidationError("Missing required field: winner"),
        HTTPException(status_code=409, detail="Username already exists"),
    ],
)
def test_expected_errors_roll_back_quietly(session_factory, db, recorded, error):
    with pytest.raises(type(error)):
        with managed_session(session_factory) as session:
            make_model(session, "rolled-back")
            raise error

    assert recorded.levels("Rolling back session") == ["info"]
    assert db.scalar(select(func.count(Model.id))) == 0


def test_unexpected_errors_are_logged_with_traceback(session_factory, recorded):
    with pytest.raises(RuntimeError):
        with managed_session(session_factory):
            raise RuntimeError("boom")

    assert recorded.levels("Rolling back session") == ["error"]
    _, _, context = recorded.calls[0]
    assert "RuntimeError: boom" in context["error"]


class PgError(Exception):
    def __init__(self, pgcode):
        self.pgcode = pgcode


@pytest.mark.parametrize(
    "pgcode, expected",
    [
        ("40001", True),
        ("40P01", True),
        ("23505", False),
        (None, False),
    ],
)
def test_is_conflict_error(pgcode, expected):
    error = sqlalchemy.exc.OperationalError("UPDATE models", {}, PgError(pgcode))
    assert is_conflict_error(error) is expected


def test_is_conflict_error_ignores_other_exceptions():
    assert not is_conflict_error(RuntimeError("40001"))
