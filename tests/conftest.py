import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("CORS_ALLOWED_ORIGIN", "http://localhost:3000")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import ggbench.models  # noqa: E402,F401
from ggbench.constants import FRAMEWORK  # noqa: E402
from ggbench.models.animation import Animation  # noqa: E402
from ggbench.models.model import FRAMEWORK_COLUMNS, Model  # noqa: E402
from ggbench.models.prompt import Prompt  # noqa: E402
from ggbench.schema.postgres import metadata  # noqa: E402
from ggbench.util.cache import Cache  # noqa: E402


class FakeCache(Cache):
    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.deleted = []

    def get_json(self, key):
        return self.store.get(key)

    def set_json(self, key, value, ttl_seconds=None):
        self.store[key] = value
        self.ttls[key] = ttl_seconds

    def delete(self, *keys):
        for key in keys:
            self.deleted.append(key)
            self.store.pop(key, None)


class FakeLLMClient:
    """Returns queued responses in order; an exception in the queue is raised instead."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def send_prompt(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class RecordingLogger:
    """Stands in for a module logger; keeps (level, event, context) tuples."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, level):
        def record(event, **kwargs):
            self.calls.append((level, event, kwargs))

        return record

    def levels(self, event):
        return [level for level, logged, _ in self.calls if logged == event]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_cache():
    return FakeCache()


def make_model(db, name, enabled=True, standings=None, **kwargs):
    """
    Insert a model. ``standings`` maps a FRAMEWORK to an
    ``(elo_score, wins, losses, ties)`` tuple.
    """
    kwargs.setdefault("api_endpoint", "http://llm.invalid/v1")
    kwargs.setdefault("api_key", "test-key")
    model = Model(name=name, enabled=enabled, **kwargs)

    for framework, (elo_score, wins, losses, ties) in (standings or {}).items():
        columns = FRAMEWORK_COLUMNS[framework]
        setattr(model, columns.elo_score.key, elo_score)
        setattr(model, columns.wins.key, wins)
        setattr(model, columns.losses.key, losses)
        setattr(model, columns.ties.key, ties)

    db.add(model)
    db.flush()
    return model


def make_prompt(db, text, tags=None, status="active"):
    prompt = Prompt(text=text, status=status)
    db.add(prompt)
    prompt.set_tags(tags or [])
    db.flush()
    return prompt


def make_animation(db, model, prompt, framework=FRAMEWORK.P5JS, code=None):
    animation = Animation(
        model_id=model.id,
        prompt_id=prompt.id,
        framework=framework.value,
        code=code or f"// {model.name} {prompt.text} {framework.value}",
    )
    db.add(animation)
    db.flush()
    return animation
