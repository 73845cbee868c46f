import contextlib
import os
import traceback

import sqlalchemy
import sqlalchemy.engine.url
import sqlalchemy.exc
import sqlalchemy.orm
from fastapi import HTTPException

from ggbench.errors import GGBenchError
from ggbench.util.logging import get_logger

logger = get_logger(__name__)

_SESSIONMAKER = None

# serialization_failure, deadlock_detected
CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})

# raised for ordinary client mistakes; rolled back without a traceback
EXPECTED_ERRORS = (GGBenchError, HTTPException)


def get_engine(prefix="POSTGRES_", **kwargs):
    """
    Build an engine from ``{prefix}HOST``, ``{prefix}PORT``, ``{prefix}USER``,
    ``{prefix}PASSWORD`` and ``{prefix}DB``.

    ``{prefix}DRIVERNAME`` and ``{prefix}SSLMODE`` are optional.
    """
    logger.info("Building database engine", prefix=prefix)
    url = sqlalchemy.engine.url.URL.create(
        drivername=os.environ.get(f"{prefix}DRIVERNAME", "postgresql+psycopg2"),
        host=os.environ[f"{prefix}HOST"],
        port=int(os.environ[f"{prefix}PORT"]),
        username=os.environ[f"{prefix}USER"],
        password=os.environ[f"{prefix}PASSWORD"],
        database=os.environ[f"{prefix}DB"],
    )

    connect_args = dict(kwargs.pop("connect_args", {}))
    connect_args.setdefault("sslmode", os.environ.get(f"{prefix}SSLMODE", "prefer"))

    kwargs.setdefault("pool_pre_ping", True)
    kwargs.setdefault("echo", os.environ.get("SHOW_VERBOSE_SQL") == "true")

    return sqlalchemy.create_engine(url, connect_args=connect_args, **kwargs)


def get_sessionmaker():
    """The process-wide sessionmaker, bound to one pooled engine."""
    global _SESSIONMAKER

    if _SESSIONMAKER is None:
        _SESSIONMAKER = sqlalchemy.orm.sessionmaker(bind=get_engine())

    return _SESSIONMAKER


def dispose_engine():
    if _SESSIONMAKER is not None:
        _SESSIONMAKER.kw["bind"].dispose()
        logger.info("Database engine disposed")


@contextlib.contextmanager
def managed_session(session_factory=None):
    """
    One unit of work: commit when the block exits cleanly, otherwise roll back
    and re-raise.
    """
    session = (session_factory or get_sessionmaker())()
    try:
        yield session
        session.commit()
    except EXPECTED_ERRORS as error:
        logger.info(
            "Rolling back session", reason=type(error).__name__, detail=str(error)
        )
        session.rollback()
        raise
    except Exception:
        logger.error("Rolling back session", error=traceback.format_exc())
        session.rollback()
        raise
    finally:
        session.close()


def get_managed_session():
    with managed_session() as db:
        yield db


def is_conflict_error(error):
    """True when a DBAPI error is a serialization failure or a deadlock."""
    if not isinstance(error, sqlalchemy.exc.DBAPIError):
        return False

    return getattr(error.orig, "pgcode", None) in CONFLICT_SQLSTATES
