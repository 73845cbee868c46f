"""
A generator of animations, such as "anthropic/claude-sonnet-4" served through an OpenAI compatible endpoint.

Ratings and win/loss/tie tallies are kept separately per framework, since p5.js, Three.js and SVG
comparisons form independent pools.
"""

from sqlalchemy import (
    JSON,
    TIMESTAMP,
    Boolean,
    Column,
    Float,
    Index,
    Integer,
    String,
    Table,
    func,
    text,
)

from ggbench.constants import DEFAULT_ELO_SCORE

from .._metadata import metadata


def _elo_column(name):
    return Column(
        name,
        Integer,
        nullable=False,
        default=DEFAULT_ELO_SCORE,
        server_default=text(str(DEFAULT_ELO_SCORE)),
    )


def _tally_column(name):
    return Column(name, Integer, nullable=False, default=0, server_default=text("0"))


model = Table(
    "models",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column("last_modified", TIMESTAMP(timezone=False), nullable=True),
    Column("name", String, unique=True, nullable=False),
    Column(
        "enabled", Boolean, nullable=False, default=True, server_default=text("true")
    ),
    # generation settings
    Column("api_type", String, nullable=False, default="openai"),
    Column("api_endpoint", String, nullable=False),
    Column("api_key", String, nullable=False),
    Column("temperature", Float, nullable=False, default=0.7),
    Column("max_tokens", Integer, nullable=False, default=4000),
    Column("additional_headers", JSON, nullable=True),
    # p5.js standing
    _elo_column("p5js_elo_score"),
    _tally_column("p5js_wins"),
    _tally_column("p5js_losses"),
    _tally_column("p5js_ties"),
    # Three.js standing
    _elo_column("threejs_elo_score"),
    _tally_column("threejs_wins"),
    _tally_column("threejs_losses"),
    _tally_column("threejs_ties"),
    # SVG standing
    _elo_column("svg_elo_score"),
    _tally_column("svg_wins"),
    _tally_column("svg_losses"),
    _tally_column("svg_ties"),
    Index("ix_models_enabled", "enabled"),
    comment=__doc__.strip(),
)
