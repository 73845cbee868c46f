"""Initial Schema Creation

Revision ID: 3f9a1c2e7b40
Revises:
Create Date: 2025-06-02 18:04:12.311208

"""

import textwrap
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2e7b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute(
        textwrap.dedent("""\
    CREATE TABLE users (
        id SERIAL PRIMARY KEY,
        created TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT now(),
        username VARCHAR NOT NULL,
        username_normalized VARCHAR NOT NULL,
        password_hash VARCHAR NOT NULL,
        is_admin BOOLEAN NOT NULL DEFAULT false,
        CONSTRAINT uq_users_username UNIQUE (username),
        CONSTRAINT uq_users_username_normalized UNIQUE (username_normalized)
    );

    CREATE TABLE models (
        id SERIAL PRIMARY KEY,
        created TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT now(),
        last_modified TIMESTAMP WITHOUT TIME ZONE,
        name VARCHAR NOT NULL,
        enabled BOOLEAN NOT NULL DEFAULT true,
        api_type VARCHAR NOT NULL,
        api_endpoint VARCHAR NOT NULL,
        api_key VARCHAR NOT NULL,
        temperature DOUBLE PRECISION NOT NULL,
        max_tokens INTEGER NOT NULL,
        additional_headers JSON,
        p5js_elo_score INTEGER NOT NULL DEFAULT 1000,
        p5js_wins INTEGER NOT NULL DEFAULT 0,
        p5js_losses INTEGER NOT NULL DEFAULT 0,
        p5js_ties INTEGER NOT NULL DEFAULT 0,
        threejs_elo_score INTEGER NOT NULL DEFAULT 1000,
        threejs_wins INTEGER NOT NULL DEFAULT 0,
        threejs_losses INTEGER NOT NULL DEFAULT 0,
        threejs_ties INTEGER NOT NULL DEFAULT 0,
        svg_elo_score INTEGER NOT NULL DEFAULT 1000,
        svg_wins INTEGER NOT NULL DEFAULT 0,
        svg_losses INTEGER NOT NULL DEFAULT 0,
        svg_ties INTEGER NOT NULL DEFAULT 0,
        CONSTRAINT uq_models_name UNIQUE (name)
    );
    CREATE INDEX ix_models_enabled ON models (enabled);

    CREATE TABLE prompts (
        id SERIAL PRIMARY KEY,
        created TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT now(),
        last_modified TIMESTAMP WITHOUT TIME ZONE,
        text VARCHAR NOT NULL,
        status VARCHAR NOT NULL DEFAULT 'active',
        CONSTRAINT uq_prompts_text UNIQUE (text)
    );

    CREATE TABLE tags (
        id SERIAL PRIMARY KEY,
        created TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT now(),
        name VARCHAR NOT NULL,
        CONSTRAINT uq_tags_name UNIQUE (name)
    );

    CREATE TABLE prompt_tags (
        id SERIAL PRIMARY KEY,
        prompt_id INTEGER NOT NULL REFERENCES prompts (id) ON DELETE CASCADE,
        tag_id INTEGER NOT NULL REFERENCES tags (id),
        CONSTRAINT unique_prompt_tag UNIQUE (prompt_id, tag_id)
    );

    CREATE TABLE animations (
        id SERIAL PRIMARY KEY,
        created TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT now(),
        model_id INTEGER NOT NULL REFERENCES models (id),
        prompt_id INTEGER NOT NULL REFERENCES prompts (id),
        framework VARCHAR NOT NULL,
        code VARCHAR NOT NULL,
        CONSTRAINT unique_animation_per_framework UNIQUE (model_id, prompt_id, framework)
    );
    CREATE INDEX ix_animations_framework_prompt ON animations (framework, prompt_id);
    CREATE INDEX ix_animations_model_id ON animations (model_id);

    CREATE TABLE votes (
        id SERIAL PRIMARY KEY,
        created TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT now(),
        animation_a_id INTEGER NOT NULL REFERENCES animations (id),
        animation_b_id INTEGER NOT NULL REFERENCES animations (id),
        winner VARCHAR NOT NULL,
        CONSTRAINT ck_votes_valid_winner CHECK (winner IN ('A', 'B', 'TIE'))
    );
    CREATE INDEX ix_votes_animation_a_id ON votes (animation_a_id);
    CREATE INDEX ix_votes_animation_b_id ON votes (animation_b_id);
    CREATE INDEX ix_votes_created ON votes (created);
    """)
    )


def downgrade() -> None:
    raise RuntimeError("Upgrades only")
