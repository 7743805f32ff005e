"""Users, follow graph and activity log.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            auth_subject VARCHAR(255) UNIQUE NOT NULL,
            email VARCHAR(320),
            display_name VARCHAR(64),
            avatar_url TEXT,
            bio VARCHAR(500),
            home_location VARCHAR(128),
            travel_styles JSONB NOT NULL DEFAULT '[]'::jsonb,
            languages JSONB NOT NULL DEFAULT '[]'::jsonb,
            profile_visibility VARCHAR(16) DEFAULT 'public'
                CHECK (profile_visibility IN ('public', 'friends', 'private')),
            role VARCHAR(16) DEFAULT 'free'
                CHECK (role IN ('free', 'pro', 'moderator', 'admin')),
            role_updated_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_users_email ON users(email)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_users_role ON users(role)")

    # --- Follows ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS follows (
            id BIGSERIAL PRIMARY KEY,
            follower_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            following_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT follows_pair_key UNIQUE (follower_id, following_id),
            CONSTRAINT follows_no_self_follow CHECK (follower_id <> following_id)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_follows_follower ON follows(follower_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_follows_following ON follows(following_id)")

    # --- Activity log ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS activity_feed (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type VARCHAR(32) NOT NULL
                CHECK (type IN ('trip_created', 'place_visited', 'journal_posted', 'place_added')),
            reference_id VARCHAR(128) NOT NULL,
            metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_activity_user_created
        ON activity_feed(user_id, created_at DESC)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS activity_feed")
    op.execute("DROP TABLE IF EXISTS follows")
    op.execute("DROP TABLE IF EXISTS users")
