"""Baseline migration - portal users, onboarding, activity, venues and CMS tables

Revision ID: 0001_baseline
Revises: 
Create Date: 2026-10-19

Creates every table the portal needs. Timestamps are TIMESTAMPTZ in UTC.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all portal tables."""

    # ==========================================================================
    # Portal users
    # ==========================================================================
    op.execute('''
        CREATE TABLE users (
            id SERIAL PRIMARY KEY,
            email VARCHAR(255) UNIQUE NOT NULL,
            external_auth_id VARCHAR(255) UNIQUE NOT NULL,
            name VARCHAR(255) NOT NULL,
            role VARCHAR(20) NOT NULL DEFAULT 'client',
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')

    # ==========================================================================
    # Onboarding progress + guide links
    # ==========================================================================
    op.execute('''
        CREATE TABLE onboarding_progress (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            step VARCHAR(100) NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT FALSE,
            completed_at TIMESTAMPTZ,
            data JSONB,
            CONSTRAINT uq_onboarding_progress_user_step UNIQUE (user_id, step)
        )
    ''')
    op.execute('CREATE INDEX idx_onboarding_progress_user ON onboarding_progress(user_id)')

    op.execute('''
        CREATE TABLE guide_configs (
            id SERIAL PRIMARY KEY,
            guide_type VARCHAR(50) UNIQUE NOT NULL,
            title VARCHAR(255) NOT NULL,
            description TEXT,
            url VARCHAR(2048) NOT NULL,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')

    # ==========================================================================
    # Activity tracking
    # ==========================================================================
    op.execute('''
        CREATE TABLE user_activities (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            activity_type VARCHAR(50) NOT NULL,
            page VARCHAR(255),
            metadata JSONB,
            occurred_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_user_activities_user_time ON user_activities(user_id, occurred_at)')
    op.execute('CREATE INDEX idx_user_activities_type_time ON user_activities(activity_type, occurred_at)')

    op.execute('''
        CREATE TABLE user_sessions (
            id SERIAL PRIMARY KEY,
            session_id VARCHAR(100) UNIQUE NOT NULL,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            user_agent TEXT,
            login_time TIMESTAMPTZ NOT NULL DEFAULT now(),
            last_activity TIMESTAMPTZ NOT NULL DEFAULT now(),
            logout_time TIMESTAMPTZ,
            is_active BOOLEAN NOT NULL DEFAULT TRUE
        )
    ''')
    op.execute('CREATE INDEX idx_user_sessions_user_active ON user_sessions(user_id, is_active)')

    # ==========================================================================
    # Venues
    # ==========================================================================
    op.execute('''
        CREATE TABLE venues (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            venue_code VARCHAR(100),
            go_live_date DATE,
            package_type VARCHAR(100),
            selected_features JSONB NOT NULL DEFAULT '[]'::jsonb,
            status VARCHAR(20) NOT NULL DEFAULT 'planning',
            progress_data JSONB NOT NULL DEFAULT '{}'::jsonb,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')

    op.execute('''
        CREATE TABLE team_members (
            id SERIAL PRIMARY KEY,
            venue_id INTEGER NOT NULL REFERENCES venues(id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            email VARCHAR(255),
            role VARCHAR(100),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_team_members_venue ON team_members(venue_id)')

    op.execute('''
        CREATE TABLE onboarding_tasks (
            id SERIAL PRIMARY KEY,
            venue_id INTEGER NOT NULL REFERENCES venues(id) ON DELETE CASCADE,
            title VARCHAR(255) NOT NULL,
            description TEXT,
            status VARCHAR(20) NOT NULL DEFAULT 'not-started',
            assigned_to INTEGER REFERENCES team_members(id) ON DELETE SET NULL,
            due_date DATE,
            completed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_onboarding_tasks_venue_status ON onboarding_tasks(venue_id, status)')

    # ==========================================================================
    # CMS
    # ==========================================================================
    op.execute('''
        CREATE TABLE cms_admins (
            id SERIAL PRIMARY KEY,
            email VARCHAR(255) UNIQUE NOT NULL,
            password_hash VARCHAR(255) NOT NULL,
            name VARCHAR(255) NOT NULL,
            role VARCHAR(20) NOT NULL DEFAULT 'editor',
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            last_login TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')

    op.execute('''
        CREATE TABLE content_types (
            id SERIAL PRIMARY KEY,
            name VARCHAR(100) UNIQUE NOT NULL,
            display_name VARCHAR(255) NOT NULL,
            description TEXT,
            schema JSONB NOT NULL,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')

    op.execute('''
        CREATE TABLE content_items (
            id SERIAL PRIMARY KEY,
            key VARCHAR(255) UNIQUE NOT NULL,
            content_type_id INTEGER NOT NULL REFERENCES content_types(id) ON DELETE RESTRICT,
            title VARCHAR(255) NOT NULL,
            content JSONB NOT NULL,
            is_published BOOLEAN NOT NULL DEFAULT FALSE,
            published_at TIMESTAMPTZ,
            created_by INTEGER REFERENCES cms_admins(id) ON DELETE SET NULL,
            updated_by INTEGER REFERENCES cms_admins(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_content_items_type ON content_items(content_type_id)')
    op.execute('CREATE INDEX idx_content_items_published ON content_items(is_published)')

    op.execute('''
        CREATE TABLE content_versions (
            id SERIAL PRIMARY KEY,
            content_item_id INTEGER NOT NULL REFERENCES content_items(id) ON DELETE CASCADE,
            version_number INTEGER NOT NULL,
            content JSONB NOT NULL,
            change_description TEXT,
            created_by INTEGER REFERENCES cms_admins(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_content_versions_item_number UNIQUE (content_item_id, version_number)
        )
    ''')

    # One lock row per item; concurrent acquires race on this constraint
    op.execute('''
        CREATE TABLE content_locks (
            id SERIAL PRIMARY KEY,
            content_item_id INTEGER UNIQUE NOT NULL REFERENCES content_items(id) ON DELETE CASCADE,
            locked_by INTEGER NOT NULL REFERENCES cms_admins(id) ON DELETE CASCADE,
            lock_token VARCHAR(64) UNIQUE NOT NULL,
            expires_at TIMESTAMPTZ NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')

    op.execute('''
        CREATE TABLE cms_activity_log (
            id SERIAL PRIMARY KEY,
            admin_id INTEGER REFERENCES cms_admins(id) ON DELETE SET NULL,
            action VARCHAR(50) NOT NULL,
            resource_type VARCHAR(50) NOT NULL,
            resource_id INTEGER,
            details JSONB,
            ip_address VARCHAR(45),
            user_agent VARCHAR(500),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_cms_activity_admin_created ON cms_activity_log(admin_id, created_at)')
    op.execute('CREATE INDEX idx_cms_activity_created ON cms_activity_log(created_at)')


def downgrade() -> None:
    """Drop all portal tables."""
    for table in (
        'cms_activity_log',
        'content_locks',
        'content_versions',
        'content_items',
        'content_types',
        'cms_admins',
        'onboarding_tasks',
        'team_members',
        'venues',
        'user_sessions',
        'user_activities',
        'guide_configs',
        'onboarding_progress',
        'users',
    ):
        op.drop_table(table)
