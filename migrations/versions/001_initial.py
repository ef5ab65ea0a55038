"""Create session tables

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
import sqlalchemy as sa
from alembic import op

# revision identifiers
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _session_fk() -> sa.Column:
    return sa.Column(
        "session_id",
        sa.String(36),
        sa.ForeignKey("automation_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def upgrade() -> None:
    # Create sessions table
    op.create_table(
        "automation_sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False, index=True),
        sa.Column(
            "agent_type",
            sa.Enum(
                "research", "webapp_developer", "web_crawler", "general", name="agent_type"
            ),
            nullable=False,
        ),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "status",
            sa.Enum("active", "completed", "archived", name="session_status"),
            nullable=False,
        ),
        sa.Column("metadata", sa.JSON, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_automation_sessions_user_updated",
        "automation_sessions",
        ["user_id", "updated_at"],
    )

    # Create messages table
    op.create_table(
        "session_messages",
        sa.Column("id", sa.String(36), primary_key=True),
        _session_fk(),
        sa.Column("sequence", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "role",
            sa.Enum("user", "assistant", "system", name="message_role"),
            nullable=False,
        ),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_session_messages_session_created",
        "session_messages",
        ["session_id", "created_at"],
    )

    # Create integrations table
    op.create_table(
        "session_integrations",
        sa.Column("id", sa.String(36), primary_key=True),
        _session_fk(),
        sa.Column(
            "integration_type",
            sa.Enum(
                "email", "github", "calendar", "api", "database", name="integration_type"
            ),
            nullable=False,
        ),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "pending", "configured", "connected", "failed", name="integration_status"
            ),
            nullable=False,
        ),
        sa.Column("config", sa.JSON, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_session_integrations_session_name",
        "session_integrations",
        ["session_id", "name"],
    )

    # Create automations table
    op.create_table(
        "session_automations",
        sa.Column("id", sa.String(36), primary_key=True),
        _session_fk(),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "language",
            sa.Enum(
                "python", "javascript", "typescript", "bash", name="automation_language"
            ),
            nullable=False,
        ),
        sa.Column("code", sa.Text, nullable=False),
        sa.Column("dependencies", sa.JSON, nullable=True),
        sa.Column("setup_instructions", sa.Text, nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "draft", "ready", "downloaded", "executed", name="automation_status"
            ),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("session_automations")
    op.drop_index(
        "ix_session_integrations_session_name", table_name="session_integrations"
    )
    op.drop_table("session_integrations")
    op.drop_index("ix_session_messages_session_created", table_name="session_messages")
    op.drop_table("session_messages")
    op.drop_index(
        "ix_automation_sessions_user_updated", table_name="automation_sessions"
    )
    op.drop_table("automation_sessions")

    # Drop enums
    for enum_name in (
        "automation_status",
        "integration_type",
        "integration_status",
        "message_role",
        "session_status",
        "agent_type",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
