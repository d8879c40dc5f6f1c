"""Sharing schema - principals, visualizations, permission, shared_entity.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("database_role", sa.String(63), nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("database_role", sa.String(63), nullable=False),
        sa.Column(
            "organization_id",
            sa.UUID(),
            sa.ForeignKey("organizations.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("viewer", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "groups",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "organization_id",
            sa.UUID(),
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("database_role", sa.String(63), nullable=False),
    )

    op.create_table(
        "user_group",
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("group_id", sa.UUID(), sa.ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "user_tables",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("schema_name", sa.String(63), nullable=False),
        sa.Column("table_name", sa.String(63), nullable=False),
    )

    op.create_table(
        "permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("owner_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("owner_username", sa.String(255), nullable=False),
        sa.Column(
            "access_control_list",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("entity_id", sa.UUID(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_permission_entity_id", "permission", ["entity_id"], unique=True)

    op.create_table(
        "visualizations",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "permission_id",
            sa.UUID(),
            sa.ForeignKey("permission.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "table_id",
            sa.UUID(),
            sa.ForeignKey("user_tables.id", ondelete="CASCADE"),
            nullable=True,
        ),
    )
    op.create_index("ix_visualizations_permission_id", "visualizations", ["permission_id"], unique=True)
    op.create_index("ix_visualizations_table_id", "visualizations", ["table_id"])

    # Layers of derived visualizations, by table they read from
    op.create_table(
        "visualization_table",
        sa.Column(
            "visualization_id",
            sa.UUID(),
            sa.ForeignKey("visualizations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "table_id",
            sa.UUID(),
            sa.ForeignKey("user_tables.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_visualization_table_table_id", "visualization_table", ["table_id"])

    op.create_table(
        "shared_entity",
        sa.Column("recipient_id", sa.UUID(), nullable=False),
        sa.Column("recipient_type", sa.String(10), nullable=False),
        sa.Column("entity_id", sa.UUID(), nullable=False),
        sa.Column("entity_type", sa.String(10), nullable=False, server_default="vis"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("recipient_id", "entity_id"),
    )
    op.create_index("ix_shared_entity_entity_id", "shared_entity", ["entity_id"])

    op.create_table(
        "notification_outbox",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.UUID(), nullable=False),
        sa.Column("recipient_id", sa.UUID(), nullable=False),
        sa.Column("entity_name", sa.String(255), nullable=True),
        sa.Column("owner_name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_notification_outbox_pending",
        "notification_outbox",
        ["created_at"],
        postgresql_where=sa.text("delivered_at IS NULL"),
    )


def downgrade() -> None:
    op.drop_table("notification_outbox")
    op.drop_table("shared_entity")
    op.drop_table("visualization_table")
    op.drop_table("visualizations")
    op.drop_table("permission")
    op.drop_table("user_tables")
    op.drop_table("user_group")
    op.drop_table("groups")
    op.drop_table("users")
    op.drop_table("organizations")
