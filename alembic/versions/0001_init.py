"""init: roles, users, categories, products, settings, system logs
Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _base_columns():
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade():
    op.create_table(
        "user_roles",
        *_base_columns(),
        sa.Column("slug", sa.String(length=100), nullable=False, unique=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_protected", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_user_roles_created_at", "user_roles", ["created_at"])

    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        sa.Column("role_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("user_roles.id"), nullable=False),
        sa.Column("is_trashed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_protected", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_created_at", "users", ["created_at"])
    op.create_index("ix_users_status", "users", ["status"])
    op.create_index("ix_users_role_id", "users", ["role_id"])

    op.create_table(
        "ecommerce_categories",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("slug", sa.String(length=200), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_by_user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
    )
    op.create_index("ix_ecommerce_categories_created_at", "ecommerce_categories", ["created_at"])
    op.create_index("ix_ecommerce_categories_status", "ecommerce_categories", ["status"])

    op.create_table(
        "ecommerce_products",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column(
            "category_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("ecommerce_categories.id"),
            nullable=True,
        ),
    )
    op.create_index("ix_ecommerce_products_created_at", "ecommerce_products", ["created_at"])
    op.create_index("ix_ecommerce_products_category_id", "ecommerce_products", ["category_id"])

    op.create_table(
        "system_settings",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("support_email", sa.String(length=200), nullable=True),
        sa.Column("language", sa.String(length=10), nullable=False, server_default="en"),
        sa.Column("timezone", sa.String(length=64), nullable=False, server_default="UTC"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="USD"),
        sa.Column("facebook", sa.String(length=500), nullable=True),
        sa.Column("twitter", sa.String(length=500), nullable=True),
        sa.Column("instagram", sa.String(length=500), nullable=True),
        sa.Column("linkedin", sa.String(length=500), nullable=True),
        sa.Column("youtube", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_system_settings_created_at", "system_settings", ["created_at"])

    op.create_table(
        "system_logs",
        *_base_columns(),
        sa.Column("event", sa.String(length=30), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("entity_id", sa.String(length=80), nullable=False),
        sa.Column("entity_type", sa.String(length=80), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
    )
    op.create_index("ix_system_logs_created_at", "system_logs", ["created_at"])
    op.create_index("ix_system_logs_event", "system_logs", ["event"])
    op.create_index("ix_system_logs_user_id", "system_logs", ["user_id"])


def downgrade():
    op.drop_table("system_logs")
    op.drop_table("system_settings")
    op.drop_table("ecommerce_products")
    op.drop_table("ecommerce_categories")
    op.drop_table("users")
    op.drop_table("user_roles")
