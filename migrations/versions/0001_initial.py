"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-01-05 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "users",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="USER"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_tenant_id", "users", ["tenant_id"], unique=False)
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_table(
        "permission_catalog",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("code", sa.String(length=100), nullable=False, unique=True),
        sa.Column("description", sa.String(length=255), nullable=True),
    )
    op.create_table(
        "role_templates",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("tenant_id", "name", name="uq_role_template_tenant_name"),
    )
    op.create_index("ix_role_templates_tenant_id", "role_templates", ["tenant_id"], unique=False)
    op.create_table(
        "role_template_permissions",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("role_template_id", GUID(), sa.ForeignKey("role_templates.id"), nullable=False),
        sa.Column("permission_id", GUID(), sa.ForeignKey("permission_catalog.id"), nullable=False),
        sa.UniqueConstraint("role_template_id", "permission_id", name="uq_role_template_permission"),
    )
    op.create_index(
        "ix_role_template_permissions_role_template_id",
        "role_template_permissions",
        ["role_template_id"],
        unique=False,
    )
    op.create_index(
        "ix_role_template_permissions_permission_id",
        "role_template_permissions",
        ["permission_id"],
        unique=False,
    )
    op.create_table(
        "audit_events",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("user_id", GUID(), nullable=True),
        sa.Column("trace_id", sa.String(length=64), nullable=True),
        sa.Column("actor", sa.String(length=255), nullable=False),
        sa.Column("action", sa.String(length=255), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=False),
        sa.Column("entity_id", sa.String(length=100), nullable=True),
        sa.Column("before", sa.JSON(), nullable=True),
        sa.Column("after", sa.JSON(), nullable=True),
        sa.Column("result", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_events_tenant_id", "audit_events", ["tenant_id"], unique=False)
    op.create_index("ix_audit_events_user_id", "audit_events", ["user_id"], unique=False)
    op.create_index("ix_audit_events_trace_id", "audit_events", ["trace_id"], unique=False)
    op.create_table(
        "dashboard_menus",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("key", sa.String(length=100), nullable=False, unique=True),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("icon", sa.String(length=100), nullable=False),
        sa.Column("route", sa.String(length=255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("parent_id", GUID(), sa.ForeignKey("dashboard_menus.id"), nullable=True),
        sa.Column("page_type", sa.String(length=20), nullable=False, server_default="HARDCODED"),
        sa.Column("page_identifier", sa.String(length=255), nullable=True),
        sa.Column("component_path", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("required_permissions", sa.JSON(), nullable=True),
        sa.Column("required_roles", sa.JSON(), nullable=True),
        sa.Column("feature_flag", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("badge", sa.String(length=50), nullable=True),
        sa.Column("available_widgets", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_dashboard_menus_route", "dashboard_menus", ["route"], unique=False)
    op.create_index("ix_dashboard_menus_parent_id", "dashboard_menus", ["parent_id"], unique=False)
    op.create_table(
        "ecommerce_settings",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("user_id", GUID(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("scope", sa.String(length=20), nullable=False, server_default="global"),
        sa.Column("store_name", sa.String(length=255), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("track_inventory", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("shipping_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("cod_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("portal_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("tenant_id", "scope", "user_id", name="uq_ecommerce_settings_scope"),
    )
    op.create_index("ix_ecommerce_settings_tenant_id", "ecommerce_settings", ["tenant_id"], unique=False)
    op.create_index("ix_ecommerce_settings_user_id", "ecommerce_settings", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_ecommerce_settings_user_id", table_name="ecommerce_settings")
    op.drop_index("ix_ecommerce_settings_tenant_id", table_name="ecommerce_settings")
    op.drop_table("ecommerce_settings")
    op.drop_index("ix_dashboard_menus_parent_id", table_name="dashboard_menus")
    op.drop_index("ix_dashboard_menus_route", table_name="dashboard_menus")
    op.drop_table("dashboard_menus")
    op.drop_index("ix_audit_events_trace_id", table_name="audit_events")
    op.drop_index("ix_audit_events_user_id", table_name="audit_events")
    op.drop_index("ix_audit_events_tenant_id", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_index("ix_role_template_permissions_permission_id", table_name="role_template_permissions")
    op.drop_index("ix_role_template_permissions_role_template_id", table_name="role_template_permissions")
    op.drop_table("role_template_permissions")
    op.drop_index("ix_role_templates_tenant_id", table_name="role_templates")
    op.drop_table("role_templates")
    op.drop_table("permission_catalog")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_tenant_id", table_name="users")
    op.drop_table("users")
    op.drop_table("tenants")
