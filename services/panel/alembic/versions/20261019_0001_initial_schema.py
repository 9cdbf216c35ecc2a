"""initial panel schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _uuid(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), **kwargs)


def _jsonb(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.JSONB(astext_type=sa.Text()), **kwargs)


def _timestamps(*, updated: bool = True):
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.text("now()"))]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.text("now()")))
    return columns


def upgrade() -> None:
    op.create_table(
        "auth_users",
        _uuid("id", nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("full_name", sa.String(), nullable=True),
        _jsonb("user_metadata", nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("email_confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_auth_users_email", "auth_users", ["email"], unique=True)

    op.create_table(
        "user_roles",
        _uuid("id", nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default=sa.text("'client'")),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["user_id"], ["auth_users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"], unique=False)

    op.create_table(
        "profiles",
        _uuid("id", nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("cpf", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("company_name", sa.String(), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("matricula", sa.String(), nullable=True),
        sa.Column("plan", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["id"], ["auth_users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_matricula", "profiles", ["matricula"], unique=False)

    op.create_table(
        "account_requests",
        _uuid("id", nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("cpf", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("company_name", sa.String(), nullable=True),
        sa.Column("segmento", sa.String(), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("matricula", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        _uuid("reviewed_by", nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("matricula", name="uq_account_requests_matricula"),
    )
    op.create_index("ix_account_requests_email", "account_requests", ["email"], unique=False)
    op.create_index("ix_account_requests_cpf", "account_requests", ["cpf"], unique=False)
    op.create_index("ix_account_requests_status", "account_requests", ["status"], unique=False)

    op.create_table(
        "clients",
        _uuid("id", nullable=False),
        sa.Column("matricula", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("cpf", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("company_name", sa.String(), nullable=True),
        sa.Column("segmento", sa.String(), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("plan", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'active'")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("trial_days", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("data_ultima_renovacao", sa.Date(), nullable=True),
        sa.Column("observations", sa.Text(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        _uuid("user_id", nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_clients_matricula", "clients", ["matricula"], unique=True)
    op.create_index("ix_clients_email", "clients", ["email"], unique=False)
    op.create_index("ix_clients_cpf", "clients", ["cpf"], unique=False)
    op.create_index("ix_clients_user_id", "clients", ["user_id"], unique=False)

    op.create_table(
        "admins",
        _uuid("id", nullable=False),
        sa.Column("matricula", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("cpf", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default=sa.text("'admin'")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _uuid("user_id", nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_admins_email"),
    )
    op.create_index("ix_admins_matricula", "admins", ["matricula"], unique=True)
    op.create_index("ix_admins_user_id", "admins", ["user_id"], unique=False)

    op.create_table(
        "whatsapp_instances",
        _uuid("id", nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("instance_name", sa.String(), nullable=False),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'disconnected'")),
        sa.Column("is_ai_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("qr_code", sa.Text(), nullable=True),
        _jsonb("session_data", nullable=True),
        sa.Column("last_connected_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_whatsapp_instances_user_id", "whatsapp_instances", ["user_id"], unique=False)
    op.create_index("ix_whatsapp_instances_status", "whatsapp_instances", ["status"], unique=False)

    op.create_table(
        "whatsapp_contacts",
        _uuid("id", nullable=False),
        _uuid("instance_id", nullable=False),
        sa.Column("phone_number", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("profile_pic_url", sa.String(), nullable=True),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("unread_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.ForeignKeyConstraint(["instance_id"], ["whatsapp_instances.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("instance_id", "phone_number", name="uq_whatsapp_contacts_instance_phone"),
    )
    op.create_index("ix_whatsapp_contacts_instance_id", "whatsapp_contacts", ["instance_id"], unique=False)

    op.create_table(
        "whatsapp_messages",
        _uuid("id", nullable=False),
        _uuid("instance_id", nullable=False),
        _uuid("contact_id", nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("is_from_me", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_ai_response", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("media_type", sa.String(), nullable=True),
        sa.Column("media_url", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=True, server_default=sa.text("'sent'")),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True, server_default=sa.text("now()")),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["instance_id"], ["whatsapp_instances.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["contact_id"], ["whatsapp_contacts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_whatsapp_messages_instance_id", "whatsapp_messages", ["instance_id"], unique=False)
    op.create_index("ix_whatsapp_messages_contact_id", "whatsapp_messages", ["contact_id"], unique=False)
    op.create_index("ix_whatsapp_messages_timestamp", "whatsapp_messages", ["timestamp"], unique=False)

    op.create_table(
        "ai_configs",
        _uuid("id", nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("ai_name", sa.String(), nullable=True),
        sa.Column("welcome_message", sa.Text(), nullable=True),
        sa.Column("tone", sa.String(), nullable=True),
        sa.Column("formality_level", sa.Integer(), nullable=True),
        _jsonb("allowed_emojis", nullable=True),
        _jsonb("business_hours", nullable=True),
        _jsonb("knowledge_base", nullable=True),
        _jsonb("faqs", nullable=True),
        _jsonb("triggers", nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ai_configs_user_id", "ai_configs", ["user_id"], unique=True)

    op.create_table(
        "tickets",
        _uuid("id", nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("priority", sa.String(), nullable=False, server_default=sa.text("'normal'")),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'open'")),
        _uuid("assigned_admin_id", nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tickets_user_id", "tickets", ["user_id"], unique=False)
    op.create_index("ix_tickets_status", "tickets", ["status"], unique=False)

    op.create_table(
        "ticket_messages",
        _uuid("id", nullable=False),
        _uuid("ticket_id", nullable=False),
        _uuid("sender_id", nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("attachment_url", sa.String(), nullable=True),
        sa.Column("is_system_message", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["ticket_id"], ["tickets.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ticket_messages_ticket_id", "ticket_messages", ["ticket_id"], unique=False)

    op.create_table(
        "announcements",
        _uuid("id", nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(), nullable=False, server_default=sa.text("'normal'")),
        _uuid("created_by", nullable=False),
        sa.Column("target_all", sa.Boolean(), nullable=False, server_default=sa.true()),
        _jsonb("target_plans", nullable=False, server_default=sa.text("'[]'::jsonb")),
        _jsonb("target_users", nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("attachment_url", sa.String(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_announcements_created_at", "announcements", ["created_at"], unique=False)

    op.create_table(
        "announcement_reads",
        _uuid("id", nullable=False),
        _uuid("announcement_id", nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["announcement_id"], ["announcements.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("announcement_id", "user_id", name="uq_announcement_reads_announcement_user"),
    )
    op.create_index("ix_announcement_reads_announcement_id", "announcement_reads", ["announcement_id"], unique=False)
    op.create_index("ix_announcement_reads_user_id", "announcement_reads", ["user_id"], unique=False)

    op.create_table(
        "system_logs",
        _uuid("id", nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        _uuid("user_id", nullable=True),
        _jsonb("details", nullable=True),
        sa.Column("ip_address", sa.String(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_system_logs_user_id", "system_logs", ["user_id"], unique=False)
    op.create_index("ix_system_logs_created_at", "system_logs", ["created_at"], unique=False)


def downgrade() -> None:
    for table in (
        "system_logs",
        "announcement_reads",
        "announcements",
        "ticket_messages",
        "tickets",
        "ai_configs",
        "whatsapp_messages",
        "whatsapp_contacts",
        "whatsapp_instances",
        "admins",
        "clients",
        "account_requests",
        "profiles",
        "user_roles",
        "auth_users",
    ):
        op.drop_table(table)
