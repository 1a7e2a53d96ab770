"""initial

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

# SQLAlchemy persists Python enum members by name.
PERMISSION_CATEGORIES = ("USERS", "CAMPAIGNS", "PROGRAMS", "WALLET", "DASHBOARD", "SETTINGS", "ALL_ACCESS")
PERMISSION_LEVELS = ("READ", "WRITE", "ADMIN", "FULL")
CAMPAIGN_STATUSES = ("DRAFT", "ACTIVE", "EXPIRED")
ENROLLMENT_STATUSES = ("PENDING", "REDEEMED", "EXPIRED")
WITHDRAWAL_METHODS = ("MPESA", "BANK", "PAYBILL")
WITHDRAWAL_STATUSES = ("PENDING", "PROCESSING", "COMPLETED", "FAILED", "CANCELLED")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade():
    op.create_table(
        "permissions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("category", sa.Enum(*PERMISSION_CATEGORIES, name="permissioncategory"), nullable=False),
        sa.Column("level", sa.Enum(*PERMISSION_LEVELS, name="permissionlevel"), nullable=False),
        sa.Column("is_default", sa.Boolean, nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("ix_permissions_key", "permissions", ["key"], unique=True)
    op.create_index("ix_permissions_category_level", "permissions", ["category", "level"], unique=False)

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_system_role", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_roles_name", "roles", ["name"], unique=True)

    op.create_table(
        "role_permissions",
        sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("permission_id", sa.Integer, sa.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "partners",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("username", sa.String(128), nullable=True),
        sa.Column("is_first_login", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_partners_email", "partners", ["email"], unique=True)

    op.create_table(
        "partner_permissions",
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("permission_id", sa.Integer, sa.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("role", sa.String(64), nullable=False),
        sa.Column("extension", sa.String(64), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("is_account_activated", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("is_first_login", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_extension", "users", ["extension"], unique=True)
    op.create_index("ix_users_partner_id", "users", ["partner_id"], unique=False)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "user_permissions",
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("permission_id", sa.Integer, sa.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_sessions_token", "sessions", ["token"], unique=True)
    op.create_index("ix_sessions_user_id", "sessions", ["user_id"], unique=False)

    op.create_table(
        "curricula",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "programs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("curriculum_id", sa.Integer, sa.ForeignKey("curricula.id", ondelete="SET NULL"), nullable=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("pricing", sa.Numeric(12, 2), nullable=False),
        sa.Column("timetable", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_programs_curriculum_id", "programs", ["curriculum_id"], unique=False)

    op.create_table(
        "program_subjects",
        sa.Column("program_id", sa.Integer, sa.ForeignKey("programs.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("subject_id", sa.Integer, sa.ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "channels",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("subchannels", sa.JSON, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_channels_code", "channels", ["code"], unique=True)
    op.create_index("ix_channels_partner_id", "channels", ["partner_id"], unique=False)

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("program_id", sa.Integer, sa.ForeignKey("programs.id"), nullable=False),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("promo_code", sa.String(64), nullable=False),
        sa.Column("target_signups", sa.Integer, nullable=False),
        sa.Column("daily_target", sa.Integer, nullable=False),
        sa.Column("bundle_min_lessons", sa.Integer, nullable=False),
        sa.Column("bundle_total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("price_per_lesson", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_min_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("revenue_projection", sa.Numeric(14, 2), nullable=False),
        sa.Column("partner_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("sqooli_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("whatsapp_number", sa.String(32), nullable=False),
        sa.Column("duration_start", sa.Date, nullable=False),
        sa.Column("duration_end", sa.Date, nullable=False),
        sa.Column("status", sa.Enum(*CAMPAIGN_STATUSES, name="campaignstatus"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_campaigns_promo_code", "campaigns", ["promo_code"], unique=True)
    op.create_index("ix_campaigns_partner_id", "campaigns", ["partner_id"], unique=False)
    op.create_index("ix_campaigns_program_id", "campaigns", ["program_id"], unique=False)

    op.create_table(
        "promo_codes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("campaign_id", sa.Integer, sa.ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("label", sa.String(128), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_promo_codes_code", "promo_codes", ["code"], unique=True)
    op.create_index("ix_promo_codes_campaign_id", "promo_codes", ["campaign_id"], unique=False)

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("student_name", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("mpesa_code", sa.String(64), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("campaign_code", sa.String(64), nullable=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_transactions_mpesa_code", "transactions", ["mpesa_code"], unique=True)
    op.create_index("ix_transactions_partner_status", "transactions", ["partner_id", "status"], unique=False)
    op.create_index("ix_transactions_phone_number", "transactions", ["phone_number"], unique=False)

    op.create_table(
        "program_enrollments",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("program_id", sa.Integer, sa.ForeignKey("programs.id"), nullable=False),
        sa.Column("campaign_id", sa.Integer, sa.ForeignKey("campaigns.id"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("redeem_code", sa.String(32), nullable=False),
        sa.Column("transaction_id", sa.Integer, sa.ForeignKey("transactions.id"), nullable=True, unique=True),
        sa.Column("status", sa.Enum(*ENROLLMENT_STATUSES, name="enrollmentstatus"), nullable=False),
        sa.Column("meta", sa.JSON, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_program_enrollments_redeem_code", "program_enrollments", ["redeem_code"], unique=False)
    op.create_index("ix_program_enrollments_campaign_id", "program_enrollments", ["campaign_id"], unique=False)
    op.create_index("ix_program_enrollments_program_id", "program_enrollments", ["program_id"], unique=False)

    op.create_table(
        "partner_revenue_logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=False),
        sa.Column("campaign_id", sa.Integer, sa.ForeignKey("campaigns.id"), nullable=True),
        sa.Column("transaction_id", sa.Integer, sa.ForeignKey("transactions.id"), nullable=False, unique=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("gross_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("split_timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_partner_revenue_logs_partner_id", "partner_revenue_logs", ["partner_id"], unique=False)
    op.create_index("ix_partner_revenue_logs_campaign_id", "partner_revenue_logs", ["campaign_id"], unique=False)

    op.create_table(
        "wallets",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=False),
        sa.Column("account_number", sa.String(64), nullable=False),
        sa.Column("balance", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("pending_balance", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("lifetime_earnings", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("withdrawal_method", sa.Enum(*WITHDRAWAL_METHODS, name="withdrawalmethod"), nullable=False),
        sa.Column("bank_name", sa.String(128), nullable=True),
        sa.Column("branch", sa.String(128), nullable=True),
        sa.Column("paybill_number", sa.String(32), nullable=True),
        sa.Column("beneficiaries", sa.JSON, nullable=False),
        sa.Column("pin_hash", sa.String(255), nullable=False),
        sa.Column("pin_set_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_setup_complete", sa.Boolean, nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("ix_wallets_partner_id", "wallets", ["partner_id"], unique=True)

    op.create_table(
        "withdrawal_limits",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=True),
        sa.Column("min_withdrawal_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("max_withdrawal_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("daily_limit", sa.Numeric(14, 2), nullable=False),
        sa.Column("monthly_limit", sa.Numeric(14, 2), nullable=False),
        sa.Column("processing_days", sa.Integer, nullable=False, server_default="3"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index(
        "ix_withdrawal_limits_partner_active", "withdrawal_limits", ["partner_id", "is_active"], unique=False
    )

    op.create_table(
        "withdrawals",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=False),
        sa.Column("wallet_id", sa.Integer, sa.ForeignKey("wallets.id"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "withdrawal_method",
            postgresql.ENUM(*WITHDRAWAL_METHODS, name="withdrawalmethod", create_type=False),
            nullable=False,
        ),
        sa.Column("account_number", sa.String(64), nullable=False),
        sa.Column("bank_name", sa.String(128), nullable=True),
        sa.Column("paybill_number", sa.String(32), nullable=True),
        sa.Column("reference", sa.String(64), nullable=False),
        sa.Column("status", sa.Enum(*WITHDRAWAL_STATUSES, name="withdrawalstatus"), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_withdrawals_reference", "withdrawals", ["reference"], unique=True)
    op.create_index("ix_withdrawals_partner_status", "withdrawals", ["partner_id", "status"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=True),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("entity_type", sa.String(64), nullable=False),
        sa.Column("entity_id", sa.String(64), nullable=True),
        sa.Column("details", sa.Text, nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"], unique=False)
    op.create_index("ix_audit_logs_partner_id", "audit_logs", ["partner_id"], unique=False)
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("partner_id", sa.Integer, sa.ForeignKey("partners.id"), nullable=False),
        sa.Column("type", sa.String(32), nullable=False, server_default="info"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_notifications_partner_read", "notifications", ["partner_id", "is_read"], unique=False)


def downgrade():
    op.drop_table("notifications")
    op.drop_table("audit_logs")
    op.drop_table("withdrawals")
    op.drop_table("withdrawal_limits")
    op.drop_table("wallets")
    op.drop_table("partner_revenue_logs")
    op.drop_table("program_enrollments")
    op.drop_table("transactions")
    op.drop_table("promo_codes")
    op.drop_table("campaigns")
    op.drop_table("channels")
    op.drop_table("program_subjects")
    op.drop_table("programs")
    op.drop_table("subjects")
    op.drop_table("curricula")
    op.drop_table("sessions")
    op.drop_table("user_permissions")
    op.drop_table("users")
    op.drop_table("partner_permissions")
    op.drop_table("partners")
    op.drop_table("role_permissions")
    op.drop_table("roles")
    op.drop_table("permissions")
    for name in (
        "withdrawalstatus",
        "withdrawalmethod",
        "enrollmentstatus",
        "campaignstatus",
        "permissionlevel",
        "permissioncategory",
    ):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
