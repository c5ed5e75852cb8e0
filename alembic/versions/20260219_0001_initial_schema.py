"""Initial schema

Revision ID: 20260219_0001
Revises:
Create Date: 2026-02-19 22:10:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260219_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


role_enum = sa.Enum("student", "teacher_applicant", "teacher", "admin", name="role_enum", native_enum=False)
account_status_enum = sa.Enum(
    "active",
    "suspended",
    "locked",
    "deactivated",
    name="account_status_enum",
    native_enum=False,
)
application_status_enum = sa.Enum(
    "pending",
    "approved",
    "rejected",
    name="application_status_enum",
    native_enum=False,
)

CREDENTIAL_TABLES = (
    "teacher_work_experiences",
    "teacher_learning_experiences",
    "teacher_certificates",
)


def _id_col() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _serial_id_col() -> sa.Column:
    return sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def _credential_cols(table_name: str) -> list:
    return [
        _serial_id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("start_year", sa.Integer(), nullable=False),
        sa.Column("start_month", sa.Integer(), nullable=False),
        sa.Column("end_year", sa.Integer(), nullable=True),
        sa.Column("end_month", sa.Integer(), nullable=True),
        sa.Column("file_path", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["application_id"],
            ["teacher_applications.id"],
            name=f"fk_{table_name}_application_id_teacher_applications",
            ondelete="CASCADE",
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        sa.Column("account_status", account_status_enum, nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=False)

    op.create_table(
        "user_roles",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("granted_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_user_roles_user_id_users", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["granted_by"],
            ["users.id"],
            name="fk_user_roles_granted_by_users",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_id_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"], unique=False)

    op.create_table(
        "main_categories",
        _serial_id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("icon_url", sa.String(length=500), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("name", name="uq_main_categories_name"),
    )

    op.create_table(
        "sub_categories",
        _serial_id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("main_category_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(
            ["main_category_id"],
            ["main_categories.id"],
            name="fk_sub_categories_main_category_id_main_categories",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_sub_categories_main_category_id", "sub_categories", ["main_category_id"], unique=False)

    op.create_table(
        "teacher_applications",
        _serial_id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("city", sa.String(length=50), nullable=False),
        sa.Column("district", sa.String(length=50), nullable=False),
        sa.Column("address", sa.String(length=200), nullable=False),
        sa.Column("main_category_id", sa.Integer(), nullable=False),
        sa.Column("sub_category_ids", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("introduction", sa.Text(), nullable=False),
        sa.Column("status", application_status_enum, nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewer_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_teacher_applications_user_id_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["main_category_id"],
            ["main_categories.id"],
            name="fk_teacher_applications_main_category_id_main_categories",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["reviewer_id"],
            ["users.id"],
            name="fk_teacher_applications_reviewer_id_users",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("uuid", name="uq_teacher_applications_uuid"),
        sa.UniqueConstraint("user_id", name="uq_teacher_applications_user_id"),
    )
    op.create_index(
        "ix_teacher_applications_main_category_id",
        "teacher_applications",
        ["main_category_id"],
        unique=False,
    )
    op.create_index("ix_teacher_applications_status", "teacher_applications", ["status"], unique=False)

    op.create_table(
        "teacher_work_experiences",
        *_credential_cols("teacher_work_experiences"),
        sa.Column("is_working", sa.Boolean(), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("workplace", sa.String(length=200), nullable=False),
        sa.Column("job_category", sa.String(length=100), nullable=False),
        sa.Column("job_title", sa.String(length=100), nullable=False),
    )

    op.create_table(
        "teacher_learning_experiences",
        *_credential_cols("teacher_learning_experiences"),
        sa.Column("is_in_school", sa.Boolean(), nullable=False),
        sa.Column("degree", sa.String(length=50), nullable=False),
        sa.Column("school_name", sa.String(length=200), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("region", sa.String(length=50), nullable=True),
    )

    op.create_table(
        "teacher_certificates",
        *_credential_cols("teacher_certificates"),
        sa.Column("no_expiry", sa.Boolean(), nullable=False),
        sa.Column("verifying_institution", sa.String(length=200), nullable=False),
        sa.Column("license_name", sa.String(length=200), nullable=False),
        sa.Column("holder_name", sa.String(length=100), nullable=False),
        sa.Column("license_number", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("subject", sa.String(length=100), nullable=False),
    )
    op.create_index(
        "ix_teacher_certificates_license_number",
        "teacher_certificates",
        ["license_number"],
        unique=False,
    )

    for table_name in CREDENTIAL_TABLES:
        op.create_index(f"ix_{table_name}_application_id", table_name, ["application_id"], unique=False)
        op.create_index(
            f"ix_{table_name}_application_created",
            table_name,
            ["application_id", "created_at"],
            unique=False,
        )

    op.create_table(
        "admin_actions",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("admin_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("action", sa.String(length=128), nullable=False),
        sa.Column("target_type", sa.String(length=128), nullable=False),
        sa.Column("target_id", sa.String(length=128), nullable=True),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.ForeignKeyConstraint(
            ["admin_id"],
            ["users.id"],
            name="fk_admin_actions_admin_id_users",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_admin_actions_admin_id", "admin_actions", ["admin_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_admin_actions_admin_id", table_name="admin_actions")
    op.drop_table("admin_actions")

    for table_name in reversed(CREDENTIAL_TABLES):
        op.drop_index(f"ix_{table_name}_application_created", table_name=table_name)
        op.drop_index(f"ix_{table_name}_application_id", table_name=table_name)
    op.drop_index("ix_teacher_certificates_license_number", table_name="teacher_certificates")
    for table_name in reversed(CREDENTIAL_TABLES):
        op.drop_table(table_name)

    op.drop_index("ix_teacher_applications_status", table_name="teacher_applications")
    op.drop_index("ix_teacher_applications_main_category_id", table_name="teacher_applications")
    op.drop_table("teacher_applications")

    op.drop_index("ix_sub_categories_main_category_id", table_name="sub_categories")
    op.drop_table("sub_categories")
    op.drop_table("main_categories")

    op.drop_index("ix_user_roles_user_id", table_name="user_roles")
    op.drop_table("user_roles")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
