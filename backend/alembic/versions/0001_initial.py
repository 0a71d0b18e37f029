"""Directory, leave balances, time-off requests and audit log.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "employee",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("employee_number", sa.String(length=50), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("job_title", sa.String(length=150), nullable=False),
        sa.Column("department", sa.String(length=150), nullable=False),
        sa.Column("role", sa.String(length=50), server_default="Employee", nullable=False),
        sa.Column("employment_status", sa.String(length=50), server_default="Active", nullable=False),
        sa.Column("contract_type", sa.String(length=50), nullable=False),
        sa.Column("work_location", sa.String(length=150), nullable=True),
        sa.Column("reports_to", sa.Uuid(), nullable=True),
        sa.Column("date_of_joining", sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(["reports_to"], ["employee.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_employee_created_at", "employee", ["created_at"])
    op.create_index("ix_employee_employee_number", "employee", ["employee_number"], unique=True)
    op.create_index("ix_employee_reports_to", "employee", ["reports_to"])
    op.create_index("ix_employee_department_role", "employee", ["department", "role"])

    op.create_table(
        "employee_leave_balance",
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("leave_type", sa.String(length=50), nullable=False),
        sa.Column("days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.ForeignKeyConstraint(["employee_id"], ["employee.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("employee_id", "leave_type"),
        sa.CheckConstraint("days >= 0", name="ck_leave_balance_non_negative"),
    )

    op.create_table(
        "time_off_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("time_off_type", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=50), server_default="Pending", nullable=False),
        sa.Column("starts_at", sa.Date(), nullable=False),
        sa.Column("ends_at", sa.Date(), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(length=500), nullable=True),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_note", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employee.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["employee.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("ends_at >= starts_at", name="ck_time_off_range"),
    )
    op.create_index("ix_time_off_request_created_at", "time_off_request", ["created_at"])
    op.create_index("ix_time_off_request_employee_id", "time_off_request", ["employee_id"])
    op.create_index("ix_time_off_request_time_off_type", "time_off_request", ["time_off_type"])
    op.create_index("ix_time_off_request_status", "time_off_request", ["status"])
    op.create_index("ix_time_off_employee_range", "time_off_request", ["employee_id", "starts_at", "ends_at"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_actor_id", "audit_log", ["actor_id"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("time_off_request")
    op.drop_table("employee_leave_balance")
    op.drop_table("employee")
