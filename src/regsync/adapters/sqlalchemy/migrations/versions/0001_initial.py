"""Initial company, roster, contact and audit tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from regsync.domain.model import (
    AuditAction,
    CompanyStatus,
    EntityType,
    IdentificationType,
    OfficerRole,
    ShareholderType,
)

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _roster_columns() -> list[sa.Column[object]]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("contact_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "identification_type",
            sa.Enum(IdentificationType, native_enum=False),
            nullable=True,
        ),
        sa.Column("identification_number", sa.String(length=64), nullable=True),
        sa.Column("nationality", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("cessation_date", sa.Date(), nullable=True),
        sa.Column("is_current", sa.Boolean(), nullable=False),
    ]


def _roster_constraints(table: str) -> list[sa.Constraint]:
    return [
        sa.ForeignKeyConstraint(
            ["company_id"],
            ["company.id"],
            name=op.f(f"fk_{table}_company_id_company"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["contact_id"],
            ["contact.id"],
            name=op.f(f"fk_{table}_contact_id_contact"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f(f"pk_{table}")),
    ]


def upgrade() -> None:
    op.create_table(
        "company",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("registration_number", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("former_name", sa.String(), nullable=True),
        sa.Column("entity_type", sa.Enum(EntityType, native_enum=False), nullable=False),
        sa.Column("status", sa.Enum(CompanyStatus, native_enum=False), nullable=False),
        sa.Column("status_date", sa.Date(), nullable=True),
        sa.Column("incorporation_date", sa.Date(), nullable=True),
        sa.Column("primary_activity_code", sa.String(length=16), nullable=True),
        sa.Column("primary_activity_description", sa.String(), nullable=True),
        sa.Column("secondary_activity_code", sa.String(length=16), nullable=True),
        sa.Column("secondary_activity_description", sa.String(), nullable=True),
        sa.Column("registered_address", sa.String(), nullable=True),
        sa.Column("home_currency", sa.String(length=8), nullable=True),
        sa.Column("paid_up_capital_amount", sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column("paid_up_capital_currency", sa.String(length=8), nullable=True),
        sa.Column("issued_capital_amount", sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column("issued_capital_currency", sa.String(length=8), nullable=True),
        sa.Column("financial_year_end_day", sa.Integer(), nullable=True),
        sa.Column("financial_year_end_month", sa.Integer(), nullable=True),
        sa.Column("last_agm_date", sa.Date(), nullable=True),
        sa.Column("last_annual_return_date", sa.Date(), nullable=True),
        sa.Column("accounts_due_date", sa.Date(), nullable=True),
        sa.Column("tax_registration_number", sa.String(length=32), nullable=True),
        sa.Column("tax_registration_date", sa.Date(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("last_modified_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_company")),
        sa.UniqueConstraint("registration_number", name=op.f("uq_company_registration_number")),
    )

    op.create_table(
        "contact",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("identification_number", sa.String(length=64), nullable=True),
        sa.Column("confirmed_names", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_contact")),
    )

    op.create_table(
        "officer",
        *_roster_columns(),
        sa.Column("role", sa.Enum(OfficerRole, native_enum=False), nullable=False),
        sa.Column("designation", sa.String(), nullable=True),
        sa.Column("appointment_date", sa.Date(), nullable=True),
        *_roster_constraints("officer"),
    )
    op.create_index("ix_officer_company_current", "officer", ["company_id", "is_current"])

    op.create_table(
        "shareholder",
        *_roster_columns(),
        sa.Column("share_class", sa.String(length=64), nullable=False),
        sa.Column(
            "shareholder_type", sa.Enum(ShareholderType, native_enum=False), nullable=False
        ),
        sa.Column("place_of_origin", sa.String(), nullable=True),
        sa.Column("number_of_shares", sa.Integer(), nullable=False),
        sa.Column("percentage_held", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column("currency", sa.String(length=8), nullable=True),
        *_roster_constraints("shareholder"),
    )
    op.create_index(
        "ix_shareholder_company_current", "shareholder", ["company_id", "is_current"]
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("subject", sa.String(length=32), nullable=False),
        sa.Column("summary", sa.String(), nullable=False),
        sa.Column("action", sa.Enum(AuditAction, native_enum=False), nullable=False),
        sa.Column("actor", sa.String(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["company_id"],
            ["company.id"],
            name=op.f("fk_audit_log_company_id_company"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_audit_log")),
    )
    op.create_index(op.f("ix_audit_log_company_id"), "audit_log", ["company_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_audit_log_company_id"), table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_shareholder_company_current", table_name="shareholder")
    op.drop_table("shareholder")
    op.drop_index("ix_officer_company_current", table_name="officer")
    op.drop_table("officer")
    op.drop_table("contact")
    op.drop_table("company")
