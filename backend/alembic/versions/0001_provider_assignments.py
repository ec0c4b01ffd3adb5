"""reference and staging tables for provider assignment resolution

Revision ID: 0001_provider_assignments
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_provider_assignments"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "facilities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("abbreviation", sa.String(length=20), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "providers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("title", sa.String(length=50), nullable=True),
        sa.Column(
            "type",
            sa.Enum("physician", "nurse_practitioner", name="provider_type"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_providers_last_name", "providers", ["last_name"], unique=False)

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "patient_facilities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("facility_id", sa.Integer(), sa.ForeignKey("facilities.id"), nullable=False),
        sa.Column("mrn", sa.String(length=50), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_patient_facilities_facility_mrn",
        "patient_facilities",
        ["facility_id", "mrn"],
        unique=False,
    )

    statuses = op.create_table(
        "hospitalization_statuses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("code", name="uq_hospitalization_statuses_code"),
    )
    op.bulk_insert(
        statuses,
        [
            {"id": 1, "code": "NO_PSYCH_EVAL", "name": "No psych evaluation required", "display_order": 1},
            {"id": 2, "code": "PENDING_PSYCH_EVAL", "name": "Pending psych evaluation", "display_order": 2},
            {"id": 3, "code": "PSYCH_EVAL_COMPLETE", "name": "Psych evaluation complete", "display_order": 3},
            {"id": 4, "code": "DISCHARGED", "name": "Discharged", "display_order": 4},
        ],
    )

    op.create_table(
        "hospitalizations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("case_id", sa.Integer(), nullable=False),
        sa.Column("facility_id", sa.Integer(), sa.ForeignKey("facilities.id"), nullable=False),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("admission_date", sa.DateTime(timezone=False), nullable=False),
        sa.Column("discharge_date", sa.DateTime(timezone=False), nullable=True),
        sa.Column(
            "hospitalization_status_id",
            sa.Integer(),
            sa.ForeignKey("hospitalization_statuses.id"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("facility_id", "case_id", name="uq_hospitalizations_facility_case"),
    )
    op.create_index("ix_hospitalizations_facility_id", "hospitalizations", ["facility_id"])
    op.create_index("ix_hospitalizations_patient_id", "hospitalizations", ["patient_id"])

    op.create_table(
        "visits",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "hospitalization_id",
            sa.Integer(),
            sa.ForeignKey("hospitalizations.id"),
            nullable=False,
        ),
        sa.Column("date_serviced", sa.Date(), nullable=False),
        sa.Column("room", sa.String(length=20), nullable=True),
        sa.Column("bed", sa.String(length=5), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_visits_hospitalization_date",
        "visits",
        ["hospitalization_id", "date_serviced"],
        unique=False,
    )

    op.create_table(
        "staging_provider_assignment_batches",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("facility_id", sa.Integer(), sa.ForeignKey("facilities.id"), nullable=False),
        sa.Column("service_date", sa.Date(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "pending",
                "imported",
                "resolved",
                "failed",
                name="provider_assignment_batch_status",
            ),
            nullable=False,
            server_default="pending",
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_staging_provider_assignment_batches_facility_date",
        "staging_provider_assignment_batches",
        ["facility_id", "service_date"],
    )
    op.create_index(
        "ix_staging_provider_assignment_batches_status",
        "staging_provider_assignment_batches",
        ["status"],
    )

    op.create_table(
        "staging_provider_assignments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("batch_id", sa.Uuid(), nullable=False),
        sa.Column("facility_id", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("service_date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("attending_md", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("nurse_practitioner", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("hospital_number", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("mrn", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("admit", sa.DateTime(timezone=False), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("location", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("insurance", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("is_cleared", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("h_p", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("psych_eval", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("normalized_patient_last_name", sa.String(length=100), nullable=True),
        sa.Column("normalized_patient_first_name", sa.String(length=100), nullable=True),
        sa.Column("normalized_physician_last_name", sa.String(length=100), nullable=True),
        sa.Column("normalized_nurse_practitioner_last_name", sa.String(length=100), nullable=True),
        sa.Column("room", sa.String(length=20), nullable=True),
        sa.Column("bed", sa.String(length=5), nullable=True),
        sa.Column("resolved_physician_id", sa.Integer(), sa.ForeignKey("providers.id"), nullable=True),
        sa.Column(
            "resolved_nurse_practitioner_id",
            sa.Integer(),
            sa.ForeignKey("providers.id"),
            nullable=True,
        ),
        sa.Column("resolved_patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=True),
        sa.Column(
            "resolved_hospitalization_id",
            sa.Integer(),
            sa.ForeignKey("hospitalizations.id"),
            nullable=True,
        ),
        sa.Column(
            "resolved_hospitalization_status_id",
            sa.Integer(),
            sa.ForeignKey("hospitalization_statuses.id"),
            nullable=True,
        ),
        sa.Column("resolved_visit_id", sa.Integer(), sa.ForeignKey("visits.id"), nullable=True),
        sa.Column("should_import", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("imported", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("validation_errors", sa.Text(), nullable=True),
        sa.Column("exclusion_reason", sa.String(length=500), nullable=True),
        sa.Column("patient_was_created", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "patient_facility_was_created",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("physician_was_created", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "nurse_practitioner_was_created",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "hospitalization_was_created",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_staging_provider_assignments_batch",
        "staging_provider_assignments",
        ["batch_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_staging_provider_assignments_batch", table_name="staging_provider_assignments")
    op.drop_table("staging_provider_assignments")
    op.drop_index(
        "ix_staging_provider_assignment_batches_status",
        table_name="staging_provider_assignment_batches",
    )
    op.drop_index(
        "ix_staging_provider_assignment_batches_facility_date",
        table_name="staging_provider_assignment_batches",
    )
    op.drop_table("staging_provider_assignment_batches")
    op.drop_index("ix_visits_hospitalization_date", table_name="visits")
    op.drop_table("visits")
    op.drop_index("ix_hospitalizations_patient_id", table_name="hospitalizations")
    op.drop_index("ix_hospitalizations_facility_id", table_name="hospitalizations")
    op.drop_table("hospitalizations")
    op.drop_table("hospitalization_statuses")
    op.drop_index("ix_patient_facilities_facility_mrn", table_name="patient_facilities")
    op.drop_table("patient_facilities")
    op.drop_table("patients")
    op.drop_index("ix_providers_last_name", table_name="providers")
    op.drop_table("providers")
    op.drop_table("facilities")
    op.execute("DROP TYPE IF EXISTS provider_assignment_batch_status")
    op.execute("DROP TYPE IF EXISTS provider_type")
