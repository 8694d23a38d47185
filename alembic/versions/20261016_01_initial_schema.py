"""Initial print desk schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261016_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "counter",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("value", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )

    op.create_table(
        "print_job",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("submitter_id", sa.String(length=128), nullable=False),
        sa.Column("submitter_email", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("submitter_role", sa.String(length=16), nullable=False),
        sa.Column("slot_id", sa.String(length=8), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("copies", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("color_mode", sa.String(length=8), nullable=False),
        sa.Column("sided", sa.String(length=8), nullable=False),
        sa.Column("stapled", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("instructions", sa.Text()),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_print_job_status_submitted_at", "print_job", ["status", "submitted_at"]
    )
    op.create_index(
        "ix_print_job_submitter_submitted_at",
        "print_job",
        ["submitter_id", "submitted_at"],
    )

    op.create_table(
        "print_job_file",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "job_id",
            sa.String(length=64),
            sa.ForeignKey("print_job.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("file_url", sa.String(length=1024), nullable=False),
        sa.Column("storage_path", sa.String(length=512), nullable=False),
        sa.Column("content_type", sa.String(length=128)),
        sa.Column("size_bytes", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_print_job_file_job_id", "print_job_file", ["job_id"])


def downgrade() -> None:
    op.drop_index("ix_print_job_file_job_id", table_name="print_job_file")
    op.drop_table("print_job_file")
    op.drop_index("ix_print_job_submitter_submitted_at", table_name="print_job")
    op.drop_index("ix_print_job_status_submitted_at", table_name="print_job")
    op.drop_table("print_job")
    op.drop_table("counter")
