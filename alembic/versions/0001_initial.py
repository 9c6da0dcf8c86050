"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("uid", sa.String(length=36), nullable=False),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("total_generated_reports", sa.Integer(), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("average_generation_time", sa.Float(), nullable=True),
    )
    op.create_index("ix_reports_id", "reports", ["id"])
    op.create_unique_constraint("uq_reports_title", "reports", ["title"])

    op.create_table(
        "report",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reports_id", sa.Integer(), sa.ForeignKey("reports.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("uid", sa.String(length=36), nullable=False),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("object_name", sa.String(), nullable=False),
        sa.Column("mime_type", sa.String(), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("total_downloads", sa.Integer(), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("average_generation_time", sa.Float(), nullable=True),
    )
    op.create_index("ix_report_id", "report", ["id"])
    op.create_unique_constraint("uq_report_uid", "report", ["uid"])


def downgrade() -> None:
    op.drop_constraint("uq_report_uid", "report", type_="unique")
    op.drop_index("ix_report_id", table_name="report")
    op.drop_table("report")
    op.drop_constraint("uq_reports_title", "reports", type_="unique")
    op.drop_index("ix_reports_id", table_name="reports")
    op.drop_table("reports")
