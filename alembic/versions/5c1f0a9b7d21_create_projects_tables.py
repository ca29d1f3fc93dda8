"""create projects and line tables

Revision ID: 5c1f0a9b7d21
Revises:
Create Date: 2026-10-19 09:12:40.118204

Base schema: projects with their crew (development) and gear (production)
lines. Skips tables that already exist so databases built by create_all()
can run it unstamped.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1f0a9b7d21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    insp = sa.inspect(bind)
    return table_name in insp.get_table_names()


def _line_columns(label_column):
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("project_id", sa.String(), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(label_column, sa.String(), nullable=False),
        sa.Column("qty", sa.Float(), nullable=False, server_default="1"),
        sa.Column("days", sa.Float(), nullable=False, server_default="1"),
        sa.Column("rate_per_day", sa.Float(), nullable=False, server_default="0"),
        sa.Column("line_total", sa.Float(), nullable=False, server_default="0"),
    ]


def upgrade() -> None:
    if not _table_exists("projects"):
        op.create_table(
            "projects",
            sa.Column("id", sa.String(), primary_key=True),
            sa.Column("type", sa.String(), nullable=False),
            sa.Column("title", sa.String(), nullable=True),
            sa.Column("client_name", sa.String(), nullable=True),
            sa.Column("duration_min", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("delivery_days", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("flags", sa.JSON(), nullable=True),
            sa.Column("outputs", sa.JSON(), nullable=True),
            sa.Column("brief", sa.Text(), nullable=True),
            sa.Column("oop_transport", sa.Float(), nullable=True),
            sa.Column("oop_fnb", sa.Float(), nullable=True),
            sa.Column("oop_misc", sa.Float(), nullable=True),
            sa.Column("complexity_answers", sa.JSON(), nullable=False),
            sa.Column("weighted_score", sa.Float(), nullable=False, server_default="0"),
            sa.Column("complexity_multiplier", sa.Float(), nullable=False, server_default="1"),
            sa.Column("income_goal", sa.Float(), nullable=True),
            sa.Column("living_cost", sa.Float(), nullable=True),
            sa.Column("skill_level", sa.String(), nullable=True),
            sa.Column("profit_margin_pct", sa.Float(), nullable=True),
            sa.Column("base_crew", sa.Float(), nullable=False, server_default="0"),
            sa.Column("base_gear", sa.Float(), nullable=False, server_default="0"),
            sa.Column("base_oop", sa.Float(), nullable=False, server_default="0"),
            sa.Column("base_cost", sa.Float(), nullable=False, server_default="0"),
            sa.Column("skill_multiplier", sa.Float(), nullable=False, server_default="1"),
            sa.Column("subtotal", sa.Float(), nullable=False, server_default="0"),
            sa.Column("contingency_pct", sa.Float(), nullable=False, server_default="0.05"),
            sa.Column("contingency", sa.Float(), nullable=False, server_default="0"),
            sa.Column("grand_total", sa.Float(), nullable=False, server_default="0"),
            sa.Column("client_price", sa.Float(), nullable=True),
            sa.Column("nett_profit", sa.Float(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
        )
        op.create_index("idx_projects_type_created_at", "projects", ["type", "created_at"])

    if not _table_exists("project_crew_lines"):
        op.create_table("project_crew_lines", *_line_columns("role"))
        op.create_index("ix_project_crew_lines_id", "project_crew_lines", ["id"])

    if not _table_exists("project_gear_lines"):
        op.create_table("project_gear_lines", *_line_columns("name"))
        op.create_index("ix_project_gear_lines_id", "project_gear_lines", ["id"])


def downgrade() -> None:
    op.drop_table("project_gear_lines")
    op.drop_table("project_crew_lines")
    op.drop_index("idx_projects_type_created_at", table_name="projects")
    op.drop_table("projects")
