"""create work hours tables

Revision ID: 3b1e7c2d9a10
Revises:
Create Date: 2026-10-18 09:12:44.201733

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3b1e7c2d9a10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_employees_id", "employees", ["id"], unique=False)

    op.create_table(
        "work_types",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.UniqueConstraint("name", name="uq_work_types_name"),
    )
    op.create_index("ix_work_types_id", "work_types", ["id"], unique=False)

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint("name", name="uq_projects_name"),
    )
    op.create_index("ix_projects_id", "projects", ["id"], unique=False)

    op.create_table(
        "work_hours",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("work_type_id", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("comment", sa.String(), nullable=True),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], name="fk_work_hours_employee_id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], name="fk_work_hours_project_id"),
        sa.ForeignKeyConstraint(["work_type_id"], ["work_types.id"], name="fk_work_hours_work_type_id"),
    )
    op.create_index("ix_work_hours_id", "work_hours", ["id"], unique=False)
    op.create_index("ix_work_hours_employee_id", "work_hours", ["employee_id"], unique=False)
    op.create_index("ix_work_hours_work_date", "work_hours", ["work_date"], unique=False)
    op.create_index(
        "ix_work_hours_employee_id_work_date",
        "work_hours",
        ["employee_id", "work_date"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_work_hours_employee_id_work_date", table_name="work_hours")
    op.drop_index("ix_work_hours_work_date", table_name="work_hours")
    op.drop_index("ix_work_hours_employee_id", table_name="work_hours")
    op.drop_index("ix_work_hours_id", table_name="work_hours")
    op.drop_table("work_hours")

    op.drop_index("ix_projects_id", table_name="projects")
    op.drop_table("projects")

    op.drop_index("ix_work_types_id", table_name="work_types")
    op.drop_table("work_types")

    op.drop_index("ix_employees_id", table_name="employees")
    op.drop_table("employees")
