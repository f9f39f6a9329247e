"""Initial migration: name pool, projects and candidate links

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # 1. Names table
    op.create_table(
        "names",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("text", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("status", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column("assigned_project_id", sa.Uuid(), nullable=True),
        sa.Column("kept_warm", sa.Boolean(), nullable=False),
        sa.Column("notes", sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_names_text", "names", ["text"], unique=True)
    op.create_index("ix_names_status", "names", ["status"], unique=False)
    op.create_index(
        "ix_names_assigned_project_id", "names", ["assigned_project_id"], unique=False
    )

    # 2. Projects table
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("status", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column("name_id", sa.Uuid(), nullable=True),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column("repo_ref", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=True),
        sa.Column("deploy_url", sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["name_id"], ["names.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_status", "projects", ["status"], unique=False)
    op.create_index("ix_projects_name_id", "projects", ["name_id"], unique=False)
    op.create_index("ix_projects_created_at", "projects", ["created_at"], unique=False)
    op.create_index("ix_projects_updated_at", "projects", ["updated_at"], unique=False)

    # 3. Candidate names of ideas
    op.create_table(
        "project_considering_names",
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("name_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.ForeignKeyConstraint(["name_id"], ["names.id"]),
        sa.PrimaryKeyConstraint("project_id", "name_id"),
    )
    op.create_index(
        "ix_project_considering_names_name_id",
        "project_considering_names",
        ["name_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_project_considering_names_name_id", table_name="project_considering_names")
    op.drop_table("project_considering_names")

    op.drop_index("ix_projects_updated_at", table_name="projects")
    op.drop_index("ix_projects_created_at", table_name="projects")
    op.drop_index("ix_projects_name_id", table_name="projects")
    op.drop_index("ix_projects_status", table_name="projects")
    op.drop_table("projects")

    op.drop_index("ix_names_assigned_project_id", table_name="names")
    op.drop_index("ix_names_status", table_name="names")
    op.drop_index("ix_names_text", table_name="names")
    op.drop_table("names")
