"""Initial schema for users, projects, prompts, and prompt versions."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamp_columns(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamp_columns(),
    )
    op.create_index(
        "ix_projects_owner_id_created_at",
        "projects",
        ["owner_id", "created_at"],
    )

    op.create_table(
        "prompts",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("project_id", sa.Uuid(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamp_columns(),
    )
    op.create_index(
        "ix_prompts_project_id_created_at",
        "prompts",
        ["project_id", "created_at"],
    )
    op.create_index("ix_prompts_owner_id", "prompts", ["owner_id"])

    op.create_table(
        "prompt_versions",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("prompt_id", sa.Uuid(), sa.ForeignKey("prompts.id"), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("sequence_number", sa.Integer(), nullable=False),
        sa.Column("sequence_label", sa.Text(), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=False),
        sa.Column(
            "is_active_version",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamp_columns(),
        sa.UniqueConstraint(
            "prompt_id",
            "sequence_number",
            name="uq_prompt_versions_prompt_id_sequence_number",
        ),
        sa.CheckConstraint(
            "sequence_number > 0",
            name="ck_prompt_versions_sequence_number_positive",
        ),
    )
    op.create_index(
        "ix_prompt_versions_prompt_id_created_at",
        "prompt_versions",
        ["prompt_id", "created_at"],
    )
    op.create_index(
        "ux_prompt_versions_prompt_id_active_version",
        "prompt_versions",
        ["prompt_id"],
        unique=True,
        sqlite_where=sa.text("is_active_version = 1 AND is_active = 1"),
        postgresql_where=sa.text("is_active_version = true AND is_active = true"),
    )


def downgrade() -> None:
    op.drop_index("ux_prompt_versions_prompt_id_active_version", table_name="prompt_versions")
    op.drop_index("ix_prompt_versions_prompt_id_created_at", table_name="prompt_versions")
    op.drop_table("prompt_versions")

    op.drop_index("ix_prompts_owner_id", table_name="prompts")
    op.drop_index("ix_prompts_project_id_created_at", table_name="prompts")
    op.drop_table("prompts")

    op.drop_index("ix_projects_owner_id_created_at", table_name="projects")
    op.drop_table("projects")

    op.drop_table("users")
