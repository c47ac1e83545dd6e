"""SQLAlchemy metadata definitions for prompt registry tables."""

from __future__ import annotations

import sqlalchemy as sa

metadata = sa.MetaData()

users = sa.Table(
    "users",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
    sa.Column("email", sa.Text(), nullable=False),
    sa.Column("password_hash", sa.Text(), nullable=False),
    sa.Column("display_name", sa.Text(), nullable=True),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
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
    sa.UniqueConstraint("email", name="uq_users_email"),
)

projects = sa.Table(
    "projects",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
    sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
    sa.Column("name", sa.Text(), nullable=False),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
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
)
sa.Index("ix_projects_owner_id_created_at", projects.c.owner_id, projects.c.created_at)

prompts = sa.Table(
    "prompts",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
    sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
    sa.Column("project_id", sa.Uuid(), sa.ForeignKey("projects.id"), nullable=False),
    sa.Column("name", sa.Text(), nullable=False),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
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
)
sa.Index("ix_prompts_project_id_created_at", prompts.c.project_id, prompts.c.created_at)
sa.Index("ix_prompts_owner_id", prompts.c.owner_id)

prompt_versions = sa.Table(
    "prompt_versions",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
    sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
    sa.Column("prompt_id", sa.Uuid(), sa.ForeignKey("prompts.id"), nullable=False),
    sa.Column("text", sa.Text(), nullable=False),
    sa.Column("sequence_number", sa.Integer(), nullable=False),
    sa.Column("sequence_label", sa.Text(), nullable=False),
    sa.Column("display_name", sa.Text(), nullable=False),
    sa.Column("is_active_version", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
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
sa.Index(
    "ix_prompt_versions_prompt_id_created_at",
    prompt_versions.c.prompt_id,
    prompt_versions.c.created_at,
)
sa.Index(
    "ux_prompt_versions_prompt_id_active_version",
    prompt_versions.c.prompt_id,
    unique=True,
    sqlite_where=sa.text("is_active_version = 1 AND is_active = 1"),
    postgresql_where=sa.text("is_active_version = true AND is_active = true"),
)
