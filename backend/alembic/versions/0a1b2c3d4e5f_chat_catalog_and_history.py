"""chat catalog and history

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0a1b2c3d4e5f"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "medicamentos",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("presentation", sa.Text(), nullable=True),
        sa.Column("uses", sa.JSON(), nullable=False),
        sa.Column("common_effects", sa.JSON(), nullable=False),
        sa.Column("adverse_effects", sa.JSON(), nullable=False),
        sa.Column("interactions", sa.JSON(), nullable=False),
    )
    op.create_index("ix_medicamentos_id", "medicamentos", ["id"])
    op.create_index("ix_medicamentos_name", "medicamentos", ["name"], unique=True)

    op.create_table(
        "preguntas",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
    )
    op.create_index("ix_preguntas_id", "preguntas", ["id"])

    op.create_table(
        "historial",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_historial_id", "historial", ["id"])
    op.create_index("ix_historial_created_at", "historial", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_historial_created_at", table_name="historial")
    op.drop_index("ix_historial_id", table_name="historial")
    op.drop_table("historial")
    op.drop_index("ix_preguntas_id", table_name="preguntas")
    op.drop_table("preguntas")
    op.drop_index("ix_medicamentos_name", table_name="medicamentos")
    op.drop_index("ix_medicamentos_id", table_name="medicamentos")
    op.drop_table("medicamentos")
