"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-16 00:00:00.000000

Tables: activos, comportamientos, historial.
historial carries the (hora, activo) unique constraint that backs the
last-write-wins upsert; comportamientos holds one row per evento.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- activos ---
    op.create_table(
        "activos",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("nombre", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activos_id", "activos", ["id"])

    # --- comportamientos ---
    op.create_table(
        "comportamientos",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("evento", sa.String(128), nullable=False),
        sa.Column("datos", sa.Text(), nullable=False,
                  comment="JSON-encoded effects tree keyed by primary asset"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("evento"),
    )
    op.create_index("ix_comportamientos_id", "comportamientos", ["id"])

    # --- historial ---
    op.create_table(
        "historial",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("hora", sa.String(64), nullable=False),
        sa.Column("activo", sa.Text(), nullable=False),
        sa.Column("cambio", sa.String(8), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("hora", "activo", name="uq_historial_hora_activo"),
    )
    op.create_index("ix_historial_id", "historial", ["id"])
    op.create_index("ix_historial_hora", "historial", ["hora"])


def downgrade() -> None:
    op.drop_index("ix_historial_hora", table_name="historial")
    op.drop_index("ix_historial_id", table_name="historial")
    op.drop_table("historial")
    op.drop_index("ix_comportamientos_id", table_name="comportamientos")
    op.drop_table("comportamientos")
    op.drop_index("ix_activos_id", table_name="activos")
    op.drop_table("activos")
