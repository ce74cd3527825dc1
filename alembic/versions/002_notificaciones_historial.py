"""Notifications and activity history.

Revision ID: 002
Revises: 001
Create Date: 2024-03-08

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "notificaciones",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False),
        sa.Column("hoja_ruta_id", sa.Integer(), sa.ForeignKey("hojas_ruta.id", ondelete="CASCADE"), nullable=True),
        sa.Column("tipo", sa.String(50), nullable=False),
        sa.Column("mensaje", sa.Text(), nullable=False),
        sa.Column("leida", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("leida_en", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_notificaciones_usuario_leida", "notificaciones", ["usuario_id", "leida"])

    op.create_table(
        "historial_actividades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("tipo", sa.String(20), nullable=False),
        sa.Column("hoja_id", sa.Integer(), sa.ForeignKey("hojas_ruta.id", ondelete="SET NULL"), nullable=True),
        sa.Column("numero_hr", sa.String(50), nullable=True),
        sa.Column("referencia", sa.String(255), nullable=True),
        sa.Column("procedencia", sa.String(255), nullable=True),
        sa.Column("destinatario", sa.String(255), nullable=True),
        sa.Column("descripcion", sa.Text(), nullable=False),
        sa.Column("usuario_nombre", sa.String(255), nullable=True),
        sa.Column("fecha_actividad", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("datos_anteriores", JSONB(), nullable=True),
        sa.Column("datos_nuevos", JSONB(), nullable=True),
        sa.CheckConstraint("tipo IN ('añadido', 'editado', 'enviado')", name="ck_historial_tipo"),
    )
    op.create_index(
        "ix_historial_tipo_fecha", "historial_actividades", ["tipo", "fecha_actividad"]
    )


def downgrade() -> None:
    op.drop_table("historial_actividades")
    op.drop_table("notificaciones")
