"""Initial schema - unidades, usuarios, hojas_ruta, envios, progreso_hojas_ruta.

Revision ID: 001
Revises:
Create Date: 2024-03-01

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "unidades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nombre", sa.String(255), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("direccion", sa.String(255), nullable=True),
        sa.Column("telefono", sa.String(50), nullable=True),
        sa.Column("activo", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("creado_por", sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_unidades_nombre", "unidades", [sa.text("lower(nombre)")], unique=True)

    op.create_table(
        "usuarios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("nombre_completo", sa.String(255), nullable=False),
        sa.Column("rol", sa.String(50), server_default="usuario", nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("cargo", sa.String(255), nullable=True),
        sa.Column("unidad_id", sa.Integer(), sa.ForeignKey("unidades.id", ondelete="SET NULL"), nullable=True),
        sa.Column("activo", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("ultimo_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_usuarios_username", "usuarios", [sa.text("lower(username)")], unique=True)
    op.create_index("ix_usuarios_unidad_id", "usuarios", ["unidad_id"])

    op.create_foreign_key(
        "fk_unidades_creado_por", "unidades", "usuarios", ["creado_por"], ["id"], ondelete="SET NULL"
    )

    op.create_table(
        "hojas_ruta",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("numero_hr", sa.String(50), nullable=False),
        sa.Column("referencia", sa.String(255), nullable=False),
        sa.Column("procedencia", sa.String(255), nullable=False),
        sa.Column("prioridad", sa.String(20), server_default="rutinario", nullable=False),
        sa.Column("estado", sa.String(20), server_default="pendiente", nullable=False),
        sa.Column("estado_cumplimiento", sa.String(20), server_default="pendiente", nullable=False),
        sa.Column("ubicacion_actual", sa.String(255), nullable=True),
        sa.Column("responsable_actual", sa.String(255), nullable=True),
        sa.Column("unidad_actual_id", sa.Integer(), sa.ForeignKey("unidades.id", ondelete="SET NULL"), nullable=True),
        sa.Column("detalles", JSONB(), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("fecha_limite", sa.Date(), nullable=True),
        sa.Column("cite", sa.String(255), nullable=True),
        sa.Column("numero_fojas", sa.Integer(), nullable=True),
        sa.Column("observaciones", sa.Text(), nullable=True),
        sa.Column("nombre_solicitante", sa.String(255), nullable=True),
        sa.Column("telefono_celular", sa.String(20), nullable=True),
        sa.Column("usuario_creador_id", sa.Integer(), sa.ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True),
        sa.Column("fecha_ingreso", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("fecha_completado", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.Column("eliminado_en", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_hojas_ruta_numero_hr",
        "hojas_ruta",
        ["numero_hr"],
        unique=True,
        postgresql_where=sa.text("eliminado_en IS NULL"),
    )
    op.create_index("ix_hojas_ruta_estado_cumplimiento", "hojas_ruta", ["estado_cumplimiento"])
    op.create_index("ix_hojas_ruta_fecha_limite", "hojas_ruta", ["fecha_limite"])

    op.create_table(
        "envios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("hoja_id", sa.Integer(), sa.ForeignKey("hojas_ruta.id", ondelete="CASCADE"), nullable=False),
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True),
        sa.Column("unidad_destino_id", sa.Integer(), sa.ForeignKey("unidades.id"), nullable=True),
        sa.Column("destinatario_nombre", sa.String(255), nullable=True),
        sa.Column("observaciones", sa.Text(), nullable=True),
        sa.Column("instrucciones", JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("estado", sa.String(20), server_default="pendiente", nullable=False),
        sa.Column("respuesta", sa.Text(), nullable=True),
        sa.Column("fecha_envio", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fecha_recepcion", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fecha_respuesta", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fecha_redireccion", sa.DateTime(timezone=True), nullable=True),
        sa.Column("redirigido_a_unidad_id", sa.Integer(), sa.ForeignKey("unidades.id"), nullable=True),
        sa.Column("redirigido_por", sa.Integer(), sa.ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
        sa.Column("eliminado_en", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_envios_hoja_id", "envios", ["hoja_id"])
    op.create_index("ix_envios_unidad_destino_id", "envios", ["unidad_destino_id"])

    op.create_table(
        "progreso_hojas_ruta",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("hoja_ruta_id", sa.Integer(), sa.ForeignKey("hojas_ruta.id", ondelete="CASCADE"), nullable=False),
        sa.Column("ubicacion_actual", sa.String(255), nullable=False),
        sa.Column("ubicacion_anterior", sa.String(255), nullable=True),
        sa.Column("accion", sa.String(20), nullable=True),
        sa.Column("responsable_id", sa.Integer(), sa.ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True),
        sa.Column("notas", sa.Text(), nullable=True),
        sa.Column("respuesta", sa.Text(), nullable=True),
        sa.Column("unidad_origen_id", sa.Integer(), sa.ForeignKey("unidades.id"), nullable=True),
        sa.Column("unidad_destino_id", sa.Integer(), sa.ForeignKey("unidades.id"), nullable=True),
        sa.Column("fecha_registro", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_progreso_hoja_fecha", "progreso_hojas_ruta", ["hoja_ruta_id", "fecha_registro"]
    )


def downgrade() -> None:
    op.drop_table("progreso_hojas_ruta")
    op.drop_table("envios")
    op.drop_table("hojas_ruta")
    op.drop_constraint("fk_unidades_creado_por", "unidades", type_="foreignkey")
    op.drop_table("usuarios")
    op.drop_table("unidades")
