"""Document lifecycle, compliance state and priority."""

from enum import StrEnum


class HojaEstado(StrEnum):
    """Physical routing state of a hoja de ruta."""

    PENDIENTE = "pendiente"
    ENVIADA = "enviada"
    RECIBIDA = "recibida"
    RESPONDIDA = "respondida"
    EN_PROCESO = "en_proceso"
    FINALIZADA = "finalizada"
    ARCHIVADA = "archivada"


class EstadoCumplimiento(StrEnum):
    """Compliance state used by dashboards and deadline tracking."""

    PENDIENTE = "pendiente"
    EN_PROCESO = "en_proceso"
    COMPLETADO = "completado"
    VENCIDO = "vencido"

    @classmethod
    def from_estado(cls, estado: str | None) -> "EstadoCumplimiento":
        """Map the form's estado to a compliance state."""
        return _CUMPLIMIENTO_POR_ESTADO.get(estado or "", cls.PENDIENTE)


class Prioridad(StrEnum):
    """Handling priority."""

    RUTINARIO = "rutinario"
    PRIORITARIO = "prioritario"
    URGENTE = "urgente"
    OTROS = "otros"


_CUMPLIMIENTO_POR_ESTADO = {
    HojaEstado.PENDIENTE.value: EstadoCumplimiento.PENDIENTE,
    HojaEstado.ENVIADA.value: EstadoCumplimiento.EN_PROCESO,
    HojaEstado.EN_PROCESO.value: EstadoCumplimiento.EN_PROCESO,
    HojaEstado.FINALIZADA.value: EstadoCumplimiento.COMPLETADO,
    HojaEstado.ARCHIVADA.value: EstadoCumplimiento.COMPLETADO,
}
