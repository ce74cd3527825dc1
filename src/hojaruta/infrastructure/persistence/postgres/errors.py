"""Translate PostgreSQL integrity errors to domain errors."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import errors

from hojaruta.domain.exceptions import Conflict, ReferenceViolation


@asynccontextmanager
async def integrity_guard() -> AsyncIterator[None]:
    """Re-raise FK and unique violations as ReferenceViolation / Conflict."""
    try:
        yield
    except errors.ForeignKeyViolation as e:
        column = _column(e)
        raise ReferenceViolation(
            f"Referencia invalida en {column or 'un campo relacionado'}", field=column
        ) from e
    except errors.UniqueViolation as e:
        raise Conflict("El registro ya existe") from e


def _column(exc: errors.Error) -> str | None:
    # Detail reads like: Key (unidad_destino_id)=(99) is not present in table "unidades".
    detail = exc.diag.message_detail or ""
    if detail.startswith("Key (") and ")" in detail:
        return detail[5 : detail.index(")")]
    return None
