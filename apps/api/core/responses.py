"""
Helpers para la estructura de respuesta estándar { data, error, meta }.
Todos los endpoints usan estas funciones; to_dict() serializa filas ORM
(Decimal como string, fechas ISO 8601).
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from models.base import Base


def ok(data: Any = None, meta: dict | None = None) -> dict:
    """Respuesta exitosa."""
    return {"data": data, "error": None, "meta": meta or {}}


def err(message: str, meta: dict | None = None) -> dict:
    """Respuesta de error (para exception handlers globales)."""
    return {"data": None, "error": message, "meta": meta or {}}


def to_json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_dict(row: Base) -> dict:
    """Serializa todas las columnas de una fila ORM."""
    return {col.name: to_json_value(getattr(row, col.key)) for col in row.__table__.columns}
