"""
Excepciones de dominio.
Los servicios las lanzan; main.py las traduce a respuestas { data, error, meta }.
"""

from typing import Any


class DomainError(Exception):
    status_code: int = 400

    def __init__(self, message: str, meta: dict[str, Any] | None = None) -> None:
        self.message = message
        self.meta = meta or {}
        super().__init__(message)


class NotFoundError(DomainError):
    status_code = 404


class BusinessRuleError(DomainError):
    """Datos incompletos, nada que actualizar o transición de estado ilegal."""

    status_code = 400


class ActiveDrawdownExistsError(BusinessRuleError):
    def __init__(self, active_event: dict[str, Any]) -> None:
        super().__init__(
            "Ya existe un evento de drawdown activo de nivel igual o superior",
            meta={"active_event": active_event},
        )
        self.active_event = active_event
