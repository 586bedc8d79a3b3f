"""
Configuración de structlog.
Se invoca una vez desde el lifespan de la aplicación.
"""

import logging

import structlog


def configure_logging(level: str) -> None:
    """Filtra por LOG_LEVEL y renderiza eventos clave=valor en consola."""
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=False,
    )
