"""
Modelos SQLAlchemy. Importar aquí para que Alembic y Database.init_schema los detecten.
"""

from models.drawdown_event import DrawdownEvent
from models.operation import Operation
from models.portfolio import Portfolio
from models.rotation import Rotation
from models.system_config import SystemConfig

__all__ = [
    "DrawdownEvent",
    "Operation",
    "Portfolio",
    "Rotation",
    "SystemConfig",
]
