"""
Configuración centralizada de la aplicación.
Lee todas las variables de entorno usando pydantic-settings.
Todos los valores tienen un default razonable para un uso personal local.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Base de datos -------------------------------------------------------
    # URL asíncrona (aiosqlite) para el servidor FastAPI
    DATABASE_URL: str = "sqlite+aiosqlite:///./trading-strategy.db"

    # URL síncrona usada exclusivamente por Alembic para migraciones
    DATABASE_SYNC_URL: str = "sqlite:///./trading-strategy.db"

    # --- Aplicación ----------------------------------------------------------
    APP_ENV: str = "production"
    LOG_LEVEL: str = "INFO"

    # Orígenes CORS permitidos (cadena separada por comas)
    CORS_ORIGINS: str = "http://localhost:3000"

    # --- Portfolio inicial ---------------------------------------------------
    # Valores usados por POST /portfolio/init cuando el body no los trae
    DEFAULT_TOTAL_BALANCE: Decimal = Decimal("93")
    DEFAULT_PAXG_BALANCE: Decimal = Decimal("42")
    DEFAULT_ETH_BALANCE: Decimal = Decimal("33")
    DEFAULT_ALTCOIN_BALANCE: Decimal = Decimal("18")

    # --- Reglas de riesgo ----------------------------------------------------
    MAX_RISK_PCT: Decimal = Decimal("5")
    MIN_REWARD_RATIO: Decimal = Decimal("2")
    ALTCOIN_MAX_POSITION_PCT: Decimal = Decimal("10")

    # Si es true, una operación que no pasa las reglas de riesgo se rechaza (400)
    ENFORCE_RISK_RULES: bool = False

    # Si es true, crear una operación descuenta position_size del bucket de la estrategia
    DEBIT_ON_OPERATION_CREATE: bool = True

    # --- Propiedades calculadas ----------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = {"development", "production", "test"}
        if v not in allowed:
            raise ValueError(f"APP_ENV debe ser uno de: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL debe ser uno de: {allowed}")
        return v.upper()

    @field_validator("MAX_RISK_PCT", "MIN_REWARD_RATIO", "ALTCOIN_MAX_POSITION_PCT")
    @classmethod
    def validate_positive(cls, v: Decimal) -> Decimal:
        if v <= Decimal("0"):
            raise ValueError("Los umbrales de riesgo deben ser > 0")
        return v


@lru_cache
def get_settings() -> Settings:
    """Instancia singleton de Settings, cacheada para evitar re-lecturas del .env."""
    return Settings()


# Exportación conveniente para importar directamente en otros módulos
settings: Settings = get_settings()
