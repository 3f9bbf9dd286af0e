"""Configuration management for installment-plan."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from installment_plan.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_LOAN_TOTAL,
    PERCENTAGE_TOLERANCE,
    REBALANCE_THRESHOLD,
)
from installment_plan.exceptions import ConfigurationError

STORAGE_BACKENDS = ("memory", "json", "postgres")


@dataclass
class PrecisionConfig:
    """Tolerances used by the allocation engine.

    Stored values always keep 10 decimal places; only the comparison margins
    are configurable.
    """

    percentage_tolerance: Decimal = PERCENTAGE_TOLERANCE
    rebalance_threshold: Decimal = REBALANCE_THRESHOLD


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration for the key-value table."""

    host: str = "localhost"
    port: int = 5432
    database: str = "installment_plan"
    user: str = "postgres"
    password: str = "postgres"
    table: str = "plan_store"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StorageConfig:
    """Persistence backend selection."""

    backend: str = "memory"
    json_dir: Path = field(default_factory=lambda: Path("plan_data"))
    postgres: PostgresConfig = field(default_factory=PostgresConfig)

    def __post_init__(self) -> None:
        if self.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend {self.backend!r}, expected one of {STORAGE_BACKENDS}"
            )


@dataclass
class PlanConfig:
    """Main configuration for installment-plan."""

    precision: PrecisionConfig = field(default_factory=PrecisionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    currency: str = DEFAULT_CURRENCY
    default_total: Decimal = DEFAULT_LOAN_TOTAL
    log_level: str = "INFO"
    log_format: str = "standard"
    enforce_sequential_dates_on_update: bool = False

    @classmethod
    def from_env(cls) -> "PlanConfig":
        """Create config from environment variables."""
        import os

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=_parse_int("POSTGRES_PORT", os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "installment_plan"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            table=os.getenv("POSTGRES_TABLE", "plan_store"),
        )

        storage = StorageConfig(
            backend=os.getenv("PLAN_STORAGE_BACKEND", "memory"),
            json_dir=Path(os.getenv("PLAN_DATA_DIR", "plan_data")),
            postgres=postgres,
        )

        return cls(
            storage=storage,
            currency=os.getenv("PLAN_CURRENCY", "USD"),
            default_total=_parse_decimal("PLAN_DEFAULT_TOTAL", os.getenv("PLAN_DEFAULT_TOTAL", "182")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            enforce_sequential_dates_on_update=os.getenv("PLAN_ENFORCE_DATES", "false").lower() == "true",
        )


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _parse_decimal(name: str, raw: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
