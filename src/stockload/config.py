"""Runtime settings read from environment variables."""

import os
from dataclasses import dataclass, field, replace

from stockload.ingestion.schema import SIMPLE, VARIANTS


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///inventory.db"
    variant: str = SIMPLE
    pool_size: int = 4
    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    def __post_init__(self):
        if self.variant not in VARIANTS:
            raise ValueError(f"variant must be one of {VARIANTS}, got {self.variant!r}")

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            database_url=os.environ.get("DATABASE_URL", cls.database_url),
            variant=os.environ.get("IMPORT_VARIANT", SIMPLE).strip().lower(),
            pool_size=_int_env("DB_POOL_SIZE", cls.pool_size),
            host=os.environ.get("HOST", cls.host),
            port=_int_env("PORT", cls.port),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.environ.get("LOG_LEVEL", cls.log_level).upper(),
        )

    def override(self, **changes) -> "Settings":
        """Return a copy with the non-None values in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
