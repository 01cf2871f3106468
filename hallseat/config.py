import logging
import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


@dataclass
class Settings:
    database_url: str = field(
        default_factory=lambda: os.getenv("HALLSEAT_DATABASE_URL", "sqlite:///./hallseat.db")
    )
    export_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("HALLSEAT_EXPORT_DIR", Path(__file__).resolve().parent / "exports")
        )
    )
    log_level: str = field(default_factory=lambda: os.getenv("HALLSEAT_LOG_LEVEL", "INFO"))
    mix_departments: bool = field(
        default_factory=lambda: _env_flag("HALLSEAT_MIX_DEPARTMENTS", True)
    )


settings = Settings()


def configure_logging(level=None):
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
