"""
Configuration settings for RiesTeX.
Environment variables prefixed with ``RIESTEX_`` override defaults,
e.g. ``RIESTEX_HIGHLIGHT_COLOR=gray`` or ``RIESTEX_PORT=9000``.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import List

ENV_PREFIX = "RIESTEX_"


@dataclass
class Settings:
    """Runtime configuration"""

    # Formatting
    HIGHLIGHT_COLOR: str = "lightgray"
    DECIMALS: int = 8

    # Logging
    LOG_LEVEL: str = "WARNING"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self):
        """Load from environment variables"""
        for key in self.__dataclass_fields__:
            env_value = os.getenv(ENV_PREFIX + key)
            if env_value is None:
                continue
            field_type = self.__dataclass_fields__[key].type
            if field_type == bool:
                setattr(self, key, env_value.lower() in ("true", "1", "yes"))
            elif field_type == int:
                setattr(self, key, int(env_value))
            elif field_type == List[str]:
                setattr(self, key, [v.strip() for v in env_value.split(",") if v.strip()])
            else:
                setattr(self, key, env_value)


# Global settings instance
settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Install a root handler at *level* (defaults to ``settings.LOG_LEVEL``).

    Library modules only create loggers; the CLI and the HTTP backend call
    this once at start-up.
    """
    name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
