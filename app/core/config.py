"""
Process configuration.

Read once from the environment (and an optional .env file) at startup,
then passed around as an immutable Settings object.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from app.core.exceptions import ConfigError

# Base directory of the project (parent of 'app')
BASE_DIR = Path(__file__).resolve().parent.parent.parent

REQUIRED_VARIABLES = ("DATABASE_URL", "JWT_SECRET")

DEFAULT_STORE_TIMEOUT_SECONDS = 10.0


class Settings(BaseModel):
    """Immutable runtime settings."""

    model_config = ConfigDict(frozen=True)

    database_url: str
    jwt_secret: str = Field(repr=False)
    environment: str = "development"
    token_ttl_minutes: int = Field(default=60, ge=1)
    store_timeout_seconds: float = Field(default=DEFAULT_STORE_TIMEOUT_SECONDS, gt=0)
    static_dir: Path = BASE_DIR / "public"
    log_level: str = "INFO"
    sql_debug: bool = False
    port: int = 4000

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ after
            loading a .env file if one exists.

    Raises:
        ConfigError: If DATABASE_URL or JWT_SECRET is missing.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    missing = [name for name in REQUIRED_VARIABLES if not environ.get(name)]
    if missing:
        raise ConfigError(
            f"Required environment variables are not defined: {', '.join(missing)}"
        )

    static_dir = Path(environ.get("STATIC_DIR", str(BASE_DIR / "public")))
    if not static_dir.is_absolute():
        static_dir = BASE_DIR / static_dir

    try:
        return Settings(
            database_url=environ["DATABASE_URL"],
            jwt_secret=environ["JWT_SECRET"],
            environment=environ.get("ENVIRONMENT", "development"),
            token_ttl_minutes=int(environ.get("TOKEN_TTL_MINUTES", "60")),
            store_timeout_seconds=float(
                environ.get("STORE_TIMEOUT_SECONDS", DEFAULT_STORE_TIMEOUT_SECONDS)
            ),
            static_dir=static_dir,
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            sql_debug=environ.get("SQL_DEBUG", "false").lower() == "true",
            port=int(environ.get("PORT", "4000")),
        )
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        raise ConfigError(f"Invalid configuration: {e}") from e
