"""
Application settings.

Defaults are fine to play games in memory (no database). Every field can be overridden with an environment variable prefixed by `CHESS_`
ex) CHESS_DATABASE_URL=sqlite:///games.db CHESS_LOG_LEVEL=DEBUG
"""

import logging
import os
from typing import Literal, Mapping, Optional, Self

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "CHESS_"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # None: game sessions only live in memory
    database_url: Optional[str] = None
    log_level: LogLevel = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    # None: the heuristic opponent draws its tie-breaks from fresh entropy
    opponent_seed: Optional[int] = Field(default=None, ge=0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Collect the CHESS_* variables. Validation (and the error for bad values) is left to pydantic."""
        environ = os.environ if environ is None else environ
        overrides = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        if "log_level" in overrides:
            overrides["log_level"] = overrides["log_level"].upper()
        return cls(**overrides)


def configure_logging(settings: Settings) -> None:
    """Root logger setup. Modules only ever call logging.getLogger(__name__)"""
    logging.basicConfig(level=settings.log_level, format=settings.log_format)
