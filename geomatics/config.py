"""Engine configuration from environment variables."""

import logging
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "warning"

    # Maximum nesting of curve references and geometry collections
    max_curve_depth: int = 32

    # Tolerance (parts per million) used when the engine removes duplicates itself
    duplicate_tolerance_ppm: float = 1.0

    model_config = {"env_prefix": "GEOMATICS_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger."""
    logger = logging.getLogger("geomatics")
    name = (level or settings.log_level).upper()
    logger.setLevel(getattr(logging, name, logging.WARNING))
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
