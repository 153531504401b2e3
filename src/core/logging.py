import sys
from loguru import logger
from .config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level> | {extra}"
)


def setup_logging():
    """Route all service logs through a single stderr sink at LOG_LEVEL."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper(), format=LOG_FORMAT)
    logger.debug("Logging configured", app=settings.app_name, env=settings.app_env)
    return logger
