"""Logging setup built on loguru.

The application configures a single stderr sink. Components ask for a
logger through get_logger(), which lazily applies the default
configuration so library users get sensible output without calling
setup_logging() themselves.
"""

import sys
import typing as t

from loguru import logger

from ..config.settings import Environment, LogLevel, Settings

if t.TYPE_CHECKING:
    import loguru

DEVELOPMENT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

_configured = False


def configure_logger(
    level: LogLevel | str = LogLevel.INFO,
    environment: Environment = Environment.DEVELOPMENT,
) -> None:
    """Replace loguru's sinks with one configured for the environment.

    Production logs are serialised to JSON lines; other environments get a
    colourised human-readable format.

    Args:
        level: Minimum level for the sink
        environment: Runtime environment selecting the sink format
    """
    global _configured

    level = LogLevel(level)
    logger.remove()

    if environment is Environment.PRODUCTION:
        logger.add(
            sys.stderr,
            level=level.value,
            serialize=True,
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            level=level.value,
            format=DEVELOPMENT_FORMAT,
            colorize=environment is Environment.DEVELOPMENT,
            backtrace=True,
            diagnose=environment is Environment.DEVELOPMENT,
        )

    _configured = True


def setup_logging(settings: Settings) -> None:
    """Configure logging from application settings."""
    configure_logger(level=settings.log_level, environment=settings.environment)


def get_logger(name: str) -> "loguru.Logger":
    """Return a logger bound to the given component name.

    Applies the default configuration on first use.
    """
    if not _configured:
        configure_logger()
    return logger.bind(name=name)


def reset_logging() -> None:
    """Remove all sinks and forget the current configuration.

    Mainly for tests, so each one starts from a clean slate.
    """
    global _configured

    logger.remove()
    _configured = False


def is_configured() -> bool:
    """Whether logging has been configured since the last reset."""
    return _configured
