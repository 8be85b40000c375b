from dataclasses import dataclass, fields
from enum import Enum
from typing import Any


class Environment(Enum):
    """Runtime environment for the application.

    Kept small and explicit to support simple environment-driven behavior
    without introducing configuration dependencies.
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Log levels understood by loguru."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Settings:
    """Minimal settings container used to bootstrap the app.

    Rationale: keep a stable shape that core code depends on while allowing
    the caller to decide how values are populated.

    Attributes:
        environment: Controls the log sink format
        log_level: Minimum level for the stderr sink
        chunk_size: Maximum bytes pulled from the response body per read
        timeout: Seconds allowed for one request/drain cycle (None = no limit)
    """

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    chunk_size: int = DEFAULT_CHUNK_SIZE
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


def build_settings(**overrides: Any) -> Settings:
    """Create Settings, applying only the overrides that are not None.

    Lets callers forward optional arguments straight through without
    clobbering defaults.

    Raises:
        TypeError: If an override does not name a Settings field
    """
    known = {f.name for f in fields(Settings)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
