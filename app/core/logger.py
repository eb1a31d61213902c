"""Logger configuration for the fitness tracker service.

Services log with structured keyword context, e.g.
``logger.info("Training started", execution_id=..., user_id=...)``.
Both sinks render that context after the message.
"""

import sys
from pathlib import Path

from loguru import logger

SERVICE_NAME = "fitness-tracker-service"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>{extra[context]}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}{extra[context]}"

LOG_ROTATION = "10 MB"
LOG_RETENTION = "7 days"


def _render_context(record) -> None:
    """Flatten structured keyword context into ' key=value' pairs."""
    fields = {key: value for key, value in record["extra"].items() if key not in ("context", "service")}
    record["extra"]["context"] = "".join(f" {key}={value}" for key, value in fields.items())


def setup_logger(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure loguru with a console sink and an optional rotating file sink.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only console logging.
    """
    logger.remove()
    logger.configure(extra={"service": SERVICE_NAME, "context": ""}, patcher=_render_context)

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=LOG_ROTATION,
            retention=LOG_RETENTION,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    logger.info(f"Logger initialized with level={level}", log_file=log_file)
