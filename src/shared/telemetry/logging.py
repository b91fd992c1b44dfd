"""Logging configuration for the Hunting Permits Registry"""
import logging
import sys

from src.infrastructure.config.settings import get_settings


class CorrelationIdFilter(logging.Filter):
    """Stamp records with the current request's correlation ID ("-" outside requests)"""

    def filter(self, record: logging.LogRecord) -> bool:
        # Imported here: the middleware package imports this module
        from src.presentation.middleware.correlation import get_correlation_id

        record.correlation_id = get_correlation_id() or "-"
        return True


def setup_logging():
    """Configure application-wide logging"""
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s",
        handlers=[handler],
    )

    # SQL echo is controlled by DATABASE_ECHO, keep the engine logger quiet otherwise
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger for module"""
    return logging.getLogger(name)
