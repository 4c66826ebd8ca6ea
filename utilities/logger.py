"""
Structured logging setup using structlog.
Provides JSON or console output and catalog event helpers.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site information to every event
    """
    level = getattr(logging, log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)

    structlog.get_logger(__name__).info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class CatalogLogger:
    """
    Specialized logger for catalog store events with bound context.
    """

    def __init__(self, name: str = "catalog"):
        self.logger = structlog.get_logger(name)
        self.context: Dict[str, Any] = {}

    def bind_context(self, **kwargs) -> 'CatalogLogger':
        """
        Bind context variables to the logger.

        Args:
            **kwargs: Context variables to bind

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def clear_context(self) -> 'CatalogLogger':
        """Clear all context variables."""
        self.context.clear()
        return self

    def log_book_added(self, book_id: str, title: str) -> None:
        self.logger.info("Book added", book_id=book_id, title=title, **self.context)

    def log_book_updated(self, book_id: str, fields: List[str], ignored: List[str]) -> None:
        self.logger.info(
            "Book updated",
            book_id=book_id,
            fields=fields,
            ignored_fields=ignored,
            **self.context
        )

    def log_book_deleted(self, book_id: str, success: bool) -> None:
        level = "info" if success else "debug"
        getattr(self.logger, level)(
            "Book deleted" if success else "Delete skipped, book not found",
            book_id=book_id,
            **self.context
        )

    def log_book_borrowed(self, book_id: str, borrower_id: str, due_date: str) -> None:
        self.logger.info(
            "Book borrowed",
            book_id=book_id,
            borrower_id=borrower_id,
            due_date=due_date,
            **self.context
        )

    def log_book_returned(self, book_id: str, borrower_id: Optional[str]) -> None:
        self.logger.info(
            "Book returned",
            book_id=book_id,
            borrower_id=borrower_id,
            **self.context
        )

    def log_rejected(self, operation: str, book_id: Optional[str] = None, reason: str = "") -> None:
        """Log an operation the store declined (unknown id, conflicting state, bad input)."""
        self.logger.warning(
            "Catalog operation rejected",
            operation=operation,
            book_id=book_id,
            reason=reason,
            **self.context
        )
