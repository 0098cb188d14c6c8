"""Structured logging configuration for the report viewer"""
import logging
import sys
from typing import Any, Dict
import structlog
from structlog.stdlib import LoggerFactory
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer
from config import Config


def setup_structured_logging(config: Config) -> None:
    """Setup structured logging on stderr, JSON or console rendered"""

    # Configure processors
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.log_json:
        processors.append(JSONRenderer())
    else:
        processors.append(ConsoleRenderer(colors=False))

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, config.log_level.upper())

    # Stdout carries the report, so logs go to stderr
    handlers = []
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(config.log_file))
        file_handler.setLevel(level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )


def setup_startup_logging() -> None:
    """Route log events to stderr before configuration has loaded"""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.BoundLogger,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


def log_report_startup(logger: structlog.stdlib.BoundLogger, config: Config) -> None:
    """Log report startup with configuration details"""
    logger.info(
        "Report starting",
        color=config.color,
        sort_samples=config.sort_samples,
        tab_size=config.tab_size,
        log_json=config.log_json,
        event_type="report_startup"
    )


def log_family_parsed(logger: structlog.stdlib.BoundLogger, family) -> None:
    """Log a finished metric family"""
    logger.debug(
        "Family parsed",
        family=family.name,
        metric_type=family.metric_type.value,
        samples=family.samples,
        groups=family.groups,
        event_type="family_parsed"
    )


def log_report_completed(logger: structlog.stdlib.BoundLogger, families: int, samples: int, groups: int, elapsed: float) -> None:
    """Log report completion with structured totals"""
    logger.info(
        "Report completed",
        families=families,
        samples=samples,
        groups=groups,
        elapsed_seconds=round(elapsed, 3),
        event_type="report_completed"
    )


def log_error(logger: structlog.stdlib.BoundLogger, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=True
    )
