#!/usr/bin/env python3
"""Main entry point: render a Prometheus exposition stream from stdin"""
import sys
from pydantic import ValidationError
from config import Config
from logging_config import setup_structured_logging, setup_startup_logging, get_logger, log_report_startup, log_report_completed, log_error
from parsing.errors import ExpositionError
from render.report import ReportWriter, create_console


def main(stdin=None, stdout=None) -> int:
    """Main application entry point"""
    logger = get_logger(__name__)
    try:
        # Load configuration
        config = Config()

        # Setup structured logging
        setup_structured_logging(config)
        log_report_startup(logger, config)

        writer = ReportWriter(config, create_console(config, file=stdout))
        summary = writer.run(stdin if stdin is not None else sys.stdin)

        log_report_completed(logger, summary.families, summary.samples, summary.groups, summary.elapsed_seconds)
        return 0

    except ExpositionError as e:
        log_error(logger, e, {"component": "main", "phase": "report"})
        return 1
    except ValidationError as e:
        setup_startup_logging()
        log_error(get_logger(__name__), e, {"component": "main", "phase": "startup"})
        return 1


def run():
    """Console script entry point"""
    sys.exit(main())


if __name__ == '__main__':
    run()
