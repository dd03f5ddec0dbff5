import logging
import sys

import structlog

ROOT_LOGGER = "xor_tickler"


class StderrHandler(logging.Handler):
    def emit(self, record):
        sys.stderr.write(self.format(record) + "\n")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """A structlog logger backed by the stdlib logger of the given name.

    Until configure_logging() runs, events go through stdlib logging, which
    drops debug/info and never writes to stdout.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)


def configure_logging(level: int = logging.WARNING, json_logs: bool = False) -> None:
    """Configure structlog to write key/value events to stderr."""
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = StderrHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
