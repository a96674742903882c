"""logging setup and the event sink the dispatcher reports to"""

import logging
import sys
from collections.abc import Mapping
from typing import Any, Protocol

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"

logger = logging.getLogger("bitbucket-mcp")


class EventSink(Protocol):
    """receives every tool invocation and every failure"""

    def record_call(self, name: str, arguments: Mapping[str, Any]) -> None: ...

    def record_failure(self, name: str, error: BaseException) -> None: ...


class LoggingSink:
    """default sink, writes to the `bitbucket-mcp.tools` logger"""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logging.getLogger("bitbucket-mcp.tools")

    def record_call(self, name: str, arguments: Mapping[str, Any]) -> None:
        self.log.info("Called tool: %s arguments=%r", name, dict(arguments))

    def record_failure(self, name: str, error: BaseException) -> None:
        self.log.error(
            "Tool execution error: %s %s: %s", name, type(error).__name__, error
        )


class NullSink:
    def record_call(self, name: str, arguments: Mapping[str, Any]) -> None:
        pass

    def record_failure(self, name: str, error: BaseException) -> None:
        pass


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """configure the `bitbucket-mcp` logger hierarchy

    stdout carries the MCP stdio transport, so console output goes to stderr.

    Args:
        level: logging level name
        log_file: optional file that receives the same records

    Returns:
        the configured root `bitbucket-mcp` logger
    """
    logger.setLevel(level.upper())
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(DEFAULT_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
