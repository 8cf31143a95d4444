"""
Logging setup for the ARIA snapshot MCP server.

The server talks JSON-RPC over stdio, so log records go to a file only:
``logs/aria-snapshot-mcp.log`` unless ``ARIA_SNAPSHOT_LOG_FILE`` says
otherwise, at the level named by ``ARIA_SNAPSHOT_LOG_LEVEL``.
"""

import json
import logging
import time
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Keys whose values never reach the log file.
SENSITIVE_KEY_PARTS = ("token", "password", "secret")


def setup_file_logging(
    log_file: str | Path = "logs/aria-snapshot-mcp.log",
    level: int | str = logging.INFO,
    format_string: str | None = None,
) -> logging.Logger:
    """
    Send every log record of the process to ``log_file``.

    Handlers already on the root logger (including stream handlers that
    would write into the stdio transport) are replaced.

    Args:
        log_file: Log file path; parent directories are created
        level: Level as an int or a name such as ``"DEBUG"`` (the
            ``log_level`` value of ``MatcherConfig``)
        format_string: Record format (default: ``LOG_FORMAT``)

    Returns:
        The root logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format=format_string or LOG_FORMAT,
        handlers=[logging.FileHandler(log_path)],
        force=True,
    )

    root = logging.getLogger()
    root.info(f"Logging to {log_path} at {logging.getLevelName(level)}")
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_dict(
    logger: logging.Logger, message: str, data: dict[str, Any], level: int = logging.INFO
) -> None:
    """
    Log ``message`` followed by one ``  key: value`` line per entry.

    Used at startup to record the effective ``MatcherConfig``. Values of
    keys containing any of ``SENSITIVE_KEY_PARTS`` are redacted.
    """
    logger.log(level, message)
    for key, value in data.items():
        if any(part in key.lower() for part in SENSITIVE_KEY_PARTS):
            value = "***REDACTED***"
        logger.log(level, f"  {key}: {value}")


def log_tool_result(logger: logging.Logger | None = None) -> Callable[[Callable], Callable]:
    """
    Decorator logging the result and duration of an async tool call.

    Results are logged as JSON, falling back to ``str`` for values JSON
    cannot encode. Exceptions are logged and re-raised.

    Args:
        logger: Logger to write to (default: the tool module's logger)

    Returns:
        Decorator for async tool functions
    """

    def decorator(func: Callable) -> Callable:
        tool_logger = logger or logging.getLogger(func.__module__)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed = time.time() - start_time
                tool_logger.error(f"TOOL_ERROR [{func.__name__}] after {elapsed:.3f}s: {e}")
                raise
            elapsed = time.time() - start_time
            tool_logger.info(
                f"TOOL_RESULT [{func.__name__}] ({elapsed:.3f}s): {json.dumps(result, default=str)}"
            )
            return result

        return wrapper

    return decorator
