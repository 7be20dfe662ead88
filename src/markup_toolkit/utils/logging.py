import logging
import os
import sys
import typing as t
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

LOG_FORMAT_ENV = "MARKUP_LOG_FORMAT"


def _renderer(json_logs: bool) -> structlog.typing.Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(level: int = logging.INFO, json_logs: bool | None = None) -> None:
    """
    Route markup_toolkit logs to stderr through structlog.

    Parameters
    ----------
    level : int, optional
        Level of the ``markup_toolkit`` logger.
    json_logs : bool | None, optional
        Render one JSON object per line instead of console output. Defaults to
        ``MARKUP_LOG_FORMAT=json`` in the environment.
    """
    if json_logs is None:
        json_logs = os.getenv(LOG_FORMAT_ENV, "console").lower() == "json"

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger("markup_toolkit").setLevel(level)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(json_logs),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@contextmanager
def logging_context(**context: t.Any) -> Iterator[dict[str, t.Any]]:
    """
    Attach ``context`` to every log line emitted inside the block.

    Keys bound by an enclosing block keep their value, so an item logged from
    a nested batch helper still reports the batch it belongs to. Yields the
    context in effect inside the block.
    """
    outer = structlog.contextvars.get_contextvars()
    added = {key: value for key, value in context.items() if key not in outer}
    with structlog.contextvars.bound_contextvars(**added):
        yield {**added, **outer}
