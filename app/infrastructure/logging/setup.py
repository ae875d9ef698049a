"""Structlog configuration for the onboarding scripts.

Each script calls ``configure_logging()`` once at startup. Output goes to
stderr so stdout stays free for anything a caller might pipe. Rendering is
human-readable by default and JSON with ``LOG_FORMAT=json``. Redaction runs
after exception formatting so tracebacks are scrubbed too.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging(log_level="DEBUG")

    logger = get_module_logger()
    logger.info("repository_notification_sent", repository="api")

Dependencies:
    - infrastructure.configuration.settings
"""

import inspect
import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.configuration import settings
from infrastructure.logging.formatters import mask_sensitive_data, truncate_large_values

MAX_VALUE_LENGTH = 1000


def _is_test_environment() -> bool:
    """True while running under pytest."""
    return "pytest" in sys.modules


def build_processors(json_output: bool) -> List[Any]:
    """Processor chain shared by console and JSON output."""
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    return [
        # run_id and script bound by bind_run_context()
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        mask_sensitive_data(),
        truncate_large_values(max_length=MAX_VALUE_LENGTH),
        renderer,
    ]


def configure_logging(
    log_level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: Level name overriding ``settings.LOG_LEVEL``
        json_output: Renderer override; defaults to ``settings.is_json_logging``

    Returns:
        Configured logger instance
    """
    if _is_test_environment():
        # Tests assert on behaviour, not on log output
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", level=logging.CRITICAL + 1, force=True)
        return structlog.stdlib.get_logger()

    use_json = settings.is_json_logging if json_output is None else json_output
    level_name = (log_level or settings.LOG_LEVEL).upper()

    structlog.configure(
        processors=build_processors(use_json),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )
    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Return a logger bound to the calling module.

    Binds ``component`` (last dotted segment) and ``module_path`` so every
    event can be traced back to the module that emitted it.

    Example:
        # In modules/repo_watch/core.py
        logger = get_module_logger()
        # context: {"component": "core", "module_path": "modules.repo_watch.core"}
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None
    if module is None:
        return logger.bind(component="unknown")

    module_name = module.__name__
    return logger.bind(component=module_name.rsplit(".", 1)[-1], module_path=module_name)
