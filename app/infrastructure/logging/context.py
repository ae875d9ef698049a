"""Run context binding for structured logging.

Every script run gets a short run identifier bound to the structlog context
so interleaved output from consecutive runs can be told apart.

Usage:
    from infrastructure.logging import bind_run_context

    with bind_run_context(script="repo_watch", owner="my-org"):
        logger.info("run_started")
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


@contextmanager
def bind_run_context(
    script: str,
    run_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind run-scoped context to all logs within the context manager.

    Args:
        script: Name of the running script.
        run_id: Unique run identifier. Auto-generated if not provided.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The run identifier in use.
    """
    context: dict[str, Any] = {
        "script": script,
        "run_id": run_id or uuid.uuid4().hex[:12],
    }
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["run_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())
