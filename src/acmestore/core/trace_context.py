"""Trace id context variable for logging"""

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

# Create a context variable to store the trace_id
trace_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "trace_id", default=None
)


@contextmanager
def trace_scope(trace_id: str | None = None) -> Iterator[str]:
    """
    Bind a trace id for the duration of a compound operation.

    Args:
        trace_id: Explicit trace id, a random one is generated if omitted

    Yields:
        The trace id bound to the current context
    """
    value = trace_id or uuid.uuid4().hex
    token = trace_id_context.set(value)
    try:
        yield value
    finally:
        trace_id_context.reset(token)
