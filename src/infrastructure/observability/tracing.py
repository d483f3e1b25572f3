"""Tracing helpers for instrumenting node code with OpenTelemetry."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar, overload

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode, Tracer

P = ParamSpec("P")
R = TypeVar("R")

SpanAttributes = dict[str, str | int | float | bool]


def get_tracer(name: str) -> Tracer:
    """Get a tracer for the given module name.

    Args:
        name: Module name, typically __name__.

    Returns:
        A Tracer instance for creating spans.
    """
    return trace.get_tracer(name)


def add_span_attributes(attributes: SpanAttributes) -> None:
    """Add attributes to the current span, if it is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)


@overload
def traced(  # noqa: UP047
    func: Callable[P, R],
) -> Callable[P, R]: ...


@overload
def traced(
    func: None = None,
    *,
    span_name: str | None = None,
    attributes: SpanAttributes | None = None,
    record_exception: bool = True,
) -> Callable[[Callable[P, R]], Callable[P, R]]: ...


def traced(  # noqa: UP047
    func: Callable[P, R] | None = None,
    *,
    span_name: str | None = None,
    attributes: SpanAttributes | None = None,
    record_exception: bool = True,
) -> Callable[P, R] | Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator to run a function inside an OpenTelemetry span.

    Works with both sync and async functions, with or without parentheses.
    The tracer is looked up on every call so that a provider installed after
    import time (as tests do) still receives the spans.

    Args:
        func: The function to trace (when used without parentheses).
        span_name: Name for the span (defaults to the function's qualified name).
        attributes: Static attributes to add to the span.
        record_exception: Whether to record exceptions on the span.

    Examples:
        @traced
        def describe():
            ...

        @traced(span_name="qdrant_node.execute", attributes={"node": "qdrantAdvanced"})
        async def execute(context):
            ...
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        name = span_name or fn.__qualname__

        def _start(span: trace.Span) -> None:
            if attributes:
                for key, value in attributes.items():
                    span.set_attribute(key, value)

        def _fail(span: trace.Span, exc: Exception) -> None:
            if record_exception:
                span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))

        if inspect.iscoroutinefunction(fn):

            @wraps(fn)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                tracer = get_tracer(fn.__module__)
                with tracer.start_as_current_span(
                    name, record_exception=False, set_status_on_exception=False
                ) as span:
                    _start(span)
                    try:
                        result = await fn(*args, **kwargs)
                    except Exception as e:
                        _fail(span, e)
                        raise
                    span.set_status(Status(StatusCode.OK))
                    return result

            return async_wrapper  # type: ignore[return-value]

        @wraps(fn)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            tracer = get_tracer(fn.__module__)
            with tracer.start_as_current_span(
                name, record_exception=False, set_status_on_exception=False
            ) as span:
                _start(span)
                try:
                    result = fn(*args, **kwargs)
                except Exception as e:
                    _fail(span, e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return sync_wrapper

    if func is not None:
        return decorator(func)
    return decorator
