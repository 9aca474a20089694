"""Timing utilities for measuring code execution time."""

import inspect
import logging
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from fetchmcp.logger import logger

__all__ = ["Stopwatch", "timeit", "timer"]

P = ParamSpec("P")
R = TypeVar("R")


class Stopwatch:
    """Elapsed time of a timed block, readable once the block has exited."""

    def __init__(self) -> None:
        """Start the stopwatch."""
        self._start = time.perf_counter()
        self._stop: float | None = None

    def stop(self) -> None:
        """Freeze the elapsed time."""
        if self._stop is None:
            self._stop = time.perf_counter()

    @property
    def elapsed(self) -> float:
        """Elapsed seconds (live while running, frozen after stop)."""
        end = self._stop if self._stop is not None else time.perf_counter()
        return end - self._start

    @property
    def elapsed_ms(self) -> float:
        """Elapsed milliseconds rounded to two decimals."""
        return round(self.elapsed * 1000, 2)


@contextmanager
def timer(name: str = "Operation", log_level: int = logging.INFO) -> Generator[Stopwatch]:
    """Context manager for timing code blocks.

    Args:
        name: Name of the operation being timed
        log_level: Logging level to use (default: INFO)

    Yields:
        Stopwatch whose elapsed time is frozen when the block exits.

    Example:
        >>> with timer("Document parsing", logging.DEBUG) as watch:
        ...     soup = parse_document(html, url)
        >>> watch.elapsed_ms

    """
    watch = Stopwatch()
    try:
        yield watch
    finally:
        watch.stop()
        logger.log(log_level, "%s took %.4f seconds", name, watch.elapsed)


def timeit(
    name: str | None = None, log_level: int = logging.INFO
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log how long each call of the decorated function takes.

    Works for plain and coroutine functions. The operation name defaults
    to module.function.

    Example:
        >>> @server.tool(name="fetch")
        ... @timeit("fetch tool")
        ... async def fetch(url: str) -> ToolResult:
        ...     ...

    """
    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        operation_name = name or f"{func.__module__}.{func.__name__}"

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                with timer(operation_name, log_level):
                    return await func(*args, **kwargs)  # type: ignore[misc]
            return cast("Callable[P, R]", async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with timer(operation_name, log_level):
                return func(*args, **kwargs)
        return sync_wrapper
    return decorator
