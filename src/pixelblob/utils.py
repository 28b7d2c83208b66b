"""
Utility helpers shared by the services.

All utilities are pure functions with no dependencies on other project modules.
"""

import time
from contextlib import contextmanager
from typing import Generator, Iterable, List, TypeVar

T = TypeVar("T")


@contextmanager
def timer() -> Generator[dict, None, None]:
    """
    Context manager to measure execution time.

    Usage:
        with timer() as t:
            # ... code to time ...
            pass
        print(f"Took {t['ms']}ms")

    Yields:
        Dictionary with 'ms' key containing processing time in milliseconds
    """
    result = {"ms": 0}
    start_time = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = int((time.perf_counter() - start_time) * 1000)


def stepped_range(start: int, stop: int, step: int) -> range:
    """``range(start, stop, step)`` with the step raised to at least 1."""
    return range(start, stop, max(1, step))


def distinct(items: Iterable[T]) -> List[T]:
    """Drop repeated items, keeping the first occurrence of each."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
