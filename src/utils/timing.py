"""Timing helper shared by the services and providers."""

import time


def elapsed_ms(start: float) -> float:
    """Milliseconds since *start* (a ``time.perf_counter()`` reading), 2 d.p."""
    return round((time.perf_counter() - start) * 1000, 2)
