"""
Name: Stage Timings

Responsibilities:
  - Measure named stages of a use case (embed, retrieve, llm)
  - Report them as {stage}_ms plus total_ms for logs and answer metadata

Constraints:
  - No framework dependencies (pure Python)
"""

import time
from contextlib import contextmanager
from typing import Dict, Iterator


class StageTimings:
    """
    R: Collect per-stage durations in milliseconds.

    Usage:
        timings = StageTimings()
        with timings.measure("embed"):
            vector = embed_query(q)
        timings.to_dict()  # {"embed_ms": 45.2, "total_ms": 45.9}
    """

    def __init__(self) -> None:
        self._started = time.perf_counter()
        self._stages: Dict[str, float] = {}

    @contextmanager
    def measure(self, stage_name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self._stages[stage_name] = _elapsed_ms(start)

    def to_dict(self) -> Dict[str, float]:
        result = {f"{name}_ms": ms for name, ms in self._stages.items()}
        result["total_ms"] = _elapsed_ms(self._started)
        return result


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
