"""Per-step timings for the bookshelf pipeline."""
import time
from typing import Callable, Dict, Optional
import logging

logger = logging.getLogger(__name__)


def now_ms() -> float:
    """Return current time in milliseconds using high-resolution timer."""
    return time.perf_counter() * 1000


class StepTimer:
    """
    Records how long each named step took since the previous mark.

    Example:
        timer = StepTimer("bookshelf")
        photo = upload(...)
        timer.context = f"bookshelf media_id={photo.id}"
        timer.mark("upload")
    """

    def __init__(self, context: str = "", log_fn: Optional[Callable[[str], None]] = None):
        self.context = context
        self.steps: Dict[str, float] = {}
        self._log = log_fn or logger.debug
        self._last = now_ms()

    def mark(self, step: str) -> float:
        current = now_ms()
        elapsed = current - self._last
        self._last = current
        self.steps[step] = round(elapsed, 2)
        self._log(f"{self.context} {step}: {elapsed:.2f}ms".strip())
        return elapsed

    @property
    def total_ms(self) -> float:
        return round(sum(self.steps.values()), 2)
