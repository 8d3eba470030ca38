"""
Time-derived id tokens.

Ids look like "order_1718000000123" / "t_1718000000124": a prefix and a
millisecond value. The millisecond part is strictly increasing for the
lifetime of a generator, so two calls in the same millisecond still get
distinct ids.
"""

import threading
import time
from typing import Callable

ORDER_PREFIX = "order"
TICKET_PREFIX = "t"


class IdGenerator:
    """Monotonic clock + disambiguator."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def _next_millis(self) -> int:
        with self._lock:
            now = int(self._clock() * 1000)
            self._last = now if now > self._last else self._last + 1
            return self._last

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{self._next_millis()}"

    def order_id(self) -> str:
        return self.new_id(ORDER_PREFIX)

    def ticket_id(self) -> str:
        return self.new_id(TICKET_PREFIX)
