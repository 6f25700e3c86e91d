import threading
from typing import Any, Callable, Optional, Tuple

from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

DEFAULT_WAIT_SECONDS = 0.25


class Debouncer:
    """
    Coalesces rapid calls so only the last one within the settle interval runs.

    Each call replaces the pending one; superseded calls are discarded, not
    queued. The wrapped function runs on a timer thread unless flush() is
    used to run it immediately on the caller's thread.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        wait_seconds: float = DEFAULT_WAIT_SECONDS,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        """
        Args:
            func: Function to call once input settles
            wait_seconds: Settle interval
            timer_factory: threading.Timer compatible factory (swappable in tests)
        """
        self.func = func
        self.wait_seconds = max(0.0, wait_seconds)
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._pending: Optional[Tuple[tuple, dict]] = None
        self._generation = 0

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def call(self, *args, **kwargs) -> None:
        """Schedule func(*args, **kwargs), superseding any pending call."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                logger.trace("Discarded superseded call")

            self._generation += 1
            self._pending = (args, kwargs)
            self._timer = self._timer_factory(
                self.wait_seconds, self._fire, args=(self._generation,)
            )
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> bool:
        """
        Run the pending call now.

        Returns:
            True if a pending call was executed
        """
        with self._lock:
            pending = self._take_pending()
        if pending is None:
            return False
        args, kwargs = pending
        self.func(*args, **kwargs)
        return True

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            self._take_pending()

    def _take_pending(self) -> Optional[Tuple[tuple, dict]]:
        # Caller holds the lock
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1
        pending, self._pending = self._pending, None
        return pending

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A newer call or flush/cancel got here first
            if generation != self._generation or self._pending is None:
                return
            args, kwargs = self._pending
            self._pending = None
            self._timer = None

        try:
            self.func(*args, **kwargs)
        except Exception as e:
            logger.error("Debounced call failed: %s", e)
