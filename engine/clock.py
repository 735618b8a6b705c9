"""
Clock Source Module
Cancelable one-tick-per-interval sources that drive a session countdown
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import logging
import threading

from config.settings import SESSION_CONFIG
from engine.errors import ClockError

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class ClockSource(ABC):
    """Base class for tick sources"""

    @abstractmethod
    def start(self, callback: TickCallback) -> None:
        """Begin delivering ticks to callback"""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering ticks. No tick is delivered after this returns."""
        pass

    @property
    @abstractmethod
    def running(self) -> bool:
        pass


class ThreadingClock(ClockSource):
    """
    Wall-clock ticks from a daemon thread
    Waits on an Event between ticks so stop() wakes it immediately
    """

    def __init__(self, interval: float = SESSION_CONFIG.tick_interval, name: str = "assessment-clock"):
        if interval <= 0:
            raise ClockError(f"Tick interval must be positive, got {interval}")
        self.interval = interval
        self.name = name
        self._callback: Optional[TickCallback] = None
        self._stopped = threading.Event()
        # Held while a tick is delivered; stop() takes it so no delivery outlives it
        self._delivery_lock = threading.RLock()
        self._thread: Optional[threading.Thread] = None
        self.ticks_delivered = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._stopped.is_set()

    def start(self, callback: TickCallback) -> None:
        if self._thread is not None:
            raise ClockError(f"Clock {self.name} was already started")

        self._callback = callback
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"Clock {self.name} started at {self.interval}s interval")

    def stop(self) -> None:
        if self._stopped.is_set():
            return

        self._stopped.set()
        with self._delivery_lock:
            self._callback = None

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        logger.debug(f"Clock {self.name} stopped after {self.ticks_delivered} ticks")

    def _run(self):
        while not self._stopped.wait(self.interval):
            with self._delivery_lock:
                if self._stopped.is_set() or self._callback is None:
                    break
                try:
                    self._callback()
                except Exception as e:
                    logger.error(f"Clock {self.name} callback failed, stopping: {e}")
                    self._stopped.set()
                    self._callback = None
                    break
                self.ticks_delivered += 1


class ManualClock(ClockSource):
    """
    Deterministic clock driven by explicit advance() calls
    Used by tests and by hosts that catch up elapsed time on each interaction
    """

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self._started = False
        self.ticks_delivered = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        if self._started:
            raise ClockError("Manual clock was already started")
        self._started = True
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def advance(self, seconds: int = 1) -> int:
        """Deliver up to `seconds` ticks; returns how many were delivered"""
        if seconds < 0:
            raise ClockError(f"Cannot advance by a negative amount: {seconds}")

        delivered = 0
        for _ in range(seconds):
            # The callback may stop the clock (forced submission)
            if self._callback is None:
                break
            self._callback()
            delivered += 1

        self.ticks_delivered += delivered
        return delivered
