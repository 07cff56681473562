"""Running the stepping loop and the render loop on separate threads.

The two threads share exactly one slot, a LatestSnapshot. The stepper
computes the next step and builds a snapshot with no lock held, then swaps
the snapshot in; the renderer takes the reference out. Readers always get the
most recent complete step: intermediate steps are not queued.
"""

import logging
import threading
import time
from typing import Callable, Optional

from star_sim.errors import ConfigurationError
from star_sim.physics.simulation import Simulation, Snapshot

logger = logging.getLogger(__name__)


class LatestSnapshot:
    """Lock-guarded single-value cell holding the newest snapshot."""

    def __init__(self, initial: Optional[Snapshot] = None):
        self._lock = threading.Lock()
        self._value = initial
        self._version = 0 if initial is None else 1

    def publish(self, snapshot: Snapshot):
        """Replace the stored snapshot."""
        with self._lock:
            self._value = snapshot
            self._version += 1

    def latest(self) -> Optional[Snapshot]:
        """Return the newest snapshot (None before the first publish)."""
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        with self._lock:
            return self._version


class FixedRateLoop:
    """Call a function repeatedly at a target rate.

    Each iteration measures its own wall-clock time and sleeps for whatever
    is left of the period. An iteration that overruns is not shortened or
    skipped; the next one simply starts late.
    """

    def __init__(self, func: Callable[[], None], rate_hz: float, name: str = "loop", max_iterations: Optional[int] = None):
        if not rate_hz > 0.0:
            raise ConfigurationError(f"Loop rate must be positive, got {rate_hz}")
        self.func = func
        self.rate_hz = rate_hz
        self.period = 1.0 / rate_hz
        self.name = name
        self.max_iterations = max_iterations
        self.iterations = 0
        self.overruns = 0
        self.error: Optional[BaseException] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run(self):
        """Run on the calling thread until stopped or max_iterations is reached.

        An exception from the function stops the loop and is raised again
        here after being kept in `error`.
        """
        self._loop()
        if self.error is not None:
            raise self.error

    def _loop(self):
        while not self._stop.is_set():
            if self.max_iterations is not None and self.iterations >= self.max_iterations:
                break
            start = time.perf_counter()
            try:
                self.func()
            except Exception as e:
                self.error = e
                self._stop.set()
                logger.error("%s stopped after %d iterations: %s", self.name, self.iterations, e)
                return
            self.iterations += 1
            elapsed = time.perf_counter() - start
            remaining = self.period - elapsed
            if remaining > 0:
                self._stop.wait(remaining)
            else:
                self.overruns += 1
                logger.debug("%s iteration %d overran by %.2f ms", self.name, self.iterations, -remaining * 1000.0)

    def start(self) -> threading.Thread:
        """Run in a daemon thread; it ends with the process unless stopped.

        If the function raises, the thread ends and the exception is kept in
        `error` for the owner to check.
        """
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info("%s started at %.1f Hz", self.name, self.rate_hz)
        return self._thread

    def stop(self):
        self._stop.set()

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


class SteppingLoop(FixedRateLoop):
    """Steps a Simulation at a fixed rate and publishes each result.

    The simulation is owned by this loop's thread once started; other
    threads must only read through the cell.
    """

    def __init__(
        self,
        simulation: Simulation,
        cell: Optional[LatestSnapshot] = None,
        rate_hz: float = 120.0,
        max_iterations: Optional[int] = None,
    ):
        super().__init__(self._tick, rate_hz, name="stepping-loop", max_iterations=max_iterations)
        self.simulation = simulation
        self.cell = cell if cell is not None else LatestSnapshot()
        if self.cell.latest() is None:
            self.cell.publish(simulation.snapshot())

    def _tick(self):
        self.simulation.step()
        snapshot = self.simulation.snapshot()
        self.cell.publish(snapshot)
