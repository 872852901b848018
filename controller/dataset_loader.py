# /controller/dataset_loader.py

# Background dataset loader that runs the static-data reads off the UI thread.
# One worker thread per loader; requests are served in order and every result
# is tagged with the generation of the request that produced it. The consumer
# (MapEngine.begin_frame) only ever sees the newest generation: anything older
# that is still in flight when a new request arrives is dropped.

from __future__ import annotations

import queue
import sqlite3
import threading
import time
from typing import Callable, Optional, Tuple

from controller.log_config import get_data_logger
from engine.models import Dataset

logger = get_data_logger('loader')

Fetch = Callable[[], Dataset]

_STOP = object()


class DatasetLoader:
    """
    Serves dataset requests on a daemon thread.

    - request(fetch) bumps the generation and queues the job.
    - poll() is non-blocking and returns the newest finished Dataset or None.
    - pending is True while the newest request has not been delivered/failed.
    """

    def __init__(self, name: str = "map") -> None:
        self.name = name
        self._thread: Optional[threading.Thread] = None
        self._jobs: "queue.Queue[object]" = queue.Queue()
        self._results: "queue.Queue[Tuple[int, Dataset]]" = queue.Queue()

        self._lock = threading.Lock()
        self._generation = 0   # newest request issued
        self._settled = 0      # newest generation delivered to poll() or failed

    # ---- lifecycle ----
    def ensure_running(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._run, name=f"DatasetLoader-{self.name}", daemon=True)
        self._thread.start()
        logger.debug(f"[{self.name}] worker started")

    def stop(self, timeout: float = 1.0) -> None:
        t = self._thread
        self._thread = None
        if t and t.is_alive():
            self._jobs.put(_STOP)
            t.join(timeout=timeout)
        logger.debug(f"[{self.name}] worker stopped")

    # ---- producer side (UI thread) ----
    def request(self, fetch: Fetch) -> int:
        """Queue a load; returns its generation number."""
        with self._lock:
            self._generation += 1
            gen = self._generation
        self.ensure_running()
        self._jobs.put((gen, fetch))
        logger.debug(f"[{self.name}] request generation {gen}")
        return gen

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._settled < self._generation

    # ---- consumer side (render thread) ----
    def poll(self) -> Optional[Dataset]:
        """Newest finished dataset, or None. Stale generations are discarded."""
        newest: Optional[Tuple[int, Dataset]] = None
        while True:
            try:
                item = self._results.get_nowait()
            except queue.Empty:
                break
            if newest is None or item[0] > newest[0]:
                newest = item

        if newest is None:
            return None
        gen, dataset = newest
        with self._lock:
            if gen < self._generation:
                logger.debug(f"[{self.name}] dropping stale generation {gen} (latest {self._generation})")
                return None
            self._settled = max(self._settled, gen)
        return dataset

    def wait(self, timeout: float = 5.0) -> Optional[Dataset]:
        """Block until the newest request settles; used by scripts and tests."""
        deadline = time.monotonic() + timeout
        while True:
            dataset = self.poll()
            if dataset is not None or not self.pending:
                return dataset
            if time.monotonic() >= deadline:
                return None
            time.sleep(0.005)

    # ---- worker ----
    def _run(self) -> None:
        while True:
            job = self._jobs.get()
            if job is _STOP:
                return
            gen, fetch = job  # type: ignore[misc]
            if gen < self.generation:
                self._settle(gen)
                logger.debug(f"[{self.name}] skipping superseded generation {gen}")
                continue

            t0 = time.perf_counter()
            try:
                dataset = fetch()
            except sqlite3.Error as e:
                logger.error(f"[{self.name}] static-data read failed (generation {gen}): {e}")
                self._settle(gen)
                continue
            except Exception:
                logger.exception(f"[{self.name}] dataset build failed (generation {gen})")
                self._settle(gen)
                continue

            dt = time.perf_counter() - t0
            logger.info(f"[{self.name}] generation {gen} ready: {len(dataset.points)} points "
                        f"in {dt:.3f}s")
            self._results.put((gen, dataset))

    def _settle(self, gen: int) -> None:
        with self._lock:
            self._settled = max(self._settled, gen)
