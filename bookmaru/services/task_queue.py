"""Background task queue for fire-and-forget work such as notifications.

Callers enqueue and return immediately. A single daemon worker runs each
task, retries it a few times, then drops it with a log line. Failures never
reach the code that enqueued the task.
"""

import logging
import queue
import threading
import time

logger = logging.getLogger(__name__)

_STOP = object()


class TaskQueue:
    """In-process queue with one worker thread.

    Args:
        eager: run tasks inline on enqueue (tests, single-shot scripts)
        max_retries: extra attempts after the first failure
        retry_delay: seconds between attempts, multiplied by the attempt number
    """

    def __init__(self, eager: bool = False, max_retries: int = 2, retry_delay: float = 1.0):
        self.eager = eager
        self.max_retries = max(0, int(max_retries))
        self.retry_delay = max(0.0, float(retry_delay))
        self._queue = queue.Queue()
        self._worker = None
        self._lock = threading.Lock()
        self.completed = 0
        self.dropped = 0

    def enqueue(self, func, *args, **kwargs) -> None:
        """Schedule ``func(*args, **kwargs)``. Never raises."""
        name = getattr(func, '__name__', repr(func))
        if self.eager:
            self._run(func, args, kwargs)
            return
        try:
            self._ensure_worker()
            self._queue.put((func, args, kwargs))
            logger.debug(f"[QUEUE] Enqueued {name}")
        except Exception as e:
            logger.error(f"[QUEUE] Could not enqueue {name}: {e}")

    def _ensure_worker(self):
        with self._lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(
                    target=self._work, name='bookmaru-task-queue', daemon=True
                )
                self._worker.start()

    def _work(self):
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                func, args, kwargs = item
                self._run(func, args, kwargs)
            finally:
                self._queue.task_done()

    def _run(self, func, args, kwargs) -> bool:
        name = getattr(func, '__name__', repr(func))
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                func(*args, **kwargs)
                self.completed += 1
                return True
            except Exception as e:
                if attempt < attempts:
                    logger.warning(f"[QUEUE] {name} failed (attempt {attempt}/{attempts}): {e}")
                    if self.retry_delay:
                        time.sleep(self.retry_delay * attempt)
                else:
                    logger.error(f"[QUEUE] Dropping {name} after {attempts} attempt(s): {e}")
        self.dropped += 1
        return False

    def join(self):
        """Block until every queued task has run."""
        if not self.eager:
            self._queue.join()

    def shutdown(self, wait: bool = True):
        """Stop the worker after it drains the queue."""
        with self._lock:
            worker = self._worker
            self._worker = None
        if worker is None or not worker.is_alive():
            return
        self._queue.put(_STOP)
        if wait:
            worker.join()
