"""A fixed pool of worker threads, each holding its own HTTP session."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable

from .http import HTTP

logger = logging.getLogger(__name__)

Task = Callable[[HTTP], None]

MAX_THREAD_NUM = 4
MAX_IDLE_TIME = 60.0


class ThreadPool:
    """Runs submitted tasks on worker threads; each task gets the worker's HTTP session."""

    def __init__(self, num_threads: int = MAX_THREAD_NUM):
        self._tasks: deque[Task] = deque()
        self._cond = threading.Condition()
        self._threads: list[threading.Thread] = []
        self._threads_lock = threading.Lock()
        self._stopping = threading.Event()
        self.start(num_threads)

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def submit(self, task: Task) -> None:
        with self._cond:
            self._tasks.append(task)
            self._cond.notify()

    def start(self, num: int) -> None:
        """Start workers until the pool holds ``num`` threads."""
        logger.info("ThreadPool start %d", num)
        with self._threads_lock:
            while len(self._threads) < num:
                worker = threading.Thread(target=self._task_loop, daemon=True)
                worker.start()
                self._threads.append(worker)

    def size(self) -> int:
        return len(self._threads)

    def stop(self) -> None:
        """Tell every worker to finish and wait for them."""
        self._stopping.set()
        with self._cond:
            self._cond.notify_all()
        with self._threads_lock:
            workers = list(self._threads)
            self._threads.clear()
        for worker in workers:
            worker.join()

    def _task_loop(self) -> None:
        with HTTP() as session:
            while not self._stopping.is_set():
                with self._cond:
                    self._cond.wait_for(
                        lambda: self._stopping.is_set() or bool(self._tasks),
                        timeout=MAX_IDLE_TIME,
                    )
                    if not self._tasks:
                        continue
                    task = self._tasks.popleft()
                try:
                    task(session)
                except Exception as exc:
                    logger.error("error: pool task %s", exc)
        logger.debug("thread: exit %r", self)