"""
work_queue.py - Fixed-size worker pool

A set of long-lived worker threads pulls tasks from one shared FIFO queue.
Callers submit plain callables, block in drain() until every submitted task
(including tasks submitted by other tasks) has finished, and shut the pool
down when done.
"""

import logging
from collections import deque
from threading import Condition, Lock, Thread, current_thread
from typing import Callable

logger = logging.getLogger(__name__)

# The default number of threads to use when not specified.
DEFAULT_THREADS = 5

Task = Callable[[], object]


class WorkQueue:
    """
    Worker pool with a pending-task counter and a tracked-task counter.

    pending counts tasks submitted but not yet finished running (not merely
    dequeued); tracked counts tasks submitted through submit_tracked() and is
    read by bounded producers such as the web crawler.
    """

    def __init__(self, threads: int = DEFAULT_THREADS) -> None:
        if threads < 1:
            raise ValueError(f"work queue needs at least one thread, got {threads}")

        self._queue: deque[Task] = deque()
        self._queue_ready = Condition(Lock())
        self._pending = 0
        self._tracked = 0
        self._pending_done = Condition(Lock())
        self._shutdown = False

        # start the threads so they are waiting in the background
        self._workers = [
            Thread(target=self._run_worker, name=f"Worker-{worker_id}", daemon=True)
            for worker_id in range(threads)
        ]
        for worker in self._workers:
            worker.start()

    def __enter__(self) -> "WorkQueue":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.drain()
        self.shutdown()

    @property
    def size(self) -> int:
        """Number of worker threads."""
        return len(self._workers)

    @property
    def pending(self) -> int:
        with self._pending_done:
            return self._pending

    @property
    def tracked(self) -> int:
        with self._pending_done:
            return self._tracked

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def submit(self, task: Task) -> None:
        """Queue a task; an idle worker picks it up. Raises RuntimeError after shutdown()."""
        self._enqueue(task, tracked=False)

    def submit_tracked(self, task: Task) -> None:
        """Queue a task and count it towards the tracked total."""
        self._enqueue(task, tracked=True)

    def _enqueue(self, task: Task, tracked: bool) -> None:
        if self._shutdown:
            raise RuntimeError("Cannot submit tasks after shutdown")
        # pending goes up before the task is visible so drain() never sees a
        # zero count while the task is still queued
        with self._pending_done:
            self._pending += 1
            if tracked:
                self._tracked += 1
        with self._queue_ready:
            self._queue.append(task)
            self._queue_ready.notify()

    def drain(self) -> None:
        """Block until every pending task has finished running."""
        with self._pending_done:
            while self._pending > 0:
                self._pending_done.wait()

    def shutdown(self) -> None:
        """
        Ask the workers to stop. Tasks already running finish, queued tasks
        are abandoned.
        """
        with self._queue_ready:
            self._shutdown = True
            self._queue_ready.notify_all()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the worker threads to exit after shutdown()."""
        for worker in self._workers:
            worker.join(timeout)

    def _finish_task(self) -> None:
        with self._pending_done:
            self._pending -= 1
            if self._pending == 0:
                self._pending_done.notify_all()

    def _run_worker(self) -> None:
        while True:
            with self._queue_ready:
                while not self._queue and not self._shutdown:
                    self._queue_ready.wait()

                # exit for one of two reasons: the queue has work, or shutdown was called
                if self._shutdown:
                    break
                task = self._queue.popleft()

            try:
                task()
            except Exception:
                # one failing task must never take its worker down
                logger.exception("Task failed in %s", current_thread().name)
            finally:
                self._finish_task()

        logger.debug("%s stopped", current_thread().name)
