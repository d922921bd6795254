"""
Reader/writer lock guarding the shared inverted index.

Any number of readers may hold the lock at once, a writer holds it alone.
Writers have priority: once a writer is waiting no new reader is admitted,
so a steady stream of searches cannot starve a merge.
"""

import threading


class _Guard:
    """One side (read or write) of a ReadWriteLock."""

    def __init__(self, acquire, release) -> None:
        self._acquire = acquire
        self._release = release

    def lock(self) -> None:
        self._acquire()

    def unlock(self) -> None:
        self._release()

    def __enter__(self) -> "_Guard":
        self._acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._release()


class ReadWriteLock:
    """
    Multiple-reader / single-writer lock built on one condition variable.

    Not reentrant. Unlocking a side that is not held raises RuntimeError,
    the same way releasing an unlocked threading.Lock does.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer: int | None = None
        self._waiting_writers = 0
        self._read_guard = _Guard(self._acquire_read, self._release_read)
        self._write_guard = _Guard(self._acquire_write, self._release_write)

    def read_lock(self) -> _Guard:
        return self._read_guard

    def write_lock(self) -> _Guard:
        return self._write_guard

    @property
    def readers(self) -> int:
        with self._condition:
            return self._readers

    @property
    def writing(self) -> bool:
        with self._condition:
            return self._writer is not None

    def _acquire_read(self) -> None:
        with self._condition:
            while self._writer is not None or self._waiting_writers > 0:
                self._condition.wait()
            self._readers += 1

    def _release_read(self) -> None:
        with self._condition:
            if self._readers == 0:
                raise RuntimeError("read lock released but not held")
            self._readers -= 1
            if self._readers == 0:
                self._condition.notify_all()

    def _acquire_write(self) -> None:
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer is not None or self._readers > 0:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = threading.get_ident()

    def _release_write(self) -> None:
        with self._condition:
            if self._writer != threading.get_ident():
                raise RuntimeError("write lock released by a thread that does not hold it")
            self._writer = None
            self._condition.notify_all()
