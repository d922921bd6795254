import threading
import time

import pytest

from search_engine.rwlock import ReadWriteLock


def test_many_readers_share_the_lock():
    lock = ReadWriteLock()
    barrier = threading.Barrier(3, timeout=5)
    seen = []

    def reader():
        with lock.read_lock():
            barrier.wait()  # all three inside at once
            seen.append(lock.readers)
            barrier.wait()  # nobody leaves before every count is taken

    threads = [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(5)

    assert seen == [3, 3, 3]
    assert lock.readers == 0


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    lock.write_lock().lock()
    entered = threading.Event()

    def reader():
        with lock.read_lock():
            entered.set()

    t = threading.Thread(target=reader)
    t.start()
    assert not entered.wait(0.2)
    lock.write_lock().unlock()
    assert entered.wait(5)
    t.join(5)


def test_writer_excludes_writers():
    lock = ReadWriteLock()
    active = []
    overlaps = []

    def writer():
        for _ in range(50):
            with lock.write_lock():
                active.append(1)
                if len(active) > 1:
                    overlaps.append(len(active))
                active.pop()

    threads = [threading.Thread(target=writer) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(10)
    assert overlaps == []
    assert not lock.writing


def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    lock.read_lock().lock()
    order = []

    def writer():
        with lock.write_lock():
            order.append("writer")

    def late_reader():
        with lock.read_lock():
            order.append("reader")

    w = threading.Thread(target=writer)
    w.start()
    time.sleep(0.1)  # writer is now waiting on the held read lock
    r = threading.Thread(target=late_reader)
    r.start()
    time.sleep(0.1)
    assert order == []
    lock.read_lock().unlock()
    w.join(5)
    r.join(5)
    assert order == ["writer", "reader"]


def test_unlocking_unheld_lock_is_an_error():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.read_lock().unlock()
    with pytest.raises(RuntimeError):
        lock.write_lock().unlock()


def test_guard_released_on_error():
    lock = ReadWriteLock()
    with pytest.raises(KeyError):
        with lock.write_lock():
            raise KeyError("boom")
    assert not lock.writing
    with lock.read_lock():
        assert lock.readers == 1
