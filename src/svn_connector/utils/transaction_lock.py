#!/usr/bin/env python3
# Reentrant lock which serializes svn checkout / modify / commit sequences within one connector instance

# This is a client-side serialization device only, not a repository lock;
# other svn clients can still commit to the same repository at the same time

# Import Python standard modules
import threading


class TransactionLock:
    """
    Wraps a threading.RLock, and tracks how many times the current thread holds it,
    so that release_all() can be called from any state, including threads which don't hold the lock,
    without raising

    Acquisition blocks with no timeout; a caller can wait indefinitely behind a slow commit
    """

    def __init__(self):

        self._lock = threading.RLock()

        # Per-thread hold depth
        self._holds = threading.local()

        # Protects the counters below, which are read by tests and status logging
        self._counter_lock = threading.Lock()
        self.acquire_count = 0
        self.release_count = 0


    def _depth(self) -> int:
        return getattr(self._holds, "depth", 0)


    def acquire(self) -> None:
        """Block until this thread holds the lock"""

        self._lock.acquire()
        self._holds.depth = self._depth() + 1

        with self._counter_lock:
            self.acquire_count += 1


    def release_all(self) -> int:
        """
        Release every hold the current thread has on the lock

        A no-op if the current thread doesn't hold the lock

        Returns the number of holds released
        """

        released = 0

        while self._depth() > 0:

            self._holds.depth = self._depth() - 1
            self._lock.release()
            released += 1

        if released:
            with self._counter_lock:
                self.release_count += released

        return released


    def is_held_by_current_thread(self) -> bool:
        return self._depth() > 0


    def get_status(self) -> dict:

        with self._counter_lock:
            return {
                "acquire_count": self.acquire_count,
                "release_count": self.release_count,
            }
