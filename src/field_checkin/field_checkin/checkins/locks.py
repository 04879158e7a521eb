from __future__ import annotations

import threading


class EmployeeLocks:
    """One lock per employee id.

    Serializes the "is there an active check-in?" read with the write that
    follows it. Different employees never wait on each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def for_employee(self, employee_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(employee_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[employee_id] = lock
            return lock
