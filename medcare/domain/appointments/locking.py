"""
Per-doctor exclusive sections for scheduling writes.

Availability check followed by a write is a check-then-act sequence: two
requests for the same slot could both pass the check. Every create/update that
affects a doctor's calendar runs inside `doctor_locks.hold(...)`, which takes
an in-process lock per doctor, and the scheduler additionally row-locks the
doctor record (SELECT ... FOR UPDATE) so writers in other processes queue on
databases that support row locks.

The locks are reentrant: an update that already holds a doctor may delegate to
a helper that takes the same doctor again.
"""

import threading
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager


class DoctorLockRegistry:
    """Lazily created threading.RLock per doctor id"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.RLock] = {}

    def _lock_for(self, doctor_id: int) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(doctor_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[doctor_id] = lock
            return lock

    @contextmanager
    def hold(self, *doctor_ids: int) -> Iterator[None]:
        """
        Hold the locks of every given doctor for the duration of the block.

        Ids are de-duplicated and acquired in ascending order so an update that
        moves an appointment between two doctors cannot deadlock with the
        reverse move.
        """
        with ExitStack() as stack:
            for doctor_id in sorted(set(doctor_ids)):
                stack.enter_context(self._lock_for(doctor_id))
            yield


doctor_locks = DoctorLockRegistry()
