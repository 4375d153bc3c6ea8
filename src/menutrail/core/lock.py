"""Named mutual-exclusion locks."""

import threading
from dataclasses import dataclass, field
from typing import Protocol


class LockBackend(Protocol):
    """Protocol for named locks."""

    def acquire(self, name: str, timeout: float = 30.0) -> bool: ...

    def release(self, name: str) -> None: ...


@dataclass
class _LockEntry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    # Holders plus waiters
    users: int = 0


class MemoryLock:
    """Process-local named locks backed by threading.Lock.

    An entry lives only while some thread holds or waits for it, so the
    number of entries is bounded by concurrent callers, not by names seen.
    """

    def __init__(self) -> None:
        self._locks: dict[str, _LockEntry] = {}
        self._guard = threading.Lock()

    def acquire(self, name: str, timeout: float = 30.0) -> bool:
        """Acquire the named lock.

        Args:
            name: Lock name
            timeout: Seconds to wait, negative to wait forever

        Returns:
            True if acquired, False on timeout
        """
        with self._guard:
            entry = self._locks.get(name)
            if entry is None:
                entry = self._locks[name] = _LockEntry()
            entry.users += 1

        if entry.lock.acquire(timeout=timeout):
            return True

        with self._guard:
            self._drop_user(name, entry)
        return False

    def release(self, name: str) -> None:
        """Release the named lock.

        Raises:
            RuntimeError: If the lock is not held
        """
        with self._guard:
            entry = self._locks.get(name)
            if entry is None or not entry.lock.locked():
                raise RuntimeError(f"Lock not held: {name}")
            entry.lock.release()
            self._drop_user(name, entry)

    def _drop_user(self, name: str, entry: _LockEntry) -> None:
        entry.users -= 1
        if entry.users == 0:
            del self._locks[name]
