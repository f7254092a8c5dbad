"""Registry of attribute combinations already used in a run."""

import threading


class UniquenessRegistry:
    """Thread-safe set of token fingerprints with atomic test-and-set."""

    def __init__(self):
        self._seen: set[tuple[str, ...]] = set()
        self._lock = threading.Lock()

    def add(self, fingerprint: tuple[str, ...]) -> bool:
        """Record fingerprint. Returns False if it was already present."""
        with self._lock:
            if fingerprint in self._seen:
                return False
            self._seen.add(fingerprint)
            return True

    def __contains__(self, fingerprint: tuple[str, ...]) -> bool:
        with self._lock:
            return fingerprint in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
