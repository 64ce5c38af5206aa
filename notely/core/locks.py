"""
Verrous par parent.

Toute opération qui modifie des positions (create, reorder, delete, restore,
purge) tient le verrou de son parent pendant toute la séquence
lecture -> écriture -> commit. Deux suppressions concurrentes dans la même
page sont ainsi exécutées l'une après l'autre.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable


class KeyedLocks:
    """Table de verrous indexée par clé, les entrées inutilisées sont libérées"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._holders: Dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable):
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._holders[key] = self._holders.get(key, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._holders[key] -= 1
                if self._holders[key] == 0:
                    del self._holders[key]
                    del self._locks[key]

    def __len__(self):
        with self._guard:
            return len(self._locks)


parent_locks = KeyedLocks()
