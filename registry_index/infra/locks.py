# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""In-process per-repository locking.

Registration, tag writes and the completion gate are read-then-write
sequences against the store. Holding one lock per (namespace, repository)
for their whole duration keeps two requests for the same repository from
interleaving inside one server process.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from core.registry.repositories import RepositoryLock
from core.registry.value_objects import RepositoryRef


class RepositoryLockManager(RepositoryLock):
    """Keyed mutex registry, one ``threading.Lock`` per repository."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, ref: RepositoryRef) -> threading.Lock:
        key = str(ref)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, ref: RepositoryRef) -> Iterator[None]:
        """Hold the lock for ``ref`` until the block exits."""
        lock = self._lock_for(ref)
        with lock:
            yield
