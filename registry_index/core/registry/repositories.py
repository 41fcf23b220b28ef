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

"""Repository interfaces for the Registry module.

Every component receives its stores through these ports so that tests can
swap in in-memory doubles.
"""

from abc import ABC, abstractmethod
from typing import ContextManager, List, Optional

from core.registry.entities import (
    AccessTokenRecord,
    ImageRecord,
    RepositoryRecord,
    TagRecord,
    UserAccount,
)
from core.registry.value_objects import RepositoryRef


class RepositoryRecordRepository(ABC):
    """Store for repository records."""

    @abstractmethod
    def find(self, ref: RepositoryRef) -> Optional[RepositoryRecord]:
        """Return the repository record or None if not registered.

        Raises:
            PersistenceError: If the store cannot be read.
        """
        ...

    @abstractmethod
    def save(self, record: RepositoryRecord) -> None:
        """Insert a new record or update the manifest of an existing one.

        Raises:
            OptimisticLockError: If the stored version is not
                ``record.version - 1``.
            PersistenceError: If the store cannot be written.
        """
        ...

    @abstractmethod
    def commit_rollup(
        self, ref: RepositoryRef, size: int, expected_version: int
    ) -> None:
        """Set ``uploaded``, ``checksummed`` and ``size`` in one update.

        Raises:
            OptimisticLockError: If the stored version is not
                ``expected_version``.
            PersistenceError: If the store cannot be written.
        """
        ...


class TagRecordRepository(ABC):
    """Store for tag records."""

    @abstractmethod
    def find(self, ref: RepositoryRef, name: str) -> Optional[TagRecord]:
        """Return one tag or None."""
        ...

    @abstractmethod
    def find_all(self, ref: RepositoryRef) -> List[TagRecord]:
        """Return every tag of a repository in persisted order."""
        ...

    @abstractmethod
    def save(self, tag: TagRecord) -> None:
        """Insert or update a tag, keyed by (repository, name)."""
        ...


class ImageRecordRepository(ABC):
    """Read access to image records owned by the image artifact endpoints."""

    @abstractmethod
    def find(self, image_id: str) -> Optional[ImageRecord]:
        """Return the image record or None if the image was never uploaded."""
        ...


class UserAccountRepository(ABC):
    """Read access to registry user accounts."""

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[UserAccount]:
        """Return the account or None."""
        ...


class AccessTokenRepository(ABC):
    """Store for repository scoped access tokens."""

    @abstractmethod
    def find(self, username: str, ref: RepositoryRef) -> Optional[AccessTokenRecord]:
        """Return the token a user holds for a repository, or None."""
        ...

    @abstractmethod
    def find_by_scope(self, ref: RepositoryRef) -> List[AccessTokenRecord]:
        """Return every token issued for a repository."""
        ...

    @abstractmethod
    def save(self, token: AccessTokenRecord) -> None:
        """Insert or replace the token for (username, repository)."""
        ...


class RepositoryLock(ABC):  # pylint: disable=R0903
    """Mutual exclusion for mutating operations on one repository."""

    @abstractmethod
    def hold(self, ref: RepositoryRef) -> ContextManager[None]:
        """Return a context manager holding the lock for ``ref``."""
        ...


class SignatureGenerator(ABC):  # pylint: disable=R0903
    """Port for generating token signatures."""

    @abstractmethod
    def generate(self) -> str:
        """Return a fresh alphanumeric signature."""
        ...
