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


""" This file contains in-memory implementations of the registry repositories.
    It is used in testing and development."""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from core.registry.entities import (
    AccessTokenRecord,
    ImageRecord,
    RepositoryRecord,
    TagRecord,
    UserAccount,
)
from core.registry.exceptions import OptimisticLockError, PersistenceError
from core.registry.repositories import (
    AccessTokenRepository,
    ImageRecordRepository,
    RepositoryRecordRepository,
    TagRecordRepository,
    UserAccountRepository,
)
from core.registry.value_objects import RepositoryRef


class InMemoryRepositoryRecordRepository(RepositoryRecordRepository):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[str, RepositoryRecord] = {}

    def find(self, ref: RepositoryRef) -> Optional[RepositoryRecord]:
        with self._lock:
            record = self._records.get(str(ref))
            return replace(record) if record else None

    def save(self, record: RepositoryRecord) -> None:
        key = str(record.ref)
        with self._lock:
            existing = self._records.get(key)
            if existing and existing.version != record.version - 1:
                raise OptimisticLockError(
                    entity_type="Repository",
                    entity_id=key,
                    expected_version=record.version - 1,
                    actual_version=existing.version,
                )
            self._records[key] = replace(record)

    def commit_rollup(
        self, ref: RepositoryRef, size: int, expected_version: int
    ) -> None:
        key = str(ref)
        with self._lock:
            existing = self._records.get(key)
            if existing is None:
                raise PersistenceError(f"Repository {key} disappeared before commit")
            if existing.version != expected_version:
                raise OptimisticLockError(
                    entity_type="Repository",
                    entity_id=key,
                    expected_version=expected_version,
                    actual_version=existing.version,
                )
            self._records[key] = replace(
                existing,
                uploaded=True,
                checksummed=True,
                size=size,
                version=expected_version + 1,
                updated_at=datetime.now(timezone.utc),
            )


class InMemoryTagRecordRepository(TagRecordRepository):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tags: Dict[Tuple[str, str], TagRecord] = {}

    def find(self, ref: RepositoryRef, name: str) -> Optional[TagRecord]:
        with self._lock:
            tag = self._tags.get((str(ref), name))
            return replace(tag) if tag else None

    def find_all(self, ref: RepositoryRef) -> List[TagRecord]:
        key = str(ref)
        with self._lock:
            return [replace(tag) for (repo, _), tag in self._tags.items() if repo == key]

    def save(self, tag: TagRecord) -> None:
        with self._lock:
            self._tags[(str(tag.repository), tag.name)] = replace(tag)


class InMemoryImageRecordRepository(ImageRecordRepository):
    """Image store double. ``add`` stands in for the image artifact endpoints."""

    def __init__(self) -> None:
        self._images: Dict[str, ImageRecord] = {}

    def find(self, image_id: str) -> Optional[ImageRecord]:
        return self._images.get(image_id)

    def add(self, image: ImageRecord) -> None:
        self._images[image.image_id] = image


class InMemoryUserAccountRepository(UserAccountRepository):
    def __init__(self) -> None:
        self._users: Dict[str, UserAccount] = {}

    def find_by_username(self, username: str) -> Optional[UserAccount]:
        return self._users.get(username)

    def add(self, user: UserAccount) -> None:
        self._users[user.username] = user


class InMemoryAccessTokenRepository(AccessTokenRepository):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tokens: Dict[Tuple[str, str], AccessTokenRecord] = {}

    def find(self, username: str, ref: RepositoryRef) -> Optional[AccessTokenRecord]:
        with self._lock:
            return self._tokens.get((username, str(ref)))

    def find_by_scope(self, ref: RepositoryRef) -> List[AccessTokenRecord]:
        key = str(ref)
        with self._lock:
            return [token for (_, scope), token in self._tokens.items() if scope == key]

    def save(self, token: AccessTokenRecord) -> None:
        with self._lock:
            self._tokens[(token.username, str(token.repository))] = token
