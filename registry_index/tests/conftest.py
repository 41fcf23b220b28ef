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


"""Shared pytest fixtures for Registry Index tests."""

# pylint: disable=redefined-outer-name

import base64
import os
import tempfile

os.environ.setdefault("ENV", "dev")
os.environ.setdefault("REGISTRY_LOG_DIR", tempfile.mkdtemp(prefix="registry_index_logs_"))

from typing import Callable, Sequence  # noqa: E402

import pytest  # noqa: E402
from argon2 import PasswordHasher  # noqa: E402

from core.registry.entities import ImageRecord, RepositoryRecord  # noqa: E402
from core.registry.value_objects import Manifest, RepositoryRef  # noqa: E402
from infra.repositories import (  # noqa: E402
    InMemoryAccessTokenRepository,
    InMemoryImageRecordRepository,
    InMemoryRepositoryRecordRepository,
    InMemoryTagRecordRepository,
    InMemoryUserAccountRepository,
)


class FixedSignatureGenerator:  # pylint: disable=R0903
    """Signature generator returning a predictable sequence."""

    def __init__(self, prefix: str = "sig") -> None:
        self._prefix = prefix
        self._counter = 0

    def generate(self) -> str:
        """Return ``<prefix><n>`` for the n-th call."""
        self._counter += 1
        return f"{self._prefix}{self._counter}"


@pytest.fixture
def repository_repo() -> InMemoryRepositoryRecordRepository:
    """Fresh in-memory repository record store."""
    return InMemoryRepositoryRecordRepository()


@pytest.fixture
def tag_repo() -> InMemoryTagRecordRepository:
    """Fresh in-memory tag store."""
    return InMemoryTagRecordRepository()


@pytest.fixture
def image_repo() -> InMemoryImageRecordRepository:
    """Fresh in-memory image store."""
    return InMemoryImageRecordRepository()


@pytest.fixture
def user_repo() -> InMemoryUserAccountRepository:
    """Fresh in-memory user store."""
    return InMemoryUserAccountRepository()


@pytest.fixture
def token_repo() -> InMemoryAccessTokenRepository:
    """Fresh in-memory token store."""
    return InMemoryAccessTokenRepository()


@pytest.fixture
def signature_generator() -> FixedSignatureGenerator:
    """Predictable signature generator."""
    return FixedSignatureGenerator()


@pytest.fixture
def alice_app() -> RepositoryRef:
    """The ``alice/app`` repository reference."""
    return RepositoryRef.of("alice", "app")


@pytest.fixture
def register_manifest(
    repository_repo: InMemoryRepositoryRecordRepository,
) -> Callable[[RepositoryRef, Sequence[str]], RepositoryRecord]:
    """Store a repository record with the given manifest image ids."""

    def _register(ref: RepositoryRef, image_ids: Sequence[str]) -> RepositoryRecord:
        record = RepositoryRecord(
            ref=ref, manifest_json=Manifest(tuple(image_ids)).to_json()
        )
        repository_repo.save(record)
        return record

    return _register


@pytest.fixture
def add_image(image_repo: InMemoryImageRecordRepository) -> Callable[..., ImageRecord]:
    """Store an image record; uploaded and checksummed by default."""

    def _add(
        image_id: str,
        size: int = 0,
        ancestry: Sequence[str] = (),
        uploaded: bool = True,
        checksummed: bool = True,
    ) -> ImageRecord:
        image = ImageRecord(
            image_id=image_id,
            ancestry=tuple(ancestry),
            size=size,
            uploaded=uploaded,
            checksummed=checksummed,
        )
        image_repo.add(image)
        return image

    return _add


# ------------------------------------------------------------------
# API fixtures
# ------------------------------------------------------------------
TEST_PASSWORD = "s3cret-pass"


@pytest.fixture(scope="session")
def hash_password() -> Callable[[str], str]:
    """Argon2 hasher standing in for the account provisioning service."""
    return PasswordHasher().hash


@pytest.fixture(scope="session")
def password_hash(hash_password) -> str:
    """Argon2 hash of TEST_PASSWORD, computed once per session."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def registry_container(password_hash):
    """Dev container with fresh stores, an active alice and an inactive dave."""
    from container import container  # pylint: disable=import-outside-toplevel
    from core.registry.entities import UserAccount  # pylint: disable=import-outside-toplevel

    container.reset_singletons()
    users = container.user_account_repository()
    users.add(UserAccount(username="alice", password_hash=password_hash))
    users.add(UserAccount(username="bob", password_hash=password_hash))
    users.add(UserAccount(username="dave", password_hash=password_hash, active=False))
    yield container
    container.reset_singletons()


@pytest.fixture
def client(registry_container):  # pylint: disable=unused-argument
    """Test client over the application with a fresh container."""
    from fastapi.testclient import TestClient  # pylint: disable=import-outside-toplevel
    from main import app  # pylint: disable=import-outside-toplevel
    return TestClient(app)


@pytest.fixture
def basic_auth() -> Callable[..., dict]:
    """Build Basic ``Authorization`` headers."""

    def _headers(username: str = "alice", password: str = TEST_PASSWORD) -> dict:
        raw = f"{username}:{password}".encode("utf-8")
        return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}

    return _headers


@pytest.fixture
def upload_image(registry_container) -> Callable[..., ImageRecord]:
    """Record an image as the image artifact endpoints would."""

    def _upload(
        image_id: str,
        size: int = 0,
        ancestry: Sequence[str] = (),
        uploaded: bool = True,
        checksummed: bool = True,
    ) -> ImageRecord:
        image = ImageRecord(
            image_id=image_id,
            ancestry=tuple(ancestry),
            size=size,
            uploaded=uploaded,
            checksummed=checksummed,
        )
        registry_container.image_record_repository().add(image)
        return image

    return _upload
