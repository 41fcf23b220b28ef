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


"""Unit tests for the in-memory registry stores."""

import pytest

from core.registry.entities import (
    AccessTokenRecord,
    ImageRecord,
    RepositoryRecord,
    TagRecord,
    UserAccount,
)
from core.registry.exceptions import OptimisticLockError, PersistenceError
from core.registry.value_objects import RepositoryRef


class TestInMemoryRepositoryRecordRepository:
    """Tests for the repository record store."""

    def test_find_returns_copy(self, repository_repo, alice_app):
        """Mutating a loaded record does not change the store."""
        repository_repo.save(RepositoryRecord(ref=alice_app, manifest_json="[]"))

        loaded = repository_repo.find(alice_app)
        loaded.size = 100

        assert repository_repo.find(alice_app).size == 0

    def test_find_unknown_returns_none(self, repository_repo, alice_app):
        """Unknown repositories are None."""
        assert repository_repo.find(alice_app) is None

    def test_save_rejects_stale_version(self, repository_repo, alice_app):
        """An update must carry the next version number."""
        repository_repo.save(RepositoryRecord(ref=alice_app, manifest_json="[]"))

        with pytest.raises(OptimisticLockError) as exc_info:
            repository_repo.save(RepositoryRecord(ref=alice_app, manifest_json="[]"))

        assert exc_info.value.expected_version == 0
        assert exc_info.value.actual_version == 1

    def test_commit_rollup_sets_all_fields(self, repository_repo, alice_app):
        """Rollup flips both flags, stores size and bumps the version."""
        repository_repo.save(RepositoryRecord(ref=alice_app, manifest_json="[]"))

        repository_repo.commit_rollup(alice_app, size=12, expected_version=1)

        record = repository_repo.find(alice_app)
        assert (record.uploaded, record.checksummed, record.size) == (True, True, 12)
        assert record.version == 2

    def test_commit_rollup_version_conflict(self, repository_repo, alice_app):
        """A stale expected version is rejected without writing."""
        repository_repo.save(RepositoryRecord(ref=alice_app, manifest_json="[]"))

        with pytest.raises(OptimisticLockError):
            repository_repo.commit_rollup(alice_app, size=12, expected_version=5)

        assert repository_repo.find(alice_app).uploaded is False

    def test_commit_rollup_missing_record(self, repository_repo, alice_app):
        """Committing a vanished repository is a persistence failure."""
        with pytest.raises(PersistenceError):
            repository_repo.commit_rollup(alice_app, size=0, expected_version=1)


class TestInMemoryTagRecordRepository:
    """Tests for the tag store."""

    def test_find_all_scoped_and_ordered(self, tag_repo, alice_app):
        """Only tags of the repository are returned, in insertion order."""
        other = RepositoryRef.of("bob", "app")
        tag_repo.save(TagRecord(repository=alice_app, name="latest", image_id="a"))
        tag_repo.save(TagRecord(repository=other, name="latest", image_id="x"))
        tag_repo.save(TagRecord(repository=alice_app, name="v1", image_id="b"))

        names = [tag.name for tag in tag_repo.find_all(alice_app)]

        assert names == ["latest", "v1"]

    def test_save_updates_in_place(self, tag_repo, alice_app):
        """Rewriting a tag keeps its original position."""
        tag_repo.save(TagRecord(repository=alice_app, name="latest", image_id="a"))
        tag_repo.save(TagRecord(repository=alice_app, name="v1", image_id="b"))
        tag_repo.save(TagRecord(repository=alice_app, name="latest", image_id="c"))

        tags = tag_repo.find_all(alice_app)

        assert [(tag.name, tag.image_id) for tag in tags] == [("latest", "c"), ("v1", "b")]
        assert tag_repo.find(alice_app, "latest").image_id == "c"
        assert tag_repo.find(alice_app, "missing") is None


class TestInMemoryOtherStores:
    """Tests for image, user and token stores."""

    def test_image_store(self, image_repo):
        """Added images are found by id."""
        image_repo.add(ImageRecord(image_id="img1", size=3))

        assert image_repo.find("img1").size == 3
        assert image_repo.find("img2") is None

    def test_user_store(self, user_repo):
        """Added users are found by username."""
        user_repo.add(UserAccount(username="alice", password_hash="h"))

        assert user_repo.find_by_username("alice").active is True
        assert user_repo.find_by_username("bob") is None

    def test_token_store_replaces_per_user_and_scope(self, token_repo, alice_app):
        """One token per (user, repository); scope lookups see all users."""
        token_repo.save(AccessTokenRecord("alice", alice_app, "h1"))
        token_repo.save(AccessTokenRecord("alice", alice_app, "h2"))
        token_repo.save(AccessTokenRecord("carol", alice_app, "h3"))

        assert token_repo.find("alice", alice_app).signature_hash == "h2"
        hashes = sorted(token.signature_hash for token in token_repo.find_by_scope(alice_app))
        assert hashes == ["h2", "h3"]
        assert token_repo.find_by_scope(RepositoryRef.of("bob", "app")) == []
