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


"""Integration tests for SQL repositories.

Runs against SQLite by default; set TEST_DATABASE_URL to use PostgreSQL.
"""

import pytest

from core.registry.entities import AccessTokenRecord, RepositoryRecord, TagRecord
from core.registry.exceptions import (
    DataConsistencyError,
    OptimisticLockError,
    PersistenceError,
)
from core.registry.services import (
    AncestryResolver,
    RegistrationService,
    UploadCompletionVerifier,
)
from core.registry.value_objects import Manifest, RepositoryRef
from infra.db.models import ImageModel
from infra.db.repositories import (
    SqlAccessTokenRepository,
    SqlImageRecordRepository,
    SqlRepositoryRecordRepository,
    SqlTagRecordRepository,
    SqlUserAccountRepository,
)
from infra.id_generator import TokenSignatureGenerator


def _record(ref, image_ids=(), timestamp=None):
    record = RepositoryRecord(ref=ref, manifest_json=Manifest(tuple(image_ids)).to_json())
    if timestamp is not None:
        record.created_at = timestamp
        record.updated_at = timestamp
    return record


class TestSqlRepositoryRecordRepository:
    """Tests for SqlRepositoryRecordRepository."""

    def test_save_and_find(self, db_session, sample_ref, sample_timestamp):
        """A saved record round-trips through the database."""
        repo = SqlRepositoryRecordRepository(db_session)
        repo.save(_record(sample_ref, ["img1", "img2"], sample_timestamp))

        found = repo.find(sample_ref)

        assert found.ref == sample_ref
        assert found.manifest.image_ids == ("img1", "img2")
        assert found.uploaded is False
        assert found.version == 1

    def test_find_unknown(self, db_session):
        """Unknown repositories are None."""
        repo = SqlRepositoryRecordRepository(db_session)

        assert repo.find(RepositoryRef.of("nobody", "none")) is None

    def test_update_manifest_with_version(self, db_session, sample_ref):
        """Manifest updates need the next version."""
        repo = SqlRepositoryRecordRepository(db_session)
        repo.save(_record(sample_ref, ["img1"]))

        record = repo.find(sample_ref)
        record.replace_manifest(Manifest(("img2",)))
        repo.save(record)

        assert repo.find(sample_ref).manifest.image_ids == ("img2",)
        assert repo.find(sample_ref).version == 2

    def test_stale_save_raises(self, db_session, sample_ref):
        """Saving an old copy is rejected."""
        repo = SqlRepositoryRecordRepository(db_session)
        repo.save(_record(sample_ref))

        with pytest.raises(OptimisticLockError):
            repo.save(_record(sample_ref))

    def test_racing_manifest_updates(self, db_session, sample_ref):
        """Two writers holding the same version: the second one loses."""
        repo = SqlRepositoryRecordRepository(db_session)
        repo.save(_record(sample_ref, ["img1"]))
        first = repo.find(sample_ref)
        second = _record(sample_ref, ["img3"])
        second.version = first.version

        first.replace_manifest(Manifest(("img2",)))
        second.replace_manifest(Manifest(("img3",)))
        repo.save(first)

        with pytest.raises(OptimisticLockError) as exc_info:
            repo.save(second)

        assert exc_info.value.actual_version == 2
        assert repo.find(sample_ref).manifest.image_ids == ("img2",)

    def test_commit_rollup(self, db_session, sample_ref):
        """Rollup fields are written together."""
        repo = SqlRepositoryRecordRepository(db_session)
        repo.save(_record(sample_ref))

        repo.commit_rollup(sample_ref, size=77, expected_version=1)
        db_session.expire_all()

        record = repo.find(sample_ref)
        assert (record.uploaded, record.checksummed, record.size) == (True, True, 77)
        assert record.version == 2

    def test_commit_rollup_conflict(self, db_session, sample_ref):
        """A stale version does not write and reports the stored version."""
        repo = SqlRepositoryRecordRepository(db_session)
        repo.save(_record(sample_ref))

        with pytest.raises(OptimisticLockError) as exc_info:
            repo.commit_rollup(sample_ref, size=77, expected_version=3)

        assert exc_info.value.actual_version == 1
        assert repo.find(sample_ref).uploaded is False

    def test_commit_rollup_missing(self, db_session, sample_ref):
        """Committing an unknown repository is a persistence failure."""
        repo = SqlRepositoryRecordRepository(db_session)

        with pytest.raises(PersistenceError):
            repo.commit_rollup(sample_ref, size=0, expected_version=1)


class TestSqlTagRecordRepository:
    """Tests for SqlTagRecordRepository."""

    def test_tags_keep_insertion_order(self, db_session, sample_ref):
        """Tags come back in the order they were first written."""
        SqlRepositoryRecordRepository(db_session).save(_record(sample_ref))
        repo = SqlTagRecordRepository(db_session)

        repo.save(TagRecord(repository=sample_ref, name="v2", image_id="b"))
        repo.save(TagRecord(repository=sample_ref, name="v1", image_id="a"))
        repo.save(TagRecord(repository=sample_ref, name="v2", image_id="c", agent="docker"))

        tags = repo.find_all(sample_ref)
        assert [(tag.name, tag.image_id) for tag in tags] == [("v2", "c"), ("v1", "a")]
        assert repo.find(sample_ref, "v2").agent == "docker"
        assert repo.find(sample_ref, "v3") is None

    def test_tag_requires_repository(self, db_session, sample_ref):
        """Tagging an unknown repository fails."""
        repo = SqlTagRecordRepository(db_session)

        with pytest.raises(PersistenceError):
            repo.save(TagRecord(repository=sample_ref, name="latest", image_id="a"))


class TestSqlReadOnlyRepositories:
    """Tests for image and user lookups."""

    def test_image_lookup(self, db_session, seed_images):
        """Image rows map to ImageRecord with ancestry order kept."""
        seed_images(("img2", 5, ["img1", "img0"], True, False))
        repo = SqlImageRecordRepository(db_session)

        image = repo.find("img2")

        assert image.ancestry == ("img1", "img0")
        assert (image.size, image.uploaded, image.checksummed) == (5, True, False)
        assert repo.find("missing") is None

    def test_user_lookup(self, db_session, seed_user):
        """User rows map to UserAccount."""
        seed_user("alice", active=False)
        repo = SqlUserAccountRepository(db_session)

        user = repo.find_by_username("alice")

        assert user.active is False
        assert repo.find_by_username("bob") is None


class TestSqlAccessTokenRepository:
    """Tests for SqlAccessTokenRepository."""

    def test_save_replaces_and_scopes(self, db_session, sample_ref):
        """One row per user and repository; scope lookup spans users."""
        repo = SqlAccessTokenRepository(db_session)
        repo.save(AccessTokenRecord("alice", sample_ref, "a" * 64))
        repo.save(AccessTokenRecord("alice", sample_ref, "b" * 64))
        repo.save(AccessTokenRecord("carol", sample_ref, "c" * 64))

        assert repo.find("alice", sample_ref).signature_hash == "b" * 64
        assert repo.find("alice", RepositoryRef.of("alice", "other")) is None
        assert sorted(t.username for t in repo.find_by_scope(sample_ref)) == ["alice", "carol"]


class TestServicesOverSql:
    """Domain services wired to SQL stores."""

    def test_push_then_pull(self, db_session, sample_ref, seed_images, seed_user):
        """Register, finalize and resolve against the database."""
        seed_user("alice")
        seed_images(("img1", 10, [], True, True), ("img2", 20, ["img1"], True, True))
        repository_repo = SqlRepositoryRecordRepository(db_session)
        tag_repo = SqlTagRecordRepository(db_session)
        image_repo = SqlImageRecordRepository(db_session)
        token_repo = SqlAccessTokenRepository(db_session)
        user = SqlUserAccountRepository(db_session).find_by_username("alice")

        RegistrationService(repository_repo, token_repo, TokenSignatureGenerator()).register(
            user, sample_ref, '[{"id": "img1"}, {"id": "img2"}]'
        )
        result = UploadCompletionVerifier(repository_repo, image_repo).verify_and_finalize(
            sample_ref
        )
        db_session.expire_all()
        tag_repo.save(TagRecord(repository=sample_ref, name="latest", image_id="img2"))
        tag_repo.save(TagRecord(repository=sample_ref, name="v1", image_id="img1"))

        resolver = AncestryResolver(repository_repo, tag_repo, image_repo)
        assert result.size == 30
        assert resolver.resolve_pull_manifest(sample_ref) == [{"id": "img1"}, {"id": "img2"}]
        assert resolver.resolve_tags(sample_ref) == {"latest": "img2", "v1": "img1"}

    def test_string_parent_chain_is_rejected(self, db_session, sample_ref, seed_images):
        """An ancestry column holding a JSON string is rejected."""
        seed_images(("img1", 10, [], True, True))
        db_session.add(
            ImageModel(image_id="img2", ancestry="img1", size=20, uploaded=True, checksummed=True)
        )
        db_session.flush()
        repository_repo = SqlRepositoryRecordRepository(db_session)
        tag_repo = SqlTagRecordRepository(db_session)
        repository_repo.save(_record(sample_ref, ["img1", "img2"]))
        repository_repo.commit_rollup(sample_ref, size=30, expected_version=1)
        db_session.expire_all()
        tag_repo.save(TagRecord(repository=sample_ref, name="latest", image_id="img2"))

        resolver = AncestryResolver(
            repository_repo, tag_repo, SqlImageRecordRepository(db_session)
        )
        with pytest.raises(DataConsistencyError):
            resolver.resolve_pull_manifest(sample_ref)
