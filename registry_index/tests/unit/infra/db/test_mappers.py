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


"""Unit tests for domain to ORM mappers."""

from datetime import datetime, timezone

from core.registry.entities import AccessTokenRecord, RepositoryRecord, TagRecord
from core.registry.value_objects import AccessLevel, RepositoryRef
from infra.db.mappers import (
    AccessTokenRecordMapper,
    ImageRecordMapper,
    RepositoryRecordMapper,
    TagRecordMapper,
    UserAccountMapper,
)
from infra.db.models import ImageModel, UserModel

REF = RepositoryRef.of("alice", "app")
NOW = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


def test_repository_round_trip():
    """Repository records survive a trip through the ORM model."""
    record = RepositoryRecord(
        ref=REF,
        manifest_json='[{"id": "img1"}]',
        uploaded=True,
        checksummed=True,
        size=5,
        version=3,
        created_at=NOW,
        updated_at=NOW,
    )

    model = RepositoryRecordMapper.to_orm(record)

    assert (model.namespace, model.name) == ("alice", "app")
    assert RepositoryRecordMapper.to_domain(model) == record


def test_tag_mapping():
    """Tags carry the repository id into the model and the ref back out."""
    tag = TagRecord(repository=REF, name="latest", image_id="img1", agent="docker", updated_at=NOW)

    model = TagRecordMapper.to_orm(tag, repository_id=9)

    assert model.repository_id == 9
    assert TagRecordMapper.to_domain(model, REF) == tag


def test_image_mapping_handles_null_columns():
    """Missing ancestry and size default to empty and zero."""
    model = ImageModel(image_id="img1", ancestry=None, size=None, uploaded=1, checksummed=0)

    image = ImageRecordMapper.to_domain(model)

    assert image.ancestry == ()
    assert image.size == 0
    assert image.uploaded is True
    assert image.checksummed is False


def test_image_mapping_keeps_non_list_ancestry():
    """A string ancestry is passed through rather than split into characters."""
    model = ImageModel(image_id="img2", ancestry="img1", size=1, uploaded=1, checksummed=1)

    assert ImageRecordMapper.to_domain(model).ancestry == "img1"


def test_user_mapping():
    """User rows become UserAccount values."""
    model = UserModel(username="alice", password_hash="h", active=True)

    assert UserAccountMapper.to_domain(model).username == "alice"


def test_token_mapping_fills_issue_time():
    """Tokens without an issue time get one when stored."""
    token = AccessTokenRecord("alice", REF, "a" * 64, AccessLevel.WRITE)

    model = AccessTokenRecordMapper.to_orm(token)

    assert model.access == "write"
    assert model.issued_at is not None
    restored = AccessTokenRecordMapper.to_domain(model)
    assert restored.repository == REF
    assert restored.access is AccessLevel.WRITE
