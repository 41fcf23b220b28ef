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


"""Mappers for domain ↔ ORM model conversion.

Explicit mapping between domain entities and ORM models.
No domain logic lives here, only data transformation.
"""

from datetime import datetime, timezone

from core.registry.entities import (
    AccessTokenRecord,
    ImageRecord,
    RepositoryRecord,
    TagRecord,
    UserAccount,
)
from core.registry.value_objects import AccessLevel, RepositoryRef
from .models import (
    AccessTokenModel,
    ImageModel,
    RepositoryModel,
    TagModel,
    UserModel,
)


class RepositoryRecordMapper:
    """Mapper for RepositoryRecord entity ↔ RepositoryModel ORM."""

    @staticmethod
    def to_orm(record: RepositoryRecord) -> RepositoryModel:
        """Convert RepositoryRecord domain entity to ORM model."""
        return RepositoryModel(
            namespace=str(record.ref.namespace),
            name=str(record.ref.name),
            manifest_json=record.manifest_json,
            uploaded=record.uploaded,
            checksummed=record.checksummed,
            size=record.size,
            version=record.version,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    @staticmethod
    def to_domain(model: RepositoryModel) -> RepositoryRecord:
        """Convert RepositoryModel ORM to RepositoryRecord domain entity."""
        return RepositoryRecord(
            ref=RepositoryRef.of(model.namespace, model.name),
            manifest_json=model.manifest_json,
            uploaded=bool(model.uploaded),
            checksummed=bool(model.checksummed),
            size=int(model.size or 0),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class TagRecordMapper:
    """Mapper for TagRecord entity ↔ TagModel ORM."""

    @staticmethod
    def to_orm(tag: TagRecord, repository_id: int) -> TagModel:
        """Convert TagRecord domain entity to ORM model."""
        return TagModel(
            repository_id=repository_id,
            name=tag.name,
            image_id=tag.image_id,
            agent=tag.agent,
            updated_at=tag.updated_at,
        )

    @staticmethod
    def to_domain(model: TagModel, ref: RepositoryRef) -> TagRecord:
        """Convert TagModel ORM to TagRecord domain entity."""
        return TagRecord(
            repository=ref,
            name=model.name,
            image_id=model.image_id,
            agent=model.agent or "",
            updated_at=model.updated_at,
        )


class ImageRecordMapper:
    """Mapper for ImageModel ORM → ImageRecord entity."""

    @staticmethod
    def to_domain(model: ImageModel) -> ImageRecord:
        """Convert ImageModel ORM to ImageRecord domain entity."""
        # Anything but a JSON array is handed over unchanged for readers to reject.
        ancestry = model.ancestry if model.ancestry is not None else []
        return ImageRecord(
            image_id=model.image_id,
            ancestry=tuple(ancestry) if isinstance(ancestry, list) else ancestry,
            size=int(model.size or 0),
            uploaded=bool(model.uploaded),
            checksummed=bool(model.checksummed),
        )


class UserAccountMapper:
    """Mapper for UserModel ORM → UserAccount entity."""

    @staticmethod
    def to_domain(model: UserModel) -> UserAccount:
        """Convert UserModel ORM to UserAccount domain entity."""
        return UserAccount(
            username=model.username,
            password_hash=model.password_hash,
            active=bool(model.active),
        )


class AccessTokenRecordMapper:
    """Mapper for AccessTokenRecord entity ↔ AccessTokenModel ORM."""

    @staticmethod
    def to_orm(token: AccessTokenRecord) -> AccessTokenModel:
        """Convert AccessTokenRecord domain entity to ORM model."""
        return AccessTokenModel(
            username=token.username,
            namespace=str(token.repository.namespace),
            repository=str(token.repository.name),
            signature_hash=token.signature_hash,
            access=token.access.value,
            issued_at=token.issued_at or datetime.now(timezone.utc),
        )

    @staticmethod
    def to_domain(model: AccessTokenModel) -> AccessTokenRecord:
        """Convert AccessTokenModel ORM to AccessTokenRecord domain entity."""
        return AccessTokenRecord(
            username=model.username,
            repository=RepositoryRef.of(model.namespace, model.repository),
            signature_hash=model.signature_hash,
            access=AccessLevel(model.access),
            issued_at=model.issued_at,
        )
