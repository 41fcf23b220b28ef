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


"""SQL repository implementations for Registry Index persistence.

These implement the repository ports defined in core/registry/repositories.py
using SQLAlchemy ORM against PostgreSQL.
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

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
from .mappers import (
    AccessTokenRecordMapper,
    ImageRecordMapper,
    RepositoryRecordMapper,
    TagRecordMapper,
    UserAccountMapper,
)
from .models import (
    AccessTokenModel,
    ImageModel,
    RepositoryModel,
    TagModel,
    UserModel,
)


def _select_repository(ref: RepositoryRef):
    return select(RepositoryModel).where(
        RepositoryModel.namespace == str(ref.namespace),
        RepositoryModel.name == str(ref.name),
    )


class SqlRepositoryRecordRepository(RepositoryRecordRepository):
    """SQL implementation of RepositoryRecordRepository."""

    def __init__(self, session: Session) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations.
        """
        self.session = session

    def find(self, ref: RepositoryRef) -> Optional[RepositoryRecord]:
        """Retrieve a repository record by namespace and name.

        Args:
            ref: Repository identity.

        Returns:
            RepositoryRecord if found, None otherwise.
        """
        try:
            model = self.session.execute(_select_repository(ref)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read repository {ref}: {exc}") from exc
        if model is None:
            return None
        return RepositoryRecordMapper.to_domain(model)

    def _current_version(self, ref: RepositoryRef) -> Optional[int]:
        return self.session.execute(
            select(RepositoryModel.version).where(
                RepositoryModel.namespace == str(ref.namespace),
                RepositoryModel.name == str(ref.name),
            )
        ).scalar_one_or_none()

    def save(self, record: RepositoryRecord) -> None:
        """Persist a repository record.

        Uses upsert semantics: inserts if new, otherwise updates the manifest
        with a single UPDATE guarded on the previous version. Rollup fields
        are never written here.

        Args:
            record: Repository record to persist.

        Raises:
            OptimisticLockError: If version conflict detected.
            PersistenceError: If the database rejects the write.
        """
        expected_version = record.version - 1
        try:
            current = self._current_version(record.ref)
            if current is None:
                self.session.add(RepositoryRecordMapper.to_orm(record))
                self.session.flush()
                return

            result = self.session.execute(
                update(RepositoryModel)
                .where(
                    RepositoryModel.namespace == str(record.ref.namespace),
                    RepositoryModel.name == str(record.ref.name),
                    RepositoryModel.version == expected_version,
                )
                .values(
                    manifest_json=record.manifest_json,
                    updated_at=record.updated_at,
                    version=record.version,
                )
            )
            if result.rowcount == 1:
                self.session.flush()
                return
            current = self._current_version(record.ref)
        except IntegrityError as exc:
            raise OptimisticLockError(
                entity_type="Repository",
                entity_id=str(record.ref),
                expected_version=expected_version,
                actual_version=-1,
            ) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to save repository {record.ref}: {exc}"
            ) from exc

        raise OptimisticLockError(
            entity_type="Repository",
            entity_id=str(record.ref),
            expected_version=expected_version,
            actual_version=current if current is not None else -1,
        )

    def commit_rollup(
        self, ref: RepositoryRef, size: int, expected_version: int
    ) -> None:
        """Write the upload rollup in a single guarded UPDATE.

        Args:
            ref: Repository identity.
            size: Total size of the manifest images in bytes.
            expected_version: Version the caller read before verifying.

        Raises:
            OptimisticLockError: If the row changed since it was read.
            PersistenceError: If the row is gone or the update fails.
        """
        stmt = (
            update(RepositoryModel)
            .where(
                RepositoryModel.namespace == str(ref.namespace),
                RepositoryModel.name == str(ref.name),
                RepositoryModel.version == expected_version,
            )
            .values(
                uploaded=True,
                checksummed=True,
                size=size,
                version=expected_version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            if result.rowcount == 1:
                self.session.flush()
                return

            current = self._current_version(ref)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to update repository {ref}: {exc}"
            ) from exc

        if current is None:
            raise PersistenceError(f"Repository {ref} disappeared during update")
        raise OptimisticLockError(
            entity_type="Repository",
            entity_id=str(ref),
            expected_version=expected_version,
            actual_version=current,
        )


class SqlTagRecordRepository(TagRecordRepository):
    """SQL implementation of TagRecordRepository."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _repository_id(self, ref: RepositoryRef) -> Optional[int]:
        stmt = select(RepositoryModel.id).where(
            RepositoryModel.namespace == str(ref.namespace),
            RepositoryModel.name == str(ref.name),
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find(self, ref: RepositoryRef, name: str) -> Optional[TagRecord]:
        """Retrieve one tag of a repository."""
        stmt = (
            select(TagModel)
            .join(RepositoryModel, TagModel.repository_id == RepositoryModel.id)
            .where(
                RepositoryModel.namespace == str(ref.namespace),
                RepositoryModel.name == str(ref.name),
                TagModel.name == name,
            )
        )
        try:
            model = self.session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read tag {ref}:{name}: {exc}") from exc
        if model is None:
            return None
        return TagRecordMapper.to_domain(model, ref)

    def find_all(self, ref: RepositoryRef) -> List[TagRecord]:
        """Retrieve every tag of a repository in insertion order."""
        stmt = (
            select(TagModel)
            .join(RepositoryModel, TagModel.repository_id == RepositoryModel.id)
            .where(
                RepositoryModel.namespace == str(ref.namespace),
                RepositoryModel.name == str(ref.name),
            )
            .order_by(TagModel.id)
        )
        try:
            models = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read tags of {ref}: {exc}") from exc
        return [TagRecordMapper.to_domain(model, ref) for model in models]

    def save(self, tag: TagRecord) -> None:
        """Insert or update a tag keyed by (repository, name).

        Raises:
            PersistenceError: If the repository row is missing or the
                write fails.
        """
        try:
            repository_id = self._repository_id(tag.repository)
            if repository_id is None:
                raise PersistenceError(
                    f"Cannot tag unknown repository {tag.repository}"
                )

            existing = self.session.execute(
                select(TagModel).where(
                    TagModel.repository_id == repository_id,
                    TagModel.name == tag.name,
                )
            ).scalar_one_or_none()

            if existing:
                existing.image_id = tag.image_id
                existing.agent = tag.agent
                existing.updated_at = tag.updated_at
            else:
                self.session.add(TagRecordMapper.to_orm(tag, repository_id))

            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to save tag {tag.repository}:{tag.name}: {exc}"
            ) from exc


class SqlImageRecordRepository(ImageRecordRepository):
    """SQL implementation of ImageRecordRepository."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, image_id: str) -> Optional[ImageRecord]:
        """Retrieve an image record by id."""
        try:
            model = self.session.get(ImageModel, image_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read image {image_id}: {exc}") from exc
        if model is None:
            return None
        return ImageRecordMapper.to_domain(model)


class SqlUserAccountRepository(UserAccountRepository):
    """SQL implementation of UserAccountRepository."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> Optional[UserAccount]:
        stmt = select(UserModel).where(UserModel.username == username)
        try:
            model = self.session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read user {username}: {exc}") from exc
        if model is None:
            return None
        return UserAccountMapper.to_domain(model)


class SqlAccessTokenRepository(AccessTokenRepository):
    """SQL implementation of AccessTokenRepository."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, username: str, ref: RepositoryRef) -> Optional[AccessTokenRecord]:
        """Retrieve the token a user holds for a repository."""
        try:
            model = self.session.get(
                AccessTokenModel, (username, str(ref.namespace), str(ref.name))
            )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read token for {ref}: {exc}") from exc
        if model is None:
            return None
        return AccessTokenRecordMapper.to_domain(model)

    def find_by_scope(self, ref: RepositoryRef) -> List[AccessTokenRecord]:
        """Retrieve every token issued for a repository."""
        stmt = select(AccessTokenModel).where(
            AccessTokenModel.namespace == str(ref.namespace),
            AccessTokenModel.repository == str(ref.name),
        )
        try:
            models = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read tokens for {ref}: {exc}") from exc
        return [AccessTokenRecordMapper.to_domain(model) for model in models]

    def save(self, token: AccessTokenRecord) -> None:
        """Insert or replace the token for (username, repository)."""
        try:
            existing = self.session.get(
                AccessTokenModel,
                (token.username, str(token.repository.namespace), str(token.repository.name)),
            )
            if existing:
                existing.signature_hash = token.signature_hash
                existing.access = token.access.value
                if token.issued_at is not None:
                    existing.issued_at = token.issued_at
            else:
                self.session.add(AccessTokenRecordMapper.to_orm(token))
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to save token for {token.repository}: {exc}"
            ) from exc
