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


"""SQLAlchemy ORM models for Registry Index persistence.

ORM models are infrastructure-only and never exposed outside this layer.
Domain ↔ ORM conversion is handled by mappers in mappers.py.
"""

# Third-party imports
from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

_JSON = JSON().with_variant(JSONB(), "postgresql")


class UserModel(Base):
    """ORM model for users table.

    Maps to UserAccount domain entity via UserAccountMapper.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    active = Column(Boolean, nullable=False, default=False)


class RepositoryModel(Base):
    """ORM model for repositories table.

    Maps to RepositoryRecord domain entity via RepositoryRecordMapper.
    """

    __tablename__ = "repositories"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Identity
    namespace = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)

    # Manifest as registered
    manifest_json = Column(Text, nullable=False)

    # Rollup fields, written by the completion gate only
    uploaded = Column(Boolean, nullable=False, default=False)
    checksummed = Column(Boolean, nullable=False, default=False)
    size = Column(BigInteger, nullable=False, default=0)

    # Optimistic locking
    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    tags = relationship(
        "TagModel",
        back_populates="repository",
        cascade="all, delete-orphan",
        order_by="TagModel.id",
    )

    __table_args__ = (
        UniqueConstraint("namespace", "name", name="uq_repositories_namespace_name"),
        Index("ix_repositories_visible", "namespace", "name", "uploaded", "checksummed"),
    )


class TagModel(Base):
    """ORM model for tags table.

    The autoincrement id is the persisted tag order.
    """

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    repository_id = Column(
        Integer,
        ForeignKey("repositories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(128), nullable=False)
    image_id = Column(String(128), nullable=False)
    agent = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime(timezone=True), nullable=False)

    repository = relationship("RepositoryModel", back_populates="tags")

    __table_args__ = (
        UniqueConstraint("repository_id", "name", name="uq_tags_repository_name"),
    )


class ImageModel(Base):
    """ORM model for images table.

    Rows are written by the image artifact endpoints; the index only reads them.
    """

    __tablename__ = "images"

    image_id = Column(String(128), primary_key=True, nullable=False)
    ancestry = Column(_JSON, nullable=False, default=list)
    size = Column(BigInteger, nullable=False, default=0)
    uploaded = Column(Boolean, nullable=False, default=False)
    checksummed = Column(Boolean, nullable=False, default=False)


class AccessTokenModel(Base):
    """ORM model for access_tokens table.

    Composite primary key: (username, namespace, repository).
    """

    __tablename__ = "access_tokens"

    username = Column(String(255), primary_key=True, nullable=False)
    namespace = Column(String(255), primary_key=True, nullable=False)
    repository = Column(String(255), primary_key=True, nullable=False)
    signature_hash = Column(String(64), nullable=False)
    access = Column(String(10), nullable=False)
    issued_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_access_tokens_scope", "namespace", "repository"),
    )
