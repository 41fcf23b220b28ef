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


"""Fixtures for database integration tests."""

# pylint: disable=redefined-outer-name

import os
from datetime import datetime, timezone
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.registry.value_objects import RepositoryRef
from infra.db.models import Base, ImageModel, UserModel


@pytest.fixture
def db_engine() -> Generator:
    """Create a fresh schema for each test.

    Uses TEST_DATABASE_URL when set, otherwise a private SQLite database.
    """
    url = os.getenv("TEST_DATABASE_URL")
    if url:
        engine = create_engine(url)
    else:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Generator[Session, None, None]:
    """Session bound to the test schema, rolled back afterwards."""
    session = sessionmaker(bind=db_engine, autoflush=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def sample_ref() -> RepositoryRef:
    """Repository used across database tests."""
    return RepositoryRef.of("alice", "app")


@pytest.fixture
def sample_timestamp() -> datetime:
    """Fixed timestamp for records."""
    return datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def seed_images(db_session):
    """Insert image rows written by the image artifact endpoints."""

    def _seed(*images):
        for image_id, size, ancestry, uploaded, checksummed in images:
            db_session.add(
                ImageModel(
                    image_id=image_id,
                    ancestry=list(ancestry),
                    size=size,
                    uploaded=uploaded,
                    checksummed=checksummed,
                )
            )
        db_session.flush()

    return _seed


@pytest.fixture
def seed_user(db_session):
    """Insert a user row."""

    def _seed(username: str, password_hash: str = "hash", active: bool = True):
        db_session.add(
            UserModel(username=username, password_hash=password_hash, active=active)
        )
        db_session.flush()

    return _seed
