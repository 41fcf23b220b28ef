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


"""Database session management.

The engine is built on first use so the module imports cleanly when
DATABASE_URL is unset, as in dev mode with in-memory stores.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import db_config

_session_factory: Optional[sessionmaker] = None


def _build_engine() -> Engine:
    db_config.validate()
    return create_engine(db_config.database_url, **db_config.engine_options())


def _get_session_factory() -> sessionmaker:
    global _session_factory  # pylint: disable=global-statement
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=_build_engine(), autocommit=False, autoflush=False
        )
    return _session_factory


def SessionLocal() -> Session:  # pylint: disable=invalid-name
    """Open a session on the shared engine.

    Raises:
        ValueError: If DATABASE_URL is not configured.
    """
    return _get_session_factory()()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Unit of work: commit when the block succeeds, roll back otherwise.

    Every SQL store of one request shares the yielded session, so the
    manifest, tag and token writes of a request land in one transaction.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
