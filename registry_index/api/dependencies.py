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


"""Common dependencies for API endpoints.

This module provides the FastAPI dependencies shared by every index route:
database sessions, repository providers, path validation, correlation ids
and authentication.
"""

import logging
import os
from typing import Annotated, Generator, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from api.auth.service import Principal, RegistryAuthService
from api.logging_utils import log_auth_info
from core.exceptions import AuthenticationError, InactiveUserError
from core.registry.exceptions import PersistenceError
from core.registry.repositories import (
    AccessTokenRepository,
    ImageRecordRepository,
    RepositoryRecordRepository,
    TagRecordRepository,
    UserAccountRepository,
)
from core.registry.value_objects import CorrelationId, RepositoryRef

logger = logging.getLogger(__name__)

# Environment configuration
_ENV = os.getenv("ENV", "dev").lower()

UNAUTHORIZED_MESSAGE = "Unauthorized"
INACTIVE_USER_MESSAGE = "User is not exist or not actived."
PERSISTENCE_MESSAGE = "Failed to store the repository data, please try again."


def _get_container():
    """Lazy import of container to avoid circular imports."""
    from container import container  # pylint: disable=import-outside-toplevel
    return container


def error_detail(message: str) -> dict:
    """Build the ``{"error": ...}`` body Docker clients expect."""
    return {"error": message}


# ------------------------------------------------------------------
# Database Session Management
# ------------------------------------------------------------------
def get_db_session() -> Generator[Optional[Session], None, None]:
    """Yield a single DB session per request for shared transaction context.

    In production every repository of a request shares this session and the
    transaction commits when the request succeeds. In dev mode, yields None
    since in-memory repositories don't need sessions.
    """
    if _ENV != "prod":
        yield None
        return

    from infra.db.session import get_db_session as session_scope  # pylint: disable=import-outside-toplevel
    with session_scope() as session:
        yield session


# ------------------------------------------------------------------
# Repository Providers
# ------------------------------------------------------------------
def get_repository_record_repo(
    db_session: Session = Depends(get_db_session),
) -> RepositoryRecordRepository:
    """Provide repository record store with shared session in prod."""
    if _ENV == "prod":
        from infra.db.repositories import SqlRepositoryRecordRepository  # pylint: disable=import-outside-toplevel
        return SqlRepositoryRecordRepository(session=db_session)
    return _get_container().repository_record_repository()


def get_tag_record_repo(
    db_session: Session = Depends(get_db_session),
) -> TagRecordRepository:
    """Provide tag store with shared session in prod."""
    if _ENV == "prod":
        from infra.db.repositories import SqlTagRecordRepository  # pylint: disable=import-outside-toplevel
        return SqlTagRecordRepository(session=db_session)
    return _get_container().tag_record_repository()


def get_image_record_repo(
    db_session: Session = Depends(get_db_session),
) -> ImageRecordRepository:
    """Provide image store with shared session in prod."""
    if _ENV == "prod":
        from infra.db.repositories import SqlImageRecordRepository  # pylint: disable=import-outside-toplevel
        return SqlImageRecordRepository(session=db_session)
    return _get_container().image_record_repository()


def get_user_account_repo(
    db_session: Session = Depends(get_db_session),
) -> UserAccountRepository:
    """Provide user store with shared session in prod."""
    if _ENV == "prod":
        from infra.db.repositories import SqlUserAccountRepository  # pylint: disable=import-outside-toplevel
        return SqlUserAccountRepository(session=db_session)
    return _get_container().user_account_repository()


def get_access_token_repo(
    db_session: Session = Depends(get_db_session),
) -> AccessTokenRepository:
    """Provide token store with shared session in prod."""
    if _ENV == "prod":
        from infra.db.repositories import SqlAccessTokenRepository  # pylint: disable=import-outside-toplevel
        return SqlAccessTokenRepository(session=db_session)
    return _get_container().access_token_repository()


# ------------------------------------------------------------------
# Request context
# ------------------------------------------------------------------
def get_repository_ref(namespace: str, repo_name: str) -> RepositoryRef:
    """Validate the ``{namespace}/{repo_name}`` path parameters."""
    try:
        return RepositoryRef.of(namespace, repo_name)
    except ValueError as exc:
        logger.warning("Invalid repository path: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail(str(exc)),
        ) from exc


def get_correlation_id(
    x_correlation_id: Annotated[Optional[str], Header(
        alias="X-Correlation-Id",
        description="Request tracing ID",
    )] = None,
) -> CorrelationId:
    """Return provided correlation ID or generate one."""
    if x_correlation_id:
        try:
            return CorrelationId(x_correlation_id)
        except ValueError:
            logger.debug("Ignoring malformed X-Correlation-Id header")

    generated_id = _get_container().uuid_generator().generate()
    return CorrelationId(str(generated_id))


async def get_raw_body(request: Request) -> str:
    """Return the request body as text, exactly as the client sent it."""
    body = await request.body()
    return body.decode("utf-8", errors="replace")


# ------------------------------------------------------------------
# Authentication
# ------------------------------------------------------------------
def get_auth_service(
    user_repo: UserAccountRepository = Depends(get_user_account_repo),
    token_repo: AccessTokenRepository = Depends(get_access_token_repo),
) -> RegistryAuthService:
    """Provide the authentication service."""
    return RegistryAuthService(user_repo=user_repo, token_repo=token_repo)


def get_principal(
    ref: RepositoryRef = Depends(get_repository_ref),
    auth_service: RegistryAuthService = Depends(get_auth_service),
    authorization: Annotated[Optional[str], Header(alias="Authorization")] = None,
) -> Principal:
    """Authenticate the caller for the repository in the request path.

    Raises:
        HTTPException: 401 for missing or malformed credentials, 403 when
            the credentials match no active user, 400 when the credential
            stores cannot be read.
    """
    try:
        return auth_service.authenticate(authorization, ref)
    except AuthenticationError as exc:
        log_auth_info("warning", f"Authentication failed for {ref}: {exc}", end_section=True)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail(UNAUTHORIZED_MESSAGE),
        ) from None
    except InactiveUserError:
        log_auth_info("warning", f"Access denied for {ref}: unknown or inactive user", end_section=True)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_detail(INACTIVE_USER_MESSAGE),
        ) from None
    except PersistenceError:
        log_auth_info(
            "error", f"Credential lookup failed for {ref}", exc_info=True, end_section=True
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail(PERSISTENCE_MESSAGE),
        ) from None
