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


"""FastAPI routes for the Docker v1 repository index.

Push clients register a repository, upload each image to the registry,
write tags and finally ask the index to verify the upload. Pull clients
read the tag map and the flattened image list.
"""

from typing import Dict, List, NoReturn, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status

from api.auth.service import Principal
from api.dependencies import (
    PERSISTENCE_MESSAGE,
    error_detail,
    get_correlation_id,
    get_principal,
    get_raw_body,
    get_repository_ref,
)
from api.logging_utils import log_secure_info
from api.repositories.dependencies import (
    get_finalize_upload_use_case,
    get_put_tag_use_case,
    get_register_repository_use_case,
    get_repository_images_use_case,
    get_repository_tags_use_case,
)
from api.repositories.schemas import ManifestEntry, RegistryErrorResponse
from common.config import get_config
from core.registry.exceptions import (
    ChecksumPendingError,
    IncompleteUploadError,
    NotFoundError,
    OptimisticLockError,
    OwnershipMismatchError,
    PersistenceError,
    RegistryDomainError,
    RepositoryNotFoundError,
    ValidationError,
)
from core.registry.value_objects import CorrelationId, RepositoryRef, TagName
from orchestrator.registry.commands import (
    FinalizeUploadCommand,
    GetRepositoryImagesQuery,
    GetRepositoryTagsQuery,
    PutTagCommand,
    RegisterRepositoryCommand,
)
from orchestrator.registry.use_cases import (
    FinalizeUploadUseCase,
    GetRepositoryImagesUseCase,
    GetRepositoryTagsUseCase,
    PutTagUseCase,
    RegisterRepositoryUseCase,
)

router = APIRouter(prefix="/repositories", tags=["Repositories"])

CONCURRENT_UPDATE_MESSAGE = "The repository was updated concurrently, please try again."
INTERNAL_ERROR_MESSAGE = "An internal server error occurred"

_ERROR_RESPONSES = {
    400: {"description": "Invalid request", "model": RegistryErrorResponse},
    401: {"description": "Unauthorized", "model": RegistryErrorResponse},
    403: {"description": "Unknown or inactive user", "model": RegistryErrorResponse},
    404: {"description": "Not found", "model": RegistryErrorResponse},
    500: {"description": "Internal error", "model": RegistryErrorResponse},
}


def _http_error(status_code: int, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail=error_detail(message))


def _repository_log(exc: Exception, repository: RepositoryRef) -> Optional[str]:
    """Return the repository log to write to, or None when it may not exist."""
    if isinstance(exc, (RepositoryNotFoundError, OwnershipMismatchError)):
        return None
    return str(repository)


def _raise_domain_error(
    exc: Exception,
    operation: str,
    repository: RepositoryRef,
    correlation_id: CorrelationId,
) -> NoReturn:
    """Translate a failure into the HTTP error Docker clients expect."""
    if isinstance(exc, NotFoundError):
        status_code, reason, message = status.HTTP_404_NOT_FOUND, "not_found", exc.message
    elif isinstance(exc, OptimisticLockError):
        status_code, reason, message = (
            status.HTTP_400_BAD_REQUEST, "concurrent_update", CONCURRENT_UPDATE_MESSAGE
        )
    elif isinstance(exc, PersistenceError):
        status_code, reason, message = (
            status.HTTP_400_BAD_REQUEST, "persistence_error", PERSISTENCE_MESSAGE
        )
    elif isinstance(exc, OwnershipMismatchError):
        status_code, reason, message = (
            status.HTTP_400_BAD_REQUEST, "ownership_mismatch", exc.message
        )
    elif isinstance(exc, (IncompleteUploadError, ChecksumPendingError)):
        status_code, reason, message = (
            status.HTTP_400_BAD_REQUEST, "upload_incomplete", exc.message
        )
    elif isinstance(exc, ValidationError):
        status_code, reason, message = (
            status.HTTP_400_BAD_REQUEST, "validation_error", exc.message
        )
    elif isinstance(exc, RegistryDomainError):
        status_code, reason, message = (
            status.HTTP_400_BAD_REQUEST, "domain_error", exc.message
        )
    else:
        log_secure_info(
            "error",
            f"{operation} failed: repository={repository}, reason=unexpected_error, status=500",
            identifier=str(correlation_id),
            repository=_repository_log(exc, repository),
            exc_info=True,
            end_section=True,
        )
        raise _http_error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE) from exc

    log_secure_info(
        "warning" if status_code < 500 else "error",
        f"{operation} failed: repository={repository}, reason={reason}, "
        f"status={status_code}",
        identifier=str(correlation_id),
        repository=_repository_log(exc, repository),
        end_section=True,
    )
    raise _http_error(status_code, message) from exc


@router.put(
    "/{namespace}/{repo_name}",
    response_model=str,
    status_code=status.HTTP_200_OK,
    summary="Register repository",
    description="Create or update a repository manifest and issue a write token",
    responses=_ERROR_RESPONSES,
)
def put_repository(
    response: Response,
    ref: RepositoryRef = Depends(get_repository_ref),
    principal: Principal = Depends(get_principal),
    body: str = Depends(get_raw_body),
    use_case: RegisterRepositoryUseCase = Depends(get_register_repository_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> str:
    """Register the manifest and return the index token in headers."""
    log_secure_info(
        "info",
        f"Register repository request: repository={ref}, user={principal.username}",
        identifier=str(correlation_id),
    )

    try:
        result = use_case.execute(
            RegisterRepositoryCommand(
                repository=ref,
                user=principal.user,
                body=body,
                correlation_id=correlation_id,
            )
        )
    except Exception as exc:  # pylint: disable=broad-except
        _raise_domain_error(exc, "Register repository", ref, correlation_id)

    response.headers["X-Docker-Token"] = result.token
    response.headers["WWW-Authenticate"] = result.token
    response.headers["X-Docker-Endpoints"] = get_config().docker.endpoints

    log_secure_info(
        "info",
        f"Register repository success: repository={ref}, status=200",
        identifier=str(correlation_id),
        repository=str(ref),
        end_section=True,
    )
    return ""


@router.put(
    "/{namespace}/{repo_name}/tags/{tag}",
    response_model=str,
    status_code=status.HTTP_200_OK,
    summary="Write tag",
    description="Point a tag at a head image",
    responses=_ERROR_RESPONSES,
)
def put_tag(
    tag: str,
    ref: RepositoryRef = Depends(get_repository_ref),
    principal: Principal = Depends(get_principal),  # pylint: disable=unused-argument
    body: str = Depends(get_raw_body),
    user_agent: str = Header(default="", alias="User-Agent"),
    use_case: PutTagUseCase = Depends(get_put_tag_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> str:
    """Insert or update the tag named in the path."""
    try:
        tag_name = TagName(tag)
    except ValueError as exc:
        log_secure_info(
            "warning",
            f"Write tag failed: repository={ref}, reason=invalid_tag, status=400",
            identifier=str(correlation_id),
            end_section=True,
        )
        raise _http_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc

    try:
        result = use_case.execute(
            PutTagCommand(
                repository=ref,
                tag=tag_name,
                body=body,
                agent=user_agent,
                correlation_id=correlation_id,
            )
        )
    except Exception as exc:  # pylint: disable=broad-except
        _raise_domain_error(exc, "Write tag", ref, correlation_id)

    log_secure_info(
        "info",
        f"Write tag success: repository={ref}, tag={result.tag}, status=200",
        identifier=str(correlation_id),
        repository=str(ref),
        end_section=True,
    )
    return ""


@router.put(
    "/{namespace}/{repo_name}/images",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Finalize upload",
    description="Verify every manifest image and mark the repository complete",
    responses=_ERROR_RESPONSES,
)
def put_repository_images(
    ref: RepositoryRef = Depends(get_repository_ref),
    principal: Principal = Depends(get_principal),  # pylint: disable=unused-argument
    use_case: FinalizeUploadUseCase = Depends(get_finalize_upload_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> Response:
    """Run the completion gate; the request body is ignored."""
    try:
        result = use_case.execute(
            FinalizeUploadCommand(repository=ref, correlation_id=correlation_id)
        )
    except Exception as exc:  # pylint: disable=broad-except
        _raise_domain_error(exc, "Finalize upload", ref, correlation_id)

    log_secure_info(
        "info",
        f"Finalize upload success: repository={ref}, size={result.size}, status=204",
        identifier=str(correlation_id),
        repository=str(ref),
        end_section=True,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{namespace}/{repo_name}/images",
    response_model=List[ManifestEntry],
    summary="Pull manifest",
    description="Return the deduplicated images needed to pull every tag",
    responses=_ERROR_RESPONSES,
)
def get_repository_images(
    response: Response,
    ref: RepositoryRef = Depends(get_repository_ref),
    principal: Principal = Depends(get_principal),  # pylint: disable=unused-argument
    use_case: GetRepositoryImagesUseCase = Depends(get_repository_images_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> List[Dict[str, str]]:
    """Return ``[{"id": ...}, ...]`` for a finished repository."""
    try:
        result = use_case.execute(
            GetRepositoryImagesQuery(repository=ref, correlation_id=correlation_id)
        )
    except Exception as exc:  # pylint: disable=broad-except
        _raise_domain_error(exc, "Get repository images", ref, correlation_id)

    response.headers["X-Docker-Endpoints"] = get_config().docker.endpoints
    return result.images


@router.get(
    "/{namespace}/{repo_name}/tags",
    response_model=Dict[str, str],
    summary="Tag map",
    description="Return the head image id of every tag",
    responses=_ERROR_RESPONSES,
)
def get_repository_tags(
    response: Response,
    ref: RepositoryRef = Depends(get_repository_ref),
    principal: Principal = Depends(get_principal),  # pylint: disable=unused-argument
    use_case: GetRepositoryTagsUseCase = Depends(get_repository_tags_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> Dict[str, str]:
    """Return ``{tag: image_id}`` for a finished repository."""
    try:
        result = use_case.execute(
            GetRepositoryTagsQuery(repository=ref, correlation_id=correlation_id)
        )
    except Exception as exc:  # pylint: disable=broad-except
        _raise_domain_error(exc, "Get repository tags", ref, correlation_id)

    response.headers["X-Docker-Endpoints"] = get_config().docker.endpoints
    return result.tags
