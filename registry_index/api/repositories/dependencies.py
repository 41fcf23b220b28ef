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


"""FastAPI dependency providers for the repository index API."""

from fastapi import Depends

from api.dependencies import (
    _ENV,
    _get_container,
    get_access_token_repo,
    get_image_record_repo,
    get_repository_record_repo,
    get_tag_record_repo,
)
from core.registry.repositories import (
    AccessTokenRepository,
    ImageRecordRepository,
    RepositoryRecordRepository,
    TagRecordRepository,
)
from core.registry.services import (
    AncestryResolver,
    RegistrationService,
    TagService,
    UploadCompletionVerifier,
)
from orchestrator.registry.use_cases import (
    FinalizeUploadUseCase,
    GetRepositoryImagesUseCase,
    GetRepositoryTagsUseCase,
    PutTagUseCase,
    RegisterRepositoryUseCase,
)


def get_register_repository_use_case(
    repository_repo: RepositoryRecordRepository = Depends(get_repository_record_repo),
    token_repo: AccessTokenRepository = Depends(get_access_token_repo),
) -> RegisterRepositoryUseCase:
    """Provide register-repository use case with shared session in prod."""
    container = _get_container()
    if _ENV == "prod":
        return RegisterRepositoryUseCase(
            registration_service=RegistrationService(
                repository_repo=repository_repo,
                token_repo=token_repo,
                signature_generator=container.signature_generator(),
            ),
            repository_lock=container.repository_lock(),
        )
    return container.register_repository_use_case()


def get_put_tag_use_case(
    repository_repo: RepositoryRecordRepository = Depends(get_repository_record_repo),
    tag_repo: TagRecordRepository = Depends(get_tag_record_repo),
) -> PutTagUseCase:
    """Provide put-tag use case with shared session in prod."""
    container = _get_container()
    if _ENV == "prod":
        return PutTagUseCase(
            tag_service=TagService(repository_repo=repository_repo, tag_repo=tag_repo),
            repository_lock=container.repository_lock(),
        )
    return container.put_tag_use_case()


def get_finalize_upload_use_case(
    repository_repo: RepositoryRecordRepository = Depends(get_repository_record_repo),
    image_repo: ImageRecordRepository = Depends(get_image_record_repo),
) -> FinalizeUploadUseCase:
    """Provide finalize-upload use case with shared session in prod."""
    container = _get_container()
    if _ENV == "prod":
        return FinalizeUploadUseCase(
            verifier=UploadCompletionVerifier(
                repository_repo=repository_repo, image_repo=image_repo
            ),
            repository_lock=container.repository_lock(),
        )
    return container.finalize_upload_use_case()


def _resolver(
    repository_repo: RepositoryRecordRepository,
    tag_repo: TagRecordRepository,
    image_repo: ImageRecordRepository,
) -> AncestryResolver:
    return AncestryResolver(
        repository_repo=repository_repo, tag_repo=tag_repo, image_repo=image_repo
    )


def get_repository_images_use_case(
    repository_repo: RepositoryRecordRepository = Depends(get_repository_record_repo),
    tag_repo: TagRecordRepository = Depends(get_tag_record_repo),
    image_repo: ImageRecordRepository = Depends(get_image_record_repo),
) -> GetRepositoryImagesUseCase:
    """Provide pull-manifest use case with shared session in prod."""
    if _ENV == "prod":
        return GetRepositoryImagesUseCase(
            resolver=_resolver(repository_repo, tag_repo, image_repo)
        )
    return _get_container().get_repository_images_use_case()


def get_repository_tags_use_case(
    repository_repo: RepositoryRecordRepository = Depends(get_repository_record_repo),
    tag_repo: TagRecordRepository = Depends(get_tag_record_repo),
    image_repo: ImageRecordRepository = Depends(get_image_record_repo),
) -> GetRepositoryTagsUseCase:
    """Provide tag-map use case with shared session in prod."""
    if _ENV == "prod":
        return GetRepositoryTagsUseCase(
            resolver=_resolver(repository_repo, tag_repo, image_repo)
        )
    return _get_container().get_repository_tags_use_case()
