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


"""Dependency Injector containers for the Registry Index API."""
# pylint: disable=c-extension-no-member

import os

from dependency_injector import containers, providers

from common.config import get_config
from core.registry.services import (
    AncestryResolver,
    RegistrationService,
    TagService,
    UploadCompletionVerifier,
)
from infra.id_generator import TokenSignatureGenerator, UUIDv4Generator
from infra.locks import RepositoryLockManager
from infra.repositories import (
    InMemoryAccessTokenRepository,
    InMemoryImageRecordRepository,
    InMemoryRepositoryRecordRepository,
    InMemoryTagRecordRepository,
    InMemoryUserAccountRepository,
)
from orchestrator.registry.use_cases import (
    FinalizeUploadUseCase,
    GetRepositoryImagesUseCase,
    GetRepositoryTagsUseCase,
    PutTagUseCase,
    RegisterRepositoryUseCase,
)

_WIRED_MODULES = [
    "api.dependencies",
    "api.repositories.routes",
    "api.repositories.dependencies",
]


def _create_signature_generator() -> TokenSignatureGenerator:
    """Factory function to create the token signature generator from configuration."""
    return TokenSignatureGenerator(num_bytes=get_config().auth.signature_bytes)


class DevContainer(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Development profile container.

    Uses thread-safe in-memory repositories for fast development and testing.
    No external dependencies (database) required.

    Activated when ENV=dev (default).
    """

    wiring_config = containers.WiringConfiguration(modules=_WIRED_MODULES)

    uuid_generator = providers.Singleton(UUIDv4Generator)
    signature_generator = providers.Singleton(_create_signature_generator)
    repository_lock = providers.Singleton(RepositoryLockManager)

    # --- Registry repositories ---
    repository_record_repository = providers.Singleton(InMemoryRepositoryRecordRepository)
    tag_record_repository = providers.Singleton(InMemoryTagRecordRepository)
    image_record_repository = providers.Singleton(InMemoryImageRecordRepository)
    user_account_repository = providers.Singleton(InMemoryUserAccountRepository)
    access_token_repository = providers.Singleton(InMemoryAccessTokenRepository)

    # --- Domain services ---
    upload_completion_verifier = providers.Factory(
        UploadCompletionVerifier,
        repository_repo=repository_record_repository,
        image_repo=image_record_repository,
    )

    ancestry_resolver = providers.Factory(
        AncestryResolver,
        repository_repo=repository_record_repository,
        tag_repo=tag_record_repository,
        image_repo=image_record_repository,
    )

    registration_service = providers.Factory(
        RegistrationService,
        repository_repo=repository_record_repository,
        token_repo=access_token_repository,
        signature_generator=signature_generator,
    )

    tag_service = providers.Factory(
        TagService,
        repository_repo=repository_record_repository,
        tag_repo=tag_record_repository,
    )

    # --- Use cases ---
    register_repository_use_case = providers.Factory(
        RegisterRepositoryUseCase,
        registration_service=registration_service,
        repository_lock=repository_lock,
    )

    put_tag_use_case = providers.Factory(
        PutTagUseCase,
        tag_service=tag_service,
        repository_lock=repository_lock,
    )

    finalize_upload_use_case = providers.Factory(
        FinalizeUploadUseCase,
        verifier=upload_completion_verifier,
        repository_lock=repository_lock,
    )

    get_repository_images_use_case = providers.Factory(
        GetRepositoryImagesUseCase,
        resolver=ancestry_resolver,
    )

    get_repository_tags_use_case = providers.Factory(
        GetRepositoryTagsUseCase,
        resolver=ancestry_resolver,
    )


class ProdContainer(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Production profile container.

    Repositories are SQL-backed and bound to a per-request session by
    ``api.dependencies``, so only process-wide singletons live here.

    Activated when ENV=prod.
    """

    wiring_config = containers.WiringConfiguration(modules=_WIRED_MODULES)

    uuid_generator = providers.Singleton(UUIDv4Generator)
    signature_generator = providers.Singleton(_create_signature_generator)
    repository_lock = providers.Singleton(RepositoryLockManager)


def get_container_class():
    """Select container class based on ENV environment variable.

    Returns:
        DevContainer if ENV=dev (default)
        ProdContainer if ENV=prod

    Usage:
        ENV=prod DATABASE_URL=postgresql://... python main.py
    """
    env = os.getenv("ENV", "dev").lower()

    if env == "prod":
        return ProdContainer

    return DevContainer


Container = get_container_class()

# Singleton container instance shared across app and dependencies
container = Container()

__all__ = ["Container", "container", "get_container_class"]
