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

"""Registry domain module.

This module contains domain logic for the repository index: manifests,
tags, the upload completion gate and pull-side ancestry resolution.
"""

from core.registry.entities import (
    AccessTokenRecord,
    ImageRecord,
    RepositoryRecord,
    TagRecord,
    UserAccount,
)
from core.registry.exceptions import (
    ChecksumPendingError,
    DataConsistencyError,
    ImageNotFoundError,
    IncompleteUploadError,
    ManifestValidationError,
    NotFoundError,
    OptimisticLockError,
    OwnershipMismatchError,
    PersistenceError,
    RegistryDomainError,
    RepositoryNotFoundError,
    TagBodyValidationError,
    TagsNotFoundError,
    ValidationError,
)
from core.registry.value_objects import (
    AccessLevel,
    AccessToken,
    CorrelationId,
    ImageId,
    Manifest,
    Namespace,
    RepositoryName,
    RepositoryRef,
    TagName,
)

__all__ = [
    "AccessTokenRecord",
    "ImageRecord",
    "RepositoryRecord",
    "TagRecord",
    "UserAccount",
    "ChecksumPendingError",
    "DataConsistencyError",
    "ImageNotFoundError",
    "IncompleteUploadError",
    "ManifestValidationError",
    "NotFoundError",
    "OptimisticLockError",
    "OwnershipMismatchError",
    "PersistenceError",
    "RegistryDomainError",
    "RepositoryNotFoundError",
    "TagBodyValidationError",
    "TagsNotFoundError",
    "ValidationError",
    "AccessLevel",
    "AccessToken",
    "CorrelationId",
    "ImageId",
    "Manifest",
    "Namespace",
    "RepositoryName",
    "RepositoryRef",
    "TagName",
]
