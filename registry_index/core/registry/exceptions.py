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

"""Registry domain exceptions."""


class RegistryDomainError(Exception):
    """Base exception for registry domain errors."""

    def __init__(self, message: str, correlation_id: str = ""):
        """Initialize domain error.

        Args:
            message: Error message.
            correlation_id: Request correlation ID for tracing.
        """
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id


class NotFoundError(RegistryDomainError):
    """Raised when a repository, tag or image is absent or not yet visible."""


class RepositoryNotFoundError(NotFoundError):
    """Raised when a repository is unknown or not visible to pull clients."""

    def __init__(self, repository: str, correlation_id: str = ""):
        super().__init__("Could not find repository.", correlation_id)
        self.repository = repository


class ImageNotFoundError(NotFoundError):
    """Raised when a manifest references an image that was never uploaded."""

    def __init__(self, image_id: str, correlation_id: str = ""):
        super().__init__("Could not find image referenced by the manifest.", correlation_id)
        self.image_id = image_id


class TagsNotFoundError(NotFoundError):
    """Raised when a repository has no tag to pull."""

    def __init__(self, repository: str, correlation_id: str = ""):
        super().__init__("Could not find any tag.", correlation_id)
        self.repository = repository


class OwnershipMismatchError(RegistryDomainError):
    """Raised when the acting user does not own the target namespace."""


class ValidationError(RegistryDomainError):
    """Raised for malformed input or internally inconsistent records."""


class ManifestValidationError(ValidationError):
    """Raised when a manifest document is malformed."""


class TagBodyValidationError(ValidationError):
    """Raised when a tag body carries no image id."""


class DataConsistencyError(ValidationError):
    """Raised when stored records contradict each other."""


class IncompleteUploadError(RegistryDomainError):
    """Raised when at least one manifest image is not uploaded yet."""

    def __init__(self, correlation_id: str = ""):
        super().__init__(
            "The image layer upload is not complete, please try again.",
            correlation_id,
        )


class ChecksumPendingError(RegistryDomainError):
    """Raised when at least one manifest image is not checksummed yet."""

    def __init__(self, correlation_id: str = ""):
        super().__init__(
            "The image layer checksum is not verified, please try again.",
            correlation_id,
        )


class PersistenceError(RegistryDomainError):
    """Raised when the store fails to read or write a record."""


class OptimisticLockError(PersistenceError):
    """Raised when a record changed between read and write."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        expected_version: int,
        actual_version: int,
        correlation_id: str = "",
    ):
        super().__init__(
            f"Version conflict for {entity_type} {entity_id}: "
            f"expected {expected_version}, found {actual_version}",
            correlation_id,
        )
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
