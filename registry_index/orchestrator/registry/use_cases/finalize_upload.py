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


"""FinalizeUpload use case implementation."""

from api.logging_utils import log_secure_info
from core.registry.repositories import RepositoryLock
from core.registry.services import UploadCompletionVerifier
from orchestrator.registry.commands import FinalizeUploadCommand
from orchestrator.registry.dtos import FinalizeUploadResponse


class FinalizeUploadUseCase:
    """Use case running the upload completion gate.

    The gate holds the repository lock so a concurrent registration cannot
    swap the manifest between verification and commit.
    """

    def __init__(
        self,
        verifier: UploadCompletionVerifier,
        repository_lock: RepositoryLock,
    ) -> None:
        self._verifier = verifier
        self._repository_lock = repository_lock

    def execute(self, command: FinalizeUploadCommand) -> FinalizeUploadResponse:
        """Verify every manifest image and commit the rollup.

        Raises:
            RepositoryNotFoundError: If the repository is not registered.
            ImageNotFoundError: If a manifest image has no record.
            IncompleteUploadError: If a manifest image is not uploaded.
            ChecksumPendingError: If a manifest image is not checksummed.
            ValidationError: If the stored manifest is malformed.
            PersistenceError: If the store fails or the record changed.
        """
        with self._repository_lock.hold(command.repository):
            result = self._verifier.verify_and_finalize(
                command.repository, correlation_id=str(command.correlation_id)
            )

        log_secure_info(
            "info",
            f"Upload finalized: repository={result.repository}, "
            f"images={result.image_count}, size={result.size}",
            identifier=str(command.correlation_id),
            repository=str(command.repository),
        )
        return FinalizeUploadResponse(
            repository=str(result.repository),
            image_count=result.image_count,
            size=result.size,
        )
