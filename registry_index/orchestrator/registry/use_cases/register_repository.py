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


"""RegisterRepository use case implementation."""

from api.logging_utils import log_secure_info
from core.registry.repositories import RepositoryLock
from core.registry.services import RegistrationService
from orchestrator.registry.commands import RegisterRepositoryCommand
from orchestrator.registry.dtos import RegistrationResponse


class RegisterRepositoryUseCase:
    """Use case for the push-side repository registration.

    Registration of one repository is serialized with every other mutating
    request on the same repository. A write token scoped to the repository
    is issued on success.

    Attributes:
        registration_service: Domain service writing the manifest and token.
        repository_lock: Keyed per-repository lock.
    """

    def __init__(
        self,
        registration_service: RegistrationService,
        repository_lock: RepositoryLock,
    ) -> None:
        self._registration_service = registration_service
        self._repository_lock = repository_lock

    def execute(self, command: RegisterRepositoryCommand) -> RegistrationResponse:
        """Register the manifest and issue a write token.

        Raises:
            OwnershipMismatchError: If the user does not own the namespace.
            ManifestValidationError: If the body is not a valid manifest.
            PersistenceError: If the store fails or the record changed.
        """
        repository = str(command.repository)
        with self._repository_lock.hold(command.repository):
            token = self._registration_service.register(
                user=command.user,
                ref=command.repository,
                body=command.body,
                correlation_id=str(command.correlation_id),
            )

        log_secure_info(
            "info",
            f"Repository registered: repository={repository}, "
            f"user={command.user.username}",
            identifier=str(command.correlation_id),
            repository=repository,
        )
        return RegistrationResponse(repository=repository, token=str(token))
