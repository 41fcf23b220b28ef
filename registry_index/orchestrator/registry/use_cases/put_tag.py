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


"""PutTag use case implementation."""

from api.logging_utils import log_secure_info
from core.registry.repositories import RepositoryLock
from core.registry.services import TagService
from orchestrator.registry.commands import PutTagCommand
from orchestrator.registry.dtos import TagWriteResponse


class PutTagUseCase:
    """Use case for writing a tag under the repository lock."""

    def __init__(self, tag_service: TagService, repository_lock: RepositoryLock) -> None:
        self._tag_service = tag_service
        self._repository_lock = repository_lock

    def execute(self, command: PutTagCommand) -> TagWriteResponse:
        """Insert or update the tag.

        Raises:
            RepositoryNotFoundError: If the repository is not registered.
            TagBodyValidationError: If the body carries no image id.
            PersistenceError: If the store fails.
        """
        with self._repository_lock.hold(command.repository):
            tag = self._tag_service.put_tag(
                ref=command.repository,
                tag_name=command.tag,
                body=command.body,
                agent=command.agent,
                correlation_id=str(command.correlation_id),
            )

        log_secure_info(
            "info",
            f"Tag written: repository={command.repository}, tag={tag.name}, "
            f"image={tag.image_id}",
            identifier=str(command.correlation_id),
            repository=str(command.repository),
        )
        return TagWriteResponse(
            repository=str(command.repository),
            tag=tag.name,
            image_id=tag.image_id,
        )
