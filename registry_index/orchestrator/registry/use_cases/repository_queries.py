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


"""Read-side use cases serving pull clients.

Reads take no lock; the rollup fields are committed in a single update, so
a reader sees a repository either before or after completion.
"""

from core.registry.services import AncestryResolver
from orchestrator.registry.commands import GetRepositoryImagesQuery, GetRepositoryTagsQuery
from orchestrator.registry.dtos import RepositoryImagesResponse, RepositoryTagsResponse


class GetRepositoryImagesUseCase:
    """Use case returning the pull manifest of a finished repository."""

    def __init__(self, resolver: AncestryResolver) -> None:
        self._resolver = resolver

    def execute(self, query: GetRepositoryImagesQuery) -> RepositoryImagesResponse:
        """Resolve the deduplicated image list.

        Raises:
            NotFoundError: If the repository is not pull-visible or untagged.
            DataConsistencyError: If a tag points at a missing image.
        """
        images = self._resolver.resolve_pull_manifest(
            query.repository, correlation_id=str(query.correlation_id)
        )
        return RepositoryImagesResponse(repository=str(query.repository), images=images)


class GetRepositoryTagsUseCase:
    """Use case returning the tag map of a finished repository."""

    def __init__(self, resolver: AncestryResolver) -> None:
        self._resolver = resolver

    def execute(self, query: GetRepositoryTagsQuery) -> RepositoryTagsResponse:
        """Resolve tag names to head image ids.

        Raises:
            NotFoundError: If the repository is not pull-visible or untagged.
        """
        tags = self._resolver.resolve_tags(
            query.repository, correlation_id=str(query.correlation_id)
        )
        return RepositoryTagsResponse(repository=str(query.repository), tags=tags)
