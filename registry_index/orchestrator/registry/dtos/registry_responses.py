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


"""Registry response DTOs."""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class RegistrationResponse:
    """Response DTO for a repository registration.

    Attributes:
        repository: ``namespace/name`` of the registered repository.
        token: Wire form of the issued write token.
    """

    repository: str
    token: str


@dataclass(frozen=True)
class TagWriteResponse:
    """Response DTO for a tag write."""

    repository: str
    tag: str
    image_id: str


@dataclass(frozen=True)
class FinalizeUploadResponse:
    """Response DTO for a successful completion check.

    Attributes:
        repository: ``namespace/name`` of the finalized repository.
        image_count: Number of distinct images verified.
        size: Committed repository size in bytes.
    """

    repository: str
    image_count: int
    size: int


@dataclass(frozen=True)
class RepositoryImagesResponse:
    """Pull manifest: ``[{"id": image_id}, ...]`` in fetch order."""

    repository: str
    images: List[Dict[str, str]]


@dataclass(frozen=True)
class RepositoryTagsResponse:
    """Tag name to head image id mapping."""

    repository: str
    tags: Dict[str, str]
