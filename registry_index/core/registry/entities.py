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

"""Domain entities for the Registry module."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

from core.registry.value_objects import AccessLevel, Manifest, RepositoryRef


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
# pylint: disable=too-many-instance-attributes
class RepositoryRecord:
    """Persisted facts about one repository.

    The manifest is owned by registration. The rollup fields
    (``uploaded``, ``checksummed``, ``size``) are only ever written by the
    upload completion gate, all three at once.

    Attributes:
        ref: Repository identity.
        manifest_json: Manifest as registered, in JSON wire form.
        uploaded: Every manifest image is uploaded.
        checksummed: Every manifest image is checksummed.
        size: Sum of manifest image sizes in bytes.
        version: Optimistic locking counter.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    ref: RepositoryRef
    manifest_json: str
    uploaded: bool = False
    checksummed: bool = False
    size: int = 0
    version: int = 1
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def manifest(self) -> Manifest:
        """Decode the stored manifest.

        Raises:
            ValueError: If the stored document is malformed.
        """
        return Manifest.from_json(self.manifest_json)

    def replace_manifest(self, manifest: Manifest) -> None:
        """Replace the whole manifest, leaving rollup fields untouched."""
        self.manifest_json = manifest.to_json()
        self.updated_at = _utcnow()
        self.version += 1


@dataclass
class TagRecord:
    """Mapping of a tag name to a head image within a repository.

    Attributes:
        repository: Repository the tag belongs to.
        name: Tag name, unique within the repository.
        image_id: Head image identifier.
        agent: User-Agent of the client that last wrote the tag.
        updated_at: Last write timestamp.
    """

    repository: RepositoryRef
    name: str
    image_id: str
    agent: str = ""
    updated_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ImageRecord:
    """Per-image facts written by the image artifact endpoints.

    Attributes:
        image_id: Image identifier.
        ancestry: Ancestor image ids, nearest ancestor first.
        size: Layer size in bytes.
        uploaded: Layer bytes are fully uploaded.
        checksummed: Layer checksum has been verified.
    """

    image_id: str
    ancestry: Tuple[str, ...] = ()
    size: int = 0
    uploaded: bool = False
    checksummed: bool = False


@dataclass(frozen=True)
class UserAccount:
    """Registry user as seen by the index.

    Attributes:
        username: Login name, also the user's namespace.
        password_hash: Argon2 password hash.
        active: Account is activated.
    """

    username: str
    password_hash: str
    active: bool = True


@dataclass(frozen=True)
class AccessTokenRecord:
    """Stored token scoped to one (user, repository) pair.

    Only a hash of the signature is kept.

    Attributes:
        username: Owner of the token.
        repository: Repository scope.
        signature_hash: SHA-256 hex digest of the token signature.
        access: Granted access level.
        issued_at: Issue timestamp.
    """

    username: str
    repository: RepositoryRef
    signature_hash: str
    access: AccessLevel = AccessLevel.WRITE
    issued_at: Optional[datetime] = None
