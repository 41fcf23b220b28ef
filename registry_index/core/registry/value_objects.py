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

"""Value objects for the Registry domain.

All value objects are immutable and defined by their values, not identity.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Tuple


@dataclass(frozen=True)
class Namespace:
    """Repository namespace, always equal to the owning username.

    Attributes:
        value: Namespace string.

    Raises:
        ValueError: If namespace format is invalid.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 255
    NAMESPACE_PATTERN: ClassVar[str] = r'^[a-zA-Z0-9]+$'

    def __post_init__(self) -> None:
        """Validate namespace format."""
        if not self.value or not self.value.strip():
            raise ValueError("Namespace cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Namespace length cannot exceed {self.MAX_LENGTH} "
                f"characters, got {len(self.value)}"
            )
        if not re.match(self.NAMESPACE_PATTERN, self.value):
            raise ValueError(
                f"Invalid namespace format: {self.value}. "
                f"Must contain only alphanumeric characters."
            )

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class RepositoryName:
    """Repository name within a namespace.

    Attributes:
        value: Repository name string.

    Raises:
        ValueError: If repository name format is invalid.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 255
    NAME_PATTERN: ClassVar[str] = r'^[a-zA-Z0-9_\-\.]+$'

    def __post_init__(self) -> None:
        """Validate repository name format."""
        if not self.value or not self.value.strip():
            raise ValueError("Repository name cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Repository name length cannot exceed {self.MAX_LENGTH} "
                f"characters, got {len(self.value)}"
            )
        if not re.match(self.NAME_PATTERN, self.value):
            raise ValueError(
                f"Invalid repository name format: {self.value}. "
                f"Must contain only alphanumeric characters, dots, underscores, and hyphens."
            )

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class RepositoryRef:
    """Identity of a repository: the (namespace, name) pair."""

    namespace: Namespace
    name: RepositoryName

    @classmethod
    def of(cls, namespace: str, name: str) -> "RepositoryRef":
        """Build a reference from raw strings.

        Raises:
            ValueError: If either part is invalid.
        """
        return cls(Namespace(namespace), RepositoryName(name))

    def __str__(self) -> str:
        """Return ``namespace/name``."""
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class ImageId:
    """Image identifier.

    Attributes:
        value: Image id string.

    Raises:
        ValueError: If image id format is invalid.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 128
    ID_PATTERN: ClassVar[str] = r'^[a-zA-Z0-9]+$'

    def __post_init__(self) -> None:
        """Validate image id format."""
        if not self.value:
            raise ValueError("Image id cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Image id length cannot exceed {self.MAX_LENGTH} "
                f"characters, got {len(self.value)}"
            )
        if not re.match(self.ID_PATTERN, self.value):
            raise ValueError(
                f"Invalid image id format: {self.value}. "
                f"Must contain only alphanumeric characters."
            )

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class TagName:
    """Human readable tag name.

    Attributes:
        value: Tag name string.

    Raises:
        ValueError: If tag name format is invalid.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 128
    TAG_PATTERN: ClassVar[str] = r'^[a-zA-Z0-9_\-\.]+$'

    def __post_init__(self) -> None:
        """Validate tag name format."""
        if not self.value or not self.value.strip():
            raise ValueError("Tag name cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Tag name length cannot exceed {self.MAX_LENGTH} "
                f"characters, got {len(self.value)}"
            )
        if not re.match(self.TAG_PATTERN, self.value):
            raise ValueError(
                f"Invalid tag name format: {self.value}. "
                f"Must contain only alphanumeric characters, dots, underscores, and hyphens."
            )

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


class AccessLevel(str, Enum):
    """Access level carried by an index token."""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"


@dataclass(frozen=True)
class Manifest:
    """Ordered list of image ids declared when a repository is registered.

    The order is the client's build order and duplicates are kept as
    submitted; use :meth:`unique_image_ids` when each image should be
    visited once.
    """

    image_ids: Tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate every image id."""
        for image_id in self.image_ids:
            ImageId(image_id)

    @classmethod
    def from_json(cls, text: str) -> "Manifest":
        """Decode a manifest from its JSON wire form ``[{"id": "..."}, ...]``.

        Raises:
            ValueError: If the document is not a list of objects with a
                string ``id``.
        """
        try:
            entries = json.loads(text)
        except (TypeError, json.JSONDecodeError) as exc:
            raise ValueError(f"Manifest is not valid JSON: {exc}") from exc

        if not isinstance(entries, list):
            raise ValueError("Manifest must be a JSON array")

        image_ids: List[str] = []
        for position, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ValueError(f"Manifest entry {position} must be an object")
            image_id = entry.get("id")
            if not isinstance(image_id, str):
                raise ValueError(f"Manifest entry {position} has no string 'id'")
            image_ids.append(image_id)

        return cls(tuple(image_ids))

    def to_json(self) -> str:
        """Encode the manifest to its JSON wire form."""
        return json.dumps([{"id": image_id} for image_id in self.image_ids])

    def unique_image_ids(self) -> List[str]:
        """Return image ids in manifest order with repeats removed."""
        return list(dict.fromkeys(self.image_ids))

    def __len__(self) -> int:
        return len(self.image_ids)


@dataclass(frozen=True)
class AccessToken:
    """Index access token.

    Wire grammar::

        Token signature=<alnum>,repository="<alnum namespace>/<graph repo>",access=<alnum>

    Attributes:
        signature: Opaque alphanumeric signature.
        namespace: Namespace the token is scoped to.
        repository: Repository the token is scoped to.
        access: Granted access level.
    """

    signature: str
    namespace: str
    repository: str
    access: str

    SCHEME: ClassVar[str] = "Token "
    SIGNATURE_KEY: ClassVar[str] = "signature="
    REPOSITORY_KEY: ClassVar[str] = ',repository="'
    ACCESS_KEY: ClassVar[str] = '",access='

    def __post_init__(self) -> None:
        """Validate every field against the token grammar."""
        if not _is_alnum(self.signature):
            raise ValueError("Token signature must be alphanumeric")
        if not _is_alnum(self.namespace):
            raise ValueError("Token namespace must be alphanumeric")
        if not _is_graph(self.repository):
            raise ValueError("Token repository must be printable without spaces")
        if not _is_alnum(self.access):
            raise ValueError("Token access must be alphanumeric")

    @classmethod
    def parse(cls, header: str) -> "AccessToken":
        """Decode an ``Authorization`` header value.

        The repository part is matched greedily up to the last
        ``",access=`` so repository names containing quotes still split the
        same way on every request.

        Raises:
            ValueError: If the header does not follow the token grammar.
        """
        if not header or not header.startswith(cls.SCHEME):
            raise ValueError("Not an index token")

        rest = header[len(cls.SCHEME):]
        if not rest.startswith(cls.SIGNATURE_KEY):
            raise ValueError("Token is missing its signature")
        rest = rest[len(cls.SIGNATURE_KEY):]

        signature, found, rest = rest.partition(cls.REPOSITORY_KEY)
        if not found:
            raise ValueError("Token is missing its repository scope")

        scope, found, access = rest.rpartition(cls.ACCESS_KEY)
        if not found:
            raise ValueError("Token is missing its access level")

        namespace, found, repository = scope.partition("/")
        if not found:
            raise ValueError("Token repository scope must be namespace/repository")

        return cls(
            signature=signature,
            namespace=namespace,
            repository=repository,
            access=access.strip(),
        )

    @property
    def scope(self) -> str:
        """Return ``namespace/repository``."""
        return f"{self.namespace}/{self.repository}"

    def __str__(self) -> str:
        """Encode the token in its wire form."""
        return (
            f'Token signature={self.signature},'
            f'repository="{self.namespace}/{self.repository}",'
            f'access={self.access}'
        )


def _is_alnum(value: str) -> bool:
    return bool(value) and value.isascii() and value.isalnum()


def _is_graph(value: str) -> bool:
    return bool(value) and all(33 <= ord(char) <= 126 for char in value)


@dataclass(frozen=True)
class CorrelationId:
    """Request tracing identifier.

    Attributes:
        value: Correlation id string.

    Raises:
        ValueError: If the id is empty, too long or not printable.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 128

    def __post_init__(self) -> None:
        """Validate correlation id format."""
        if not self.value:
            raise ValueError("Correlation id cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Correlation id length cannot exceed {self.MAX_LENGTH} "
                f"characters, got {len(self.value)}"
            )
        if not _is_graph(self.value):
            raise ValueError("Correlation id must be printable without spaces")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value
