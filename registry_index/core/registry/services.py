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

"""Domain services for the Registry module.

The push side of the v1 index protocol uploads every image independently and
then asks the index to mark the repository complete. The pull side asks for
the tags and the flattened list of images those tags need. This module holds
the logic that reasons across those separate requests:

* :class:`UploadCompletionVerifier` re-scans the registered manifest against
  the per-image records and commits the repository rollup all at once.
* :class:`AncestryResolver` expands each tag into its image lineage and
  returns the deduplicated pull manifest.
* :class:`RegistrationService` and :class:`TagService` write the records the
  two above consume.
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

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
    OwnershipMismatchError,
    RepositoryNotFoundError,
    TagBodyValidationError,
    TagsNotFoundError,
)
from core.registry.repositories import (
    AccessTokenRepository,
    ImageRecordRepository,
    RepositoryRecordRepository,
    SignatureGenerator,
    TagRecordRepository,
)
from core.registry.value_objects import (
    AccessLevel,
    AccessToken,
    ImageId,
    Manifest,
    RepositoryRef,
    TagName,
)

logger = logging.getLogger(__name__)


def is_pull_visible(record: Optional[RepositoryRecord]) -> bool:
    """Return True when pull clients may see the repository.

    An unfinished push and an unknown repository both answer False, so the
    read endpoints cannot tell them apart.
    """
    return record is not None and record.uploaded and record.checksummed


def dedupe_preserving_order(image_ids: Iterable[str]) -> List[str]:
    """Drop repeated ids, keeping each at the position of its first occurrence."""
    seen = set()
    unique: List[str] = []
    for image_id in image_ids:
        if image_id in seen:
            continue
        seen.add(image_id)
        unique.append(image_id)
    return unique


def decode_tag_body(body: str) -> str:
    """Extract the image id from a tag write body.

    Clients send the id as a JSON string (``"abc123"``), sometimes wrapped in
    other content. The id is the first double-quoted run of one or more ASCII
    alphanumeric characters anywhere in the body.

    Raises:
        ValueError: If the body carries no such token.
    """
    length = len(body)
    start = body.find('"')
    while start != -1:
        end = start + 1
        while end < length and body[end].isascii() and body[end].isalnum():
            end += 1
        if end > start + 1 and end < length and body[end] == '"':
            return body[start + 1:end]
        start = body.find('"', start + 1)
    raise ValueError("Tag body does not contain a quoted image id")


def hash_signature(signature: str) -> str:
    """Return the SHA-256 hex digest stored in place of a token signature."""
    return hashlib.sha256(signature.encode("utf-8")).hexdigest()


def _is_parent_chain(ancestry: object) -> bool:
    """Return True for a list or tuple of valid image ids."""
    if not isinstance(ancestry, (list, tuple)):
        return False
    for parent in ancestry:
        if not isinstance(parent, str):
            return False
        try:
            ImageId(parent)
        except ValueError:
            return False
    return True


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a successful completion check.

    Attributes:
        repository: Repository that was finalized.
        image_count: Number of distinct manifest images verified.
        size: Committed repository size in bytes.
    """

    repository: RepositoryRef
    image_count: int
    size: int


class UploadCompletionVerifier:
    """All-or-nothing gate deciding when a repository push is complete.

    Images are uploaded out of order over many requests, so completion is
    never tracked incrementally. Each call re-reads the registered manifest
    and every image record it names; only when all of them are uploaded and
    checksummed are the three rollup fields committed, in a single store
    update. Any failure leaves the repository exactly as it was, and calling
    the gate again after success re-commits the same values.
    """

    def __init__(
        self,
        repository_repo: RepositoryRecordRepository,
        image_repo: ImageRecordRepository,
    ):
        """Initialize verifier with repository and image stores."""
        self._repository_repo = repository_repo
        self._image_repo = image_repo

    def verify_and_finalize(
        self, ref: RepositoryRef, correlation_id: str = ""
    ) -> CompletionResult:
        """Verify every manifest image and commit the repository rollup.

        Args:
            ref: Repository to finalize.
            correlation_id: Correlation ID for error reporting.

        Returns:
            CompletionResult with the committed size.

        Raises:
            RepositoryNotFoundError: If the repository is not registered.
            ManifestValidationError: If the stored manifest is malformed.
            ImageNotFoundError: If a manifest image has no record.
            IncompleteUploadError: If a manifest image is not uploaded.
            ChecksumPendingError: If a manifest image is not checksummed.
            PersistenceError: If the store fails or the record changed.
        """
        record = self._load_repository(ref, correlation_id)
        image_ids = self._parse_manifest(record, correlation_id)
        size = self._verify_images(image_ids, correlation_id)

        self._repository_repo.commit_rollup(
            ref, size=size, expected_version=record.version
        )
        logger.info(
            "Repository %s finalized: images=%d, size=%d, correlation_id=%s",
            ref,
            len(image_ids),
            size,
            correlation_id,
        )
        return CompletionResult(repository=ref, image_count=len(image_ids), size=size)

    def _load_repository(
        self, ref: RepositoryRef, correlation_id: str
    ) -> RepositoryRecord:
        record = self._repository_repo.find(ref)
        if record is None:
            raise RepositoryNotFoundError(str(ref), correlation_id)
        return record

    def _parse_manifest(
        self, record: RepositoryRecord, correlation_id: str
    ) -> List[str]:
        """Decode the stored manifest into distinct ids in build order."""
        try:
            manifest = record.manifest
        except ValueError as exc:
            logger.error(
                "Stored manifest of %s is malformed, correlation_id=%s",
                record.ref,
                correlation_id,
            )
            raise ManifestValidationError(
                f"Invalid repository manifest: {exc}", correlation_id
            ) from exc
        return manifest.unique_image_ids()

    def _verify_images(self, image_ids: List[str], correlation_id: str) -> int:
        """Check each image in order and return the summed size.

        Stops at the first image that fails. The error deliberately names
        neither the image nor how many remain; the client retries the whole
        sequence.
        """
        size = 0
        for image_id in image_ids:
            image = self._image_repo.find(image_id)
            if image is None:
                logger.warning(
                    "Manifest image %s was never uploaded, correlation_id=%s",
                    image_id,
                    correlation_id,
                )
                raise ImageNotFoundError(image_id, correlation_id)
            if not image.uploaded:
                logger.info(
                    "Manifest image %s upload incomplete, correlation_id=%s",
                    image_id,
                    correlation_id,
                )
                raise IncompleteUploadError(correlation_id)
            if not image.checksummed:
                logger.info(
                    "Manifest image %s checksum pending, correlation_id=%s",
                    image_id,
                    correlation_id,
                )
                raise ChecksumPendingError(correlation_id)
            size += image.size
        return size


class AncestryResolver:
    """Builds the pull-side view of a finished repository."""

    def __init__(
        self,
        repository_repo: RepositoryRecordRepository,
        tag_repo: TagRecordRepository,
        image_repo: ImageRecordRepository,
    ):
        """Initialize resolver with repository, tag and image stores."""
        self._repository_repo = repository_repo
        self._tag_repo = tag_repo
        self._image_repo = image_repo

    def resolve_pull_manifest(
        self, ref: RepositoryRef, correlation_id: str = ""
    ) -> List[Dict[str, str]]:
        """Return the deduplicated images a pull client must fetch.

        Each tag contributes its head image followed by the head's ancestor
        chain. Tags are walked in persisted order and each lineage is
        prepended to what was collected so far, so lineages of later tags
        come first. Duplicates are then dropped, keeping the first position.

        Args:
            ref: Repository to resolve.
            correlation_id: Correlation ID for error reporting.

        Returns:
            List of ``{"id": image_id}`` objects.

        Raises:
            RepositoryNotFoundError: If the repository is not pull-visible.
            TagsNotFoundError: If the repository has no tags.
            DataConsistencyError: If a tag points at a missing image.
        """
        self._load_visible_repository(ref, correlation_id)
        tags = self._load_tags(ref, correlation_id)

        collected: List[str] = []
        for tag in tags:
            collected = self._lineage(tag, correlation_id) + collected

        return [{"id": image_id} for image_id in dedupe_preserving_order(collected)]

    def resolve_tags(
        self, ref: RepositoryRef, correlation_id: str = ""
    ) -> Dict[str, str]:
        """Return the tag name to head image id mapping.

        Raises:
            RepositoryNotFoundError: If the repository is not pull-visible.
            TagsNotFoundError: If the repository has no tags.
        """
        self._load_visible_repository(ref, correlation_id)
        tags = self._load_tags(ref, correlation_id)
        return {tag.name: tag.image_id for tag in tags}

    def _load_visible_repository(
        self, ref: RepositoryRef, correlation_id: str
    ) -> RepositoryRecord:
        record = self._repository_repo.find(ref)
        if not is_pull_visible(record):
            raise RepositoryNotFoundError(str(ref), correlation_id)
        return record

    def _load_tags(self, ref: RepositoryRef, correlation_id: str) -> List[TagRecord]:
        tags = self._tag_repo.find_all(ref)
        if not tags:
            raise TagsNotFoundError(str(ref), correlation_id)
        return tags

    def _lineage(self, tag: TagRecord, correlation_id: str) -> List[str]:
        image: Optional[ImageRecord] = self._image_repo.find(tag.image_id)
        if image is None:
            logger.error(
                "Tag %s/%s points at missing image %s, correlation_id=%s",
                tag.repository,
                tag.name,
                tag.image_id,
                correlation_id,
            )
            raise DataConsistencyError(
                "Tag references an image that does not exist.", correlation_id
            )
        if not _is_parent_chain(image.ancestry):
            logger.error(
                "Image %s has an unreadable parent chain, correlation_id=%s",
                image.image_id,
                correlation_id,
            )
            raise DataConsistencyError(
                "Could not decode the parent image chain.", correlation_id
            )
        return [image.image_id, *image.ancestry]


class RegistrationService:
    """Registers repository manifests and issues write tokens."""

    def __init__(
        self,
        repository_repo: RepositoryRecordRepository,
        token_repo: AccessTokenRepository,
        signature_generator: SignatureGenerator,
    ):
        """Initialize service with stores and the signature generator."""
        self._repository_repo = repository_repo
        self._token_repo = token_repo
        self._signature_generator = signature_generator

    def register(
        self,
        user: UserAccount,
        ref: RepositoryRef,
        body: str,
        correlation_id: str = "",
    ) -> AccessToken:
        """Create or update a repository manifest and issue a write token.

        Args:
            user: Authenticated user performing the push.
            ref: Target repository.
            body: Raw JSON manifest ``[{"id": "..."}, ...]`` in build order.
            correlation_id: Correlation ID for error reporting.

        Returns:
            The freshly issued write token.

        Raises:
            OwnershipMismatchError: If the user does not own the namespace.
            ManifestValidationError: If the body is not a valid manifest.
            PersistenceError: If the store fails.
        """
        if user.username != str(ref.namespace):
            raise OwnershipMismatchError(
                "Username does not match namespace.", correlation_id
            )

        manifest = self._decode_manifest(body, correlation_id)
        self._save_manifest(ref, manifest)
        return self._issue_token(user, ref)

    def _decode_manifest(self, body: str, correlation_id: str) -> Manifest:
        try:
            return Manifest.from_json(body)
        except ValueError as exc:
            raise ManifestValidationError(
                f"Invalid repository manifest: {exc}", correlation_id
            ) from exc

    def _save_manifest(self, ref: RepositoryRef, manifest: Manifest) -> None:
        record = self._repository_repo.find(ref)
        if record is None:
            record = RepositoryRecord(ref=ref, manifest_json=manifest.to_json())
            logger.info("Creating repository %s with %d images", ref, len(manifest))
        else:
            record.replace_manifest(manifest)
            logger.info("Replacing manifest of %s with %d images", ref, len(manifest))
        self._repository_repo.save(record)

    def _issue_token(self, user: UserAccount, ref: RepositoryRef) -> AccessToken:
        token = AccessToken(
            signature=self._signature_generator.generate(),
            namespace=str(ref.namespace),
            repository=str(ref.name),
            access=AccessLevel.WRITE.value,
        )
        self._token_repo.save(
            AccessTokenRecord(
                username=user.username,
                repository=ref,
                signature_hash=hash_signature(token.signature),
                access=AccessLevel.WRITE,
                issued_at=datetime.now(timezone.utc),
            )
        )
        return token


class TagService:
    """Points tag names at head images."""

    def __init__(
        self,
        repository_repo: RepositoryRecordRepository,
        tag_repo: TagRecordRepository,
    ):
        """Initialize service with repository and tag stores."""
        self._repository_repo = repository_repo
        self._tag_repo = tag_repo

    def put_tag(
        self,
        ref: RepositoryRef,
        tag_name: TagName,
        body: str,
        agent: str = "",
        correlation_id: str = "",
    ) -> TagRecord:
        """Insert or update a tag.

        The image id is not checked against the image store here; a dangling
        tag is reported when the pull manifest is resolved.

        Raises:
            RepositoryNotFoundError: If the repository is not registered.
            TagBodyValidationError: If the body carries no image id.
            PersistenceError: If the store fails.
        """
        if self._repository_repo.find(ref) is None:
            raise RepositoryNotFoundError(str(ref), correlation_id)

        try:
            image_id = ImageId(decode_tag_body(body))
        except ValueError as exc:
            raise TagBodyValidationError(str(exc), correlation_id) from exc

        tag = self._tag_repo.find(ref, str(tag_name))
        if tag is None:
            tag = TagRecord(repository=ref, name=str(tag_name), image_id=str(image_id))
        else:
            tag.image_id = str(image_id)
            tag.updated_at = datetime.now(timezone.utc)
        tag.agent = agent
        self._tag_repo.save(tag)
        return tag
