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


"""End-to-end tests for a Docker v1 push followed by a pull.

Each scenario drives the HTTP API the way the Docker client does:

1. PUT /v1/repositories/{ns}/{repo} with Basic credentials
2. images are uploaded to the registry (simulated by seeding image records)
3. PUT tags with the index token
4. PUT /images to finalize
5. GET /tags and GET /images as a pull client
"""

# pylint: disable=redefined-outer-name

from typing import Dict

import pytest
from fastapi.testclient import TestClient

from core.registry.value_objects import RepositoryRef

REPOSITORY_URL = "/v1/repositories/alice/app"
MANIFEST = '[{"id": "img1"}, {"id": "img2"}]'


@pytest.fixture
def push_token(client: TestClient, basic_auth) -> Dict[str, str]:
    """Register alice/app and return token headers for the push."""
    response = client.put(REPOSITORY_URL, content=MANIFEST, headers=basic_auth())
    assert response.status_code == 200
    return {"Authorization": response.headers["X-Docker-Token"]}


class TestScenarioCompletePush:
    """Both images ready: the completion gate commits the summed size."""

    def test_finalize_sets_size(self, client, push_token, upload_image, registry_container):
        upload_image("img1", size=10)
        upload_image("img2", size=20)

        response = client.put(f"{REPOSITORY_URL}/images", content="[]", headers=push_token)

        assert response.status_code == 204
        record = registry_container.repository_record_repository().find(
            RepositoryRef.of("alice", "app")
        )
        assert record.size == 30
        assert record.uploaded and record.checksummed

    def test_finalize_is_idempotent(self, client, push_token, upload_image, registry_container):
        upload_image("img1", size=10)
        upload_image("img2", size=20)

        first = client.put(f"{REPOSITORY_URL}/images", headers=push_token)
        second = client.put(f"{REPOSITORY_URL}/images", headers=push_token)

        assert (first.status_code, second.status_code) == (204, 204)
        record = registry_container.repository_record_repository().find(
            RepositoryRef.of("alice", "app")
        )
        assert record.size == 30


class TestScenarioIncompletePush:
    """One image still uploading: the repository stays invisible."""

    def test_incomplete_upload_keeps_repository_hidden(
        self, client, push_token, upload_image, basic_auth
    ):
        upload_image("img1", size=10)
        upload_image("img2", size=20, uploaded=False)
        client.put(f"{REPOSITORY_URL}/tags/latest", content='"img2"', headers=push_token)

        finalize = client.put(f"{REPOSITORY_URL}/images", headers=push_token)
        tags = client.get(f"{REPOSITORY_URL}/tags", headers=basic_auth())

        assert finalize.status_code == 400
        assert finalize.json() == {
            "error": "The image layer upload is not complete, please try again."
        }
        assert tags.status_code == 404

    def test_retry_after_upload_completes(
        self, client, push_token, upload_image, basic_auth
    ):
        upload_image("img1", size=10)
        upload_image("img2", size=20, uploaded=False)
        client.put(f"{REPOSITORY_URL}/tags/latest", content='"img2"', headers=push_token)
        assert client.put(f"{REPOSITORY_URL}/images", headers=push_token).status_code == 400

        upload_image("img2", size=20)
        retry = client.put(f"{REPOSITORY_URL}/images", headers=push_token)
        tags = client.get(f"{REPOSITORY_URL}/tags", headers=basic_auth())

        assert retry.status_code == 204
        assert tags.json() == {"latest": "img2"}


class TestScenarioPullManifest:
    """Two tags sharing ancestry: the pull manifest lists each image once."""

    def test_pull_manifest_deduplicates(self, client, push_token, upload_image, basic_auth):
        upload_image("img1", size=10)
        upload_image("img2", size=20, ancestry=["img1"])
        assert client.put(
            f"{REPOSITORY_URL}/tags/latest", content='"img2"', headers=push_token
        ).status_code == 200
        assert client.put(
            f"{REPOSITORY_URL}/tags/v1", content='"img1"', headers=push_token
        ).status_code == 200
        assert client.put(f"{REPOSITORY_URL}/images", headers=push_token).status_code == 204

        pull_headers = basic_auth("bob")
        tags = client.get(f"{REPOSITORY_URL}/tags", headers=pull_headers)
        images = client.get(f"{REPOSITORY_URL}/images", headers=pull_headers)

        assert tags.json() == {"latest": "img2", "v1": "img1"}
        assert images.status_code == 200
        assert images.json() == [{"id": "img1"}, {"id": "img2"}]
        assert images.headers["X-Docker-Endpoints"]

    def test_registering_another_repository_keeps_push_token(
        self, client, push_token, basic_auth
    ):
        other = client.put("/v1/repositories/alice/web", content="[]", headers=basic_auth())
        assert other.status_code == 200

        response = client.put(
            f"{REPOSITORY_URL}/tags/latest", content='"img1"', headers=push_token
        )

        assert response.status_code == 200
