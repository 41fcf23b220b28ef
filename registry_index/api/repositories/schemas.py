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


"""Pydantic schemas for the repository index API."""

from typing import List

from pydantic import BaseModel, Field, RootModel


class ManifestEntry(BaseModel):
    """One image in a manifest or pull manifest."""

    id: str = Field(..., description="Image identifier", min_length=1, max_length=128)


class RepositoryManifest(RootModel[List[ManifestEntry]]):
    """Manifest body sent at registration, in build order."""


class RegistryErrorResponse(BaseModel):
    """Error body understood by Docker clients."""

    error: str = Field(..., description="Error message")
