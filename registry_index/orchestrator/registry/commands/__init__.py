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


"""Registry command and query DTOs."""

from orchestrator.registry.commands.finalize_upload import FinalizeUploadCommand
from orchestrator.registry.commands.put_tag import PutTagCommand
from orchestrator.registry.commands.register_repository import RegisterRepositoryCommand
from orchestrator.registry.commands.repository_queries import (
    GetRepositoryImagesQuery,
    GetRepositoryTagsQuery,
)

__all__ = [
    "FinalizeUploadCommand",
    "PutTagCommand",
    "RegisterRepositoryCommand",
    "GetRepositoryImagesQuery",
    "GetRepositoryTagsQuery",
]
