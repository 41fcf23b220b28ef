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


"""RegisterRepository command DTO."""

from dataclasses import dataclass

from core.registry.entities import UserAccount
from core.registry.value_objects import CorrelationId, RepositoryRef


@dataclass(frozen=True)
class RegisterRepositoryCommand:
    """Command to create or update a repository manifest.

    Attributes:
        repository: Target repository from the URL path.
        user: Authenticated user performing the push.
        body: Raw JSON manifest body.
        correlation_id: Request correlation identifier for tracing.
    """

    repository: RepositoryRef
    user: UserAccount
    body: str
    correlation_id: CorrelationId
