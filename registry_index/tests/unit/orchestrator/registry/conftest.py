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


"""Fixtures for registry use case tests."""

from contextlib import contextmanager

import pytest

from core.registry.entities import UserAccount
from core.registry.value_objects import CorrelationId

VALID_CORRELATION_ID = "018f3c4b-2d9e-7d1a-8a2b-111111111111"


class RecordingLock:
    """Lock double recording which repository is held and when."""

    def __init__(self) -> None:
        self.held = []
        self.active = False

    @contextmanager
    def hold(self, ref):
        """Record the reference and mark the lock active inside the block."""
        self.held.append(str(ref))
        self.active = True
        try:
            yield
        finally:
            self.active = False


@pytest.fixture
def recording_lock() -> RecordingLock:
    """Fresh recording lock."""
    return RecordingLock()


@pytest.fixture
def correlation_id() -> CorrelationId:
    """Correlation id used by commands."""
    return CorrelationId(VALID_CORRELATION_ID)


@pytest.fixture
def alice_user() -> UserAccount:
    """Active alice account."""
    return UserAccount(username="alice", password_hash="unused")
