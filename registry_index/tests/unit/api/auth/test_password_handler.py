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


"""Unit tests for Argon2 password handling."""

# pylint: disable=redefined-outer-name

from api.auth.password_handler import verify_password


def test_verifies_own_password_only(hash_password):
    """A hash verifies its own password only."""
    stored = hash_password("pa55word")

    assert verify_password("pa55word", stored) is True
    assert verify_password("other", stored) is False


def test_verifies_across_salts(hash_password):
    """Two salted hashes of one password both verify."""
    first, second = hash_password("same"), hash_password("same")

    assert first != second
    assert verify_password("same", first) and verify_password("same", second)


def test_unreadable_hash_is_rejected():
    """Garbage stored hashes never verify."""
    assert verify_password("anything", "not-a-hash") is False
