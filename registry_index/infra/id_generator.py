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


"""Infrastructure layer for identifier and token signature generation."""

import secrets
import uuid

from core.registry.repositories import SignatureGenerator


class UUIDv4Generator:  # pylint: disable=R0903
    """UUID v4 generator for correlation IDs (returns uuid.UUID)."""

    def generate(self) -> uuid.UUID:
        """Generate a new UUID v4.

        Returns:
            uuid.UUID: A new UUID v4 instance.
        """
        return uuid.uuid4()


class TokenSignatureGenerator(SignatureGenerator):  # pylint: disable=R0903
    """Signature generator backed by the ``secrets`` CSPRNG.

    Signatures are lowercase hex so they satisfy the alphanumeric token
    grammar.
    """

    def __init__(self, num_bytes: int = 32):
        self._num_bytes = num_bytes

    def generate(self) -> str:
        """Generate a new random signature.

        Returns:
            Hex string of ``2 * num_bytes`` characters.
        """
        return secrets.token_hex(self._num_bytes)
