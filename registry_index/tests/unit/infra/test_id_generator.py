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


"""Unit tests for identifier generators."""

import uuid

from core.registry.value_objects import AccessToken
from infra.id_generator import TokenSignatureGenerator, UUIDv4Generator


def test_uuid_generator_returns_v4():
    """Generated ids are UUID version 4."""
    value = UUIDv4Generator().generate()

    assert isinstance(value, uuid.UUID)
    assert value.version == 4


def test_signature_length_follows_byte_count():
    """Signatures are hex, two characters per byte."""
    assert len(TokenSignatureGenerator(16).generate()) == 32
    assert len(TokenSignatureGenerator().generate()) == 64


def test_signatures_fit_token_grammar_and_differ():
    """Signatures are accepted by the token grammar and are not repeated."""
    generator = TokenSignatureGenerator()
    first, second = generator.generate(), generator.generate()

    AccessToken(signature=first, namespace="alice", repository="app", access="write")
    assert first != second
