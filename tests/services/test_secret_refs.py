# Copyright 2025 Alibaba Group Holding Ltd.
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


"""
Unit tests for the secret reference codec.
"""

import pytest

from score_files.services.secret_refs import (
    DEFAULT_CODEC,
    MarkerSecretReferenceCodec,
    SecretReference,
)


class TestMarkerSecretReferenceCodec:
    """MarkerSecretReferenceCodec unit tests"""

    def test_decode_returns_name_and_key(self):
        token = DEFAULT_CODEC.encode("default", "key")

        assert DEFAULT_CODEC.decode(token) == SecretReference(secret_name="default", key="key")

    def test_key_may_contain_underscores(self):
        token = DEFAULT_CODEC.encode("db-creds", "admin_password")

        assert DEFAULT_CODEC.decode(token) == SecretReference("db-creds", "admin_password")

    def test_is_reference_requires_whole_string(self):
        token = DEFAULT_CODEC.encode("default", "key")

        assert DEFAULT_CODEC.is_reference(token)
        assert not DEFAULT_CODEC.is_reference(f"prefix {token}")
        assert not DEFAULT_CODEC.is_reference(token + token)
        assert not DEFAULT_CODEC.is_reference("plain text")

    def test_find_all_returns_tokens_in_order(self):
        first = DEFAULT_CODEC.encode("a", "x")
        second = DEFAULT_CODEC.encode("b", "y")

        assert DEFAULT_CODEC.find_all(f"{first} and {second}") == [first, second]
        assert DEFAULT_CODEC.find_all("nothing here") == []

    def test_decode_rejects_plain_text(self):
        with pytest.raises(ValueError, match="not a secret reference"):
            DEFAULT_CODEC.decode("default_key")

    @pytest.mark.parametrize(
        "name,key",
        [
            ("", "key"),
            ("bad_name", "key"),
            ("default", ""),
            ("sec\U0001F510ret", "key"),
            ("default", "k\U0001F4AC"),
        ],
    )
    def test_encode_rejects_invalid_names(self, name, key):
        with pytest.raises(ValueError):
            MarkerSecretReferenceCodec().encode(name, key)
