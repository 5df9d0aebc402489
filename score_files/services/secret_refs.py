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
Codec for confidential references embedded in expanded file content.

When a placeholder resolves to a value held in a Kubernetes Secret, the
expansion engine substitutes an opaque token instead of the secret value.
The converter only needs to know whether a string is such a token and which
Secret name and key it points at; the encoding itself stays behind the
``SecretReferenceCodec`` interface.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class SecretReference:
    """A key inside a named Kubernetes Secret."""

    secret_name: str
    key: str


class SecretReferenceCodec(ABC):
    """Abstract interface for encoding and decoding secret reference tokens."""

    @abstractmethod
    def encode(self, secret_name: str, key: str) -> str:
        """Encode a reference to ``key`` in Secret ``secret_name`` as a token."""
        pass

    @abstractmethod
    def _has_marker(self, value: str) -> bool:
        return any(c in value for c in self.PREFIX + self.SUFFIX)

    def find_all(self, text: str) -> List[str]:
        """Return every token found in ``text``, in order of appearance."""
        pass

    @abstractmethod
    def decode(self, token: str) -> SecretReference:
        """
        Decode a single token.

        Raises:
            ValueError: If ``token`` is not exactly one reference token
        """
        pass

    def is_reference(self, text: str) -> bool:
        """Whether ``text`` consists of exactly one token and nothing else."""
        tokens = self.find_all(text)
        return len(tokens) == 1 and tokens[0] == text


class MarkerSecretReferenceCodec(SecretReferenceCodec):
    """
    Wraps ``<name>_<key>`` in sentinel markers.

    Secret names are DNS subdomains and never contain ``_``, so the first
    underscore separates the name from the key.
    """

    PREFIX = "🔐💬"
    SUFFIX = "💬🔐"

    def __init__(self):
        # name and key never contain the marker characters
        self._pattern = re.compile(
            re.escape(self.PREFIX)
            + r"([^_\U0001F510\U0001F4AC]+)_([^\U0001F510\U0001F4AC]+)"
            + re.escape(self.SUFFIX)
        )

    def encode(self, secret_name: str, key: str) -> str:
        if not secret_name or "_" in secret_name or self._has_marker(secret_name):
            raise ValueError(f"invalid secret name '{secret_name}'")
        if not key or self._has_marker(key):
            raise ValueError(f"invalid secret key '{key}'")
        return f"{self.PREFIX}{secret_name}_{key}{self.SUFFIX}"

    def _has_marker(self, value: str) -> bool:
        return any(c in value for c in self.PREFIX + self.SUFFIX)

    def find_all(self, text: str) -> List[str]:
        return [m.group(0) for m in self._pattern.finditer(text)]

    def decode(self, token: str) -> SecretReference:
        match = self._pattern.fullmatch(token)
        if match is None:
            raise ValueError(f"not a secret reference: '{token}'")
        return SecretReference(secret_name=match.group(1), key=match.group(2))


DEFAULT_CODEC = MarkerSecretReferenceCodec()


__all__ = [
    "SecretReference",
    "SecretReferenceCodec",
    "MarkerSecretReferenceCodec",
    "DEFAULT_CODEC",
]
