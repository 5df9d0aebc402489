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
Placeholder expansion for container file content.

Replaces ``${a.b.c}`` references with values looked up in a nested mapping.
``$$`` is an escaped ``$``. Placeholders that resolve to a Kubernetes Secret
are substituted with an encoded secret reference token rather than the
secret value itself.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional

from score_files.services.secret_refs import (
    DEFAULT_CODEC,
    SecretReference,
    SecretReferenceCodec,
)

logger = logging.getLogger(__name__)

# "$$" escape, "${ref}" placeholder, or a dangling "${" with no closing brace
_PLACEHOLDER_RE = re.compile(r"\$(\$|\{([^}]*)\}|\{)")


class PlaceholderError(ValueError):
    """Raised when a placeholder cannot be resolved."""


class Expander(ABC):
    """Capability interface for expanding placeholders in raw file content."""

    @abstractmethod
    def expand(self, raw: str) -> str:
        """
        Expand placeholders in ``raw``.

        Raises:
            Exception: Any failure; the converter reports it against ``content``
        """
        pass


class CallableExpander(Expander):
    """Adapts a plain ``(str) -> str`` function to the Expander interface."""

    def __init__(self, func: Callable[[str], str]):
        self._func = func

    def expand(self, raw: str) -> str:
        return self._func(raw)


def as_expander(expander) -> Optional[Expander]:
    """Normalize None, an Expander, or a callable into an Optional[Expander]."""
    if expander is None or isinstance(expander, Expander):
        return expander
    if callable(expander):
        return CallableExpander(expander)
    raise TypeError(f"expected an Expander or callable, got {type(expander).__name__}")


class PlaceholderExpander(Expander):
    """
    Expands ``${...}`` placeholders from a mapping of values.

    Args:
        values: Nested mapping that placeholder paths are looked up in
        secrets: Placeholder paths that resolve to Secret keys
        codec: Codec used to encode secret references
    """

    def __init__(
        self,
        values: Mapping[str, Any],
        secrets: Optional[Dict[str, SecretReference]] = None,
        codec: SecretReferenceCodec = DEFAULT_CODEC,
    ):
        self.values = values
        self.secrets = secrets or {}
        self.codec = codec

    def expand(self, raw: str) -> str:
        return _PLACEHOLDER_RE.sub(self._replace, raw)

    def _replace(self, match: "re.Match") -> str:
        if match.group(1) == "$":
            return "$"
        ref = match.group(2)
        if ref is None:
            raise PlaceholderError(f"unterminated placeholder at offset {match.start()}")
        return self.resolve(ref)

    def resolve(self, ref: str) -> str:
        """Resolve a single dotted placeholder path to its substitution string."""
        if ref in self.secrets:
            secret = self.secrets[ref]
            logger.debug("Placeholder '%s' resolved to secret '%s'", ref, secret.secret_name)
            return self.codec.encode(secret.secret_name, secret.key)

        value: Any = self.values
        for part in ref.split("."):
            if isinstance(value, Mapping):
                if part not in value:
                    raise PlaceholderError(f"invalid ref '{ref}': key '{part}' not found")
                value = value[part]
            elif isinstance(value, (list, tuple)):
                try:
                    value = value[int(part)]
                except (ValueError, IndexError):
                    raise PlaceholderError(
                        f"invalid ref '{ref}': invalid list index '{part}'"
                    ) from None
            else:
                raise PlaceholderError(f"invalid ref '{ref}': '{part}' is not a map or list")

        if isinstance(value, SecretReference):
            return self.codec.encode(value.secret_name, value.key)
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return ""
        if isinstance(value, (Mapping, list, tuple)):
            raise PlaceholderError(f"invalid ref '{ref}': cannot interpolate non-scalar value")
        return str(value)


__all__ = [
    "Expander",
    "CallableExpander",
    "PlaceholderExpander",
    "PlaceholderError",
    "as_expander",
]
