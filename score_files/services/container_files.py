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
Conversion of a single container file into Kubernetes objects.

A container file is either plain content, delivered through a generated
ConfigMap, or exactly one secret reference, delivered by mounting a key of
an existing Secret. Files mixing the two are rejected.
"""

import base64
import hashlib
import logging
import os
import posixpath
import re
from dataclasses import dataclass
from typing import Callable, Optional

from kubernetes.client import (
    V1ConfigMap,
    V1ConfigMapVolumeSource,
    V1KeyToPath,
    V1ObjectMeta,
    V1SecretVolumeSource,
    V1Volume,
    V1VolumeMount,
)

from score_files.api.schema import ContainerFile
from score_files.services.constants import (
    CONFIG_MAP_FILE_KEY,
    FILE_NAME_HASH_WIDTH,
    FILE_NAME_PREFIX,
    ContainerFileErrorCodes,
)
from score_files.services.placeholders import as_expander
from score_files.services.secret_refs import DEFAULT_CODEC, SecretReferenceCodec

logger = logging.getLogger(__name__)

_OCTAL_RE = re.compile(r"[+-]?[0-7]+")
_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1


class ContainerFileError(ValueError):
    """
    Conversion failure attributed to one field of the container file.

    Attributes:
        field: The offending input, one of ``mode``, ``content`` or ``source``
        code: Canonical code from ContainerFileErrorCodes
        message: Human-readable message, also returned by ``str()``
    """

    def __init__(self, field: str, code: str, message: str):
        super().__init__(message)
        self.field = field
        self.code = code
        self.message = message


@dataclass
class ContainerFileResources:
    """
    Objects realizing one container file.

    ``config_map`` is None when the file is backed by a Secret.
    """

    volume_mount: V1VolumeMount
    config_map: Optional[V1ConfigMap]
    volume: V1Volume

    def __iter__(self):
        return iter((self.volume_mount, self.config_map, self.volume))


def read_file_bytes(path: str) -> bytes:
    """Default filesystem read primitive."""
    with open(path, "rb") as f:
        return f.read()


def derive_file_name(mount_path: str) -> str:
    """
    Derive the volume and resource name for a mount path.

    The name is a pure function of the path. Truncating the digest means two
    paths may collide; that risk is accepted.
    """
    digest = hashlib.sha256(mount_path.encode("utf-8")).hexdigest()
    return FILE_NAME_PREFIX + digest[:FILE_NAME_HASH_WIDTH]


def parse_mode(value: str) -> int:
    """
    Parse an octal file mode into a 32-bit signed integer.

    Raises:
        ValueError: If ``value`` is not plain octal digits or is out of range
    """
    if not _OCTAL_RE.fullmatch(value):
        raise ValueError(f"invalid literal for int() with base 8: {value!r}")
    mode = int(value, 8)
    if mode < _INT32_MIN or mode > _INT32_MAX:
        raise ValueError(f"value out of range: {value!r}")
    return mode


def _clean_path(path: str) -> str:
    # normpath keeps a leading "//", a lexical clean collapses it
    cleaned = os.path.normpath(path) if path else "."
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def resolve_source_path(source: str, base_path: Optional[str] = None) -> str:
    """
    Resolve a ``source`` path.

    Relative paths are taken relative to the directory containing
    ``base_path`` when one is given. Absolute paths are returned untouched.
    """
    if base_path is None or os.path.isabs(source):
        return source
    return _clean_path(os.path.join(os.path.dirname(base_path), source))


def _mount_dir(mount_path: str) -> str:
    return _clean_path(posixpath.dirname(mount_path))


def _mount_base(mount_path: str) -> str:
    stripped = mount_path.rstrip("/")
    if not stripped:
        return "/" if mount_path else "."
    return posixpath.basename(stripped)


def _encode_content(text: str) -> bytes:
    # surrogateescape restores bytes that were decoded for expansion
    try:
        return text.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError as e:
        raise ContainerFileError(
            "content",
            ContainerFileErrorCodes.INVALID_CONTENT,
            f"content: {e}",
        ) from e


def _load_content(
    file: ContainerFile,
    base_path: Optional[str],
    read_file: Callable[[str], bytes],
) -> bytes:
    if file.content is not None:
        return _encode_content(file.content)
    if file.source is not None:
        source_path = resolve_source_path(file.source, base_path)
        logger.debug("Reading container file source from %s", source_path)
        try:
            return read_file(source_path)
        except OSError as e:
            raise ContainerFileError(
                "source",
                ContainerFileErrorCodes.SOURCE_UNREADABLE,
                f"source: failed to read file '{source_path}': {e}",
            ) from e
    raise ContainerFileError(
        "content",
        ContainerFileErrorCodes.MISSING_CONTENT,
        "missing 'content' or 'source'",
    )


def convert_container_file(
    mount_path: str,
    file: ContainerFile,
    name_prefix: str,
    base_path: Optional[str] = None,
    expander=None,
    codec: SecretReferenceCodec = DEFAULT_CODEC,
    read_file: Callable[[str], bytes] = read_file_bytes,
) -> ContainerFileResources:
    """
    Convert a container file into a volume mount, volume and optional ConfigMap.

    Args:
        mount_path: Absolute path of the file inside the container
        file: The container file specification
        name_prefix: Prefix applied to the generated ConfigMap name
        base_path: Path of the file that declared this container file, used
            to resolve a relative ``source``
        expander: Expander or ``(str) -> str`` callable; None disables expansion
        codec: Codec used to detect and decode secret references
        read_file: Filesystem read primitive

    Returns:
        ContainerFileResources: The mount, the ConfigMap (None when backed by
        a Secret) and the volume

    Raises:
        ContainerFileError: If the mode is invalid, content is missing or
            unreadable, expansion fails, or secrets are mixed with raw content
    """
    mode = None
    if file.mode is not None:
        try:
            mode = parse_mode(file.mode)
        except ValueError as e:
            raise ContainerFileError(
                "mode",
                ContainerFileErrorCodes.INVALID_MODE,
                f"mode: failed to parse '{file.mode}': {e}",
            ) from e

    content = _load_content(file, base_path, read_file)

    name = derive_file_name(mount_path)
    mount = V1VolumeMount(name=name, mount_path=_mount_dir(mount_path))
    file_name = _mount_base(mount_path)

    expander = as_expander(expander)
    if not file.no_expand and expander is not None:
        try:
            expanded = expander.expand(content.decode("utf-8", errors="surrogateescape"))
        except Exception as e:
            raise ContainerFileError(
                "content",
                ContainerFileErrorCodes.EXPANSION_FAILED,
                f"content: {e}",
            ) from e

        refs = codec.find_all(expanded)
        if len(refs) == 1 and refs[0] == expanded:
            secret = codec.decode(expanded)
            logger.debug(
                "Container file %s mounted from secret %s key %s",
                mount_path,
                secret.secret_name,
                secret.key,
            )
            volume = V1Volume(
                name=name,
                secret=V1SecretVolumeSource(
                    secret_name=secret.secret_name,
                    items=[V1KeyToPath(key=secret.key, path=file_name, mode=mode)],
                ),
            )
            return ContainerFileResources(volume_mount=mount, config_map=None, volume=volume)
        if refs:
            raise ContainerFileError(
                "content",
                ContainerFileErrorCodes.MIXED_CONTENT,
                "content: contained a mix of secret references and raw content",
            )
        content = _encode_content(expanded)

    config_map_name = name_prefix + name
    logger.debug("Container file %s mounted from config map %s", mount_path, config_map_name)
    config_map = V1ConfigMap(
        api_version="v1",
        kind="ConfigMap",
        metadata=V1ObjectMeta(name=config_map_name),
        binary_data={CONFIG_MAP_FILE_KEY: base64.b64encode(content).decode("ascii")},
    )
    volume = V1Volume(
        name=name,
        config_map=V1ConfigMapVolumeSource(
            name=config_map_name,
            items=[V1KeyToPath(key=CONFIG_MAP_FILE_KEY, path=file_name, mode=mode)],
        ),
    )
    return ContainerFileResources(volume_mount=mount, config_map=config_map, volume=volume)


__all__ = [
    "ContainerFileError",
    "ContainerFileResources",
    "convert_container_file",
    "derive_file_name",
    "parse_mode",
    "read_file_bytes",
    "resolve_source_path",
]
