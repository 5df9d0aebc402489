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


"""Shared constants for container file conversion."""

# Derived identity: "file-" + first HASH_WIDTH hex digits of sha256(mount path).
FILE_NAME_PREFIX = "file-"
FILE_NAME_HASH_WIDTH = 10
# Key under which plain content is stored in the generated ConfigMap.
CONFIG_MAP_FILE_KEY = "file"

class ContainerFileErrorCodes:
    """Canonical error codes for container file conversion."""

    INVALID_MODE = "CONTAINER_FILE::INVALID_MODE"
    MISSING_CONTENT = "CONTAINER_FILE::MISSING_CONTENT"
    SOURCE_UNREADABLE = "CONTAINER_FILE::SOURCE_UNREADABLE"
    EXPANSION_FAILED = "CONTAINER_FILE::EXPANSION_FAILED"
    MIXED_CONTENT = "CONTAINER_FILE::MIXED_CONTENT"
    INVALID_CONTENT = "CONTAINER_FILE::INVALID_CONTENT"


__all__ = [
    "FILE_NAME_PREFIX",
    "FILE_NAME_HASH_WIDTH",
    "CONFIG_MAP_FILE_KEY",
    "ContainerFileErrorCodes",
]
