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
Pydantic schemas for container file conversion.

This module defines the container file specification and the request and
response models of the conversion API.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Container File
# ============================================================================

class ContainerFile(BaseModel):
    """
    A file to be mounted into a workload's container.

    Content is taken from ``content`` when set, otherwise read from
    ``source``. A file with neither is accepted here and rejected at
    conversion time.
    """
    mode: Optional[str] = Field(
        None,
        description="Octal file permission applied to the mounted file",
        examples=["0644", "755"],
    )
    content: Optional[str] = Field(
        None,
        description="Literal file content",
    )
    source: Optional[str] = Field(
        None,
        description="Path of a local file to read the content from. Relative paths "
                    "are resolved against the directory of the declaring file.",
        examples=["./config/app.yaml"],
    )
    no_expand: Optional[bool] = Field(
        None,
        alias="noExpand",
        description="Skip placeholder expansion even if the content contains placeholders",
    )

    model_config = {"populate_by_name": True}


# ============================================================================
# Conversion
# ============================================================================

class SecretKeyRef(BaseModel):
    """
    Reference to a key of an existing Kubernetes Secret.
    """
    name: str = Field(..., description="Secret name")
    key: str = Field(..., description="Key within the Secret")


class ConvertContainerFileRequest(BaseModel):
    """
    Request to convert a single container file.
    """
    mount_path: str = Field(
        ...,
        alias="mountPath",
        description="Absolute path inside the container where the file will appear",
        examples=["/etc/app/config.yaml"],
    )
    file: ContainerFile = Field(..., description="Container file specification")
    name_prefix: Optional[str] = Field(
        None,
        alias="namePrefix",
        description="Prefix applied to the generated ConfigMap name. "
                    "Falls back to the configured default when omitted.",
        examples=["my-workload-c1-"],
    )
    base_path: Optional[str] = Field(
        None,
        alias="basePath",
        description="Path of the declaring file, used to resolve a relative source",
    )
    values: Optional[Dict[str, Any]] = Field(
        None,
        description="Values for ${...} placeholders. Expansion is disabled when omitted.",
    )
    secrets: Optional[Dict[str, SecretKeyRef]] = Field(
        None,
        description="Placeholder paths that resolve to Secret keys",
    )

    @field_validator('mount_path')
    @classmethod
    def validate_mount_path(cls, v: str) -> str:
        """Validate that mount_path is absolute and not empty."""
        if not v or not v.strip():
            raise ValueError("mount_path cannot be empty")
        if not v.startswith('/'):
            raise ValueError("mount_path must be an absolute path starting with '/'")
        return v

    model_config = {"populate_by_name": True}


class ConvertContainerFileResponse(BaseModel):
    """
    Kubernetes objects realizing a container file, in API (camelCase) form.
    """
    volume_mount: Dict[str, Any] = Field(..., alias="volumeMount")
    config_map: Optional[Dict[str, Any]] = Field(
        None,
        alias="configMap",
        description="Generated ConfigMap, null when the file is backed by a Secret",
    )
    volume: Dict[str, Any] = Field(..., description="Pod volume backing the mount")

    model_config = {"populate_by_name": True}


# ============================================================================
# Error Response
# ============================================================================

class ErrorResponse(BaseModel):
    """
    Standard error response for all non-2xx HTTP responses.
    """
    code: str = Field(
        ...,
        description="Machine-readable error code (e.g., CONTAINER_FILE::INVALID_MODE)",
    )
    message: str = Field(
        ...,
        description="Human-readable error message describing what went wrong",
    )
