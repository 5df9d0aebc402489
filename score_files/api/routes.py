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
API routes for container file conversion.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from kubernetes.client import ApiClient

from score_files.api.schema import (
    ConvertContainerFileRequest,
    ConvertContainerFileResponse,
    ErrorResponse,
)
from score_files.config import get_config
from score_files.services.container_files import ContainerFileError, convert_container_file
from score_files.services.placeholders import PlaceholderExpander
from score_files.services.secret_refs import SecretReference

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ContainerFiles"])

# Only sanitize_for_serialization is used; it needs no cluster configuration.
_api_client = ApiClient()


@router.post(
    "/container-files/convert",
    response_model=ConvertContainerFileResponse,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponse}},
)
def convert(request: ConvertContainerFileRequest) -> ConvertContainerFileResponse:
    """
    Convert a container file into a volume mount, a volume and an optional ConfigMap.

    Placeholder expansion runs only when ``values`` or ``secrets`` are supplied.

    Raises:
        HTTPException: 400 if the container file cannot be converted
    """
    expander = None
    if request.values is not None or request.secrets is not None:
        secrets = {
            path: SecretReference(secret_name=ref.name, key=ref.key)
            for path, ref in (request.secrets or {}).items()
        }
        expander = PlaceholderExpander(request.values or {}, secrets=secrets)

    name_prefix = request.name_prefix
    if name_prefix is None:
        name_prefix = get_config().converter.default_name_prefix

    try:
        mount, config_map, volume = convert_container_file(
            request.mount_path,
            request.file,
            name_prefix,
            base_path=request.base_path,
            expander=expander,
        )
    except ContainerFileError as e:
        logger.warning(f"Failed to convert container file {request.mount_path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": e.code, "message": e.message},
        ) from e

    return ConvertContainerFileResponse(
        volume_mount=_api_client.sanitize_for_serialization(mount),
        config_map=_api_client.sanitize_for_serialization(config_map),
        volume=_api_client.sanitize_for_serialization(volume),
    )
