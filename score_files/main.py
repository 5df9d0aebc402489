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
HTTP entry point for container file conversion.

Exposes ``POST /container-files/convert`` and ``GET /health``. Conversion
errors reach clients as ``{"code": ..., "message": ...}``.
"""

import copy
import logging.config
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.responses import JSONResponse
from uvicorn.config import LOGGING_CONFIG as UVICORN_LOGGING_CONFIG

from score_files import __version__
from score_files.config import AppConfig, load_config

LOG_FORMAT = "%(levelprefix)s %(asctime)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S%z"


def build_log_config(app_config: AppConfig) -> Dict[str, Any]:
    """
    Derive a dictConfig from uvicorn's defaults.

    uvicorn and ``score_files.*`` loggers share one format; the project
    logger level comes from ``server.log_level``.
    """
    log_config = copy.deepcopy(UVICORN_LOGGING_CONFIG)
    for formatter in ("default", "access"):
        log_config["formatters"][formatter]["fmt"] = LOG_FORMAT
        log_config["formatters"][formatter]["datefmt"] = LOG_DATE_FORMAT
    log_config["loggers"]["score_files"] = {
        "handlers": ["default"],
        "level": app_config.server.log_level.upper(),
        "propagate": False,
    }
    return log_config


app_config = load_config()
log_config = build_log_config(app_config)
logging.config.dictConfig(log_config)

from score_files.api.routes import router  # noqa: E402

app = FastAPI(
    title="Container File Conversion API",
    version=__version__,
    description="Converts container file specifications into Kubernetes "
                "volume mounts, volumes and ConfigMaps.",
)
app.state.config = app_config
app.include_router(router)
app.include_router(router, prefix="/v1")

UNKNOWN_ERROR_CODE = "CONTAINER_FILE::UNKNOWN_ERROR"


def error_body(detail: Any) -> Dict[str, str]:
    """Shape an HTTPException detail as an ErrorResponse body."""
    if isinstance(detail, dict) and detail.get("code") and detail.get("message"):
        return {"code": detail["code"], "message": detail["message"]}
    return {"code": UNKNOWN_ERROR_CODE, "message": str(detail or "unexpected error")}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=exc.headers,
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "score_files.main:app",
        host=app_config.server.host,
        port=app_config.server.port,
        log_config=log_config,
    )
