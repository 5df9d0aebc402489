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
Pytest configuration and fixtures for container file conversion tests.
"""

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

TEST_CONFIG_PATH = Path(__file__).resolve().parent / "testdata" / "config.toml"
os.environ.setdefault("SCORE_FILES_CONFIG_PATH", str(TEST_CONFIG_PATH))

from score_files.main import app  # noqa: E402
from score_files.services.secret_refs import DEFAULT_CODEC  # noqa: E402


@pytest.fixture(scope="function")
def client() -> TestClient:
    """
    Fixture providing a FastAPI test client.
    """
    return TestClient(app)


@pytest.fixture(scope="session")
def test_config_path() -> Path:
    return TEST_CONFIG_PATH


@pytest.fixture(scope="session")
def default_secret_expander():
    """
    Expander that replaces any content with a reference to key 'key' of Secret 'default'.
    """
    return lambda s: DEFAULT_CODEC.encode("default", "key")
