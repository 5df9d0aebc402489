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
Unit tests for application configuration loading.
"""

import pytest

from score_files import config as config_module
from score_files.config import AppConfig, load_config


class TestAppConfig:
    """AppConfig loading tests"""

    def test_from_file_reads_test_config(self, test_config_path):
        app_config = AppConfig.from_file(str(test_config_path))

        assert app_config.server.host == "127.0.0.1"
        assert app_config.server.log_level == "debug"
        assert app_config.converter.default_name_prefix == "test-workload-"

    def test_missing_file_yields_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)

        app_config = load_config(str(tmp_path / "absent.toml"))

        assert app_config == AppConfig()
        assert app_config.server.port == 8080
        assert config_module.get_config() is app_config

    def test_invalid_toml_raises_value_error(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[server\nport = 1")

        with pytest.raises(ValueError, match="Invalid TOML"):
            AppConfig.from_file(str(path))

    def test_invalid_log_level_raises_value_error(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[server]\nlog_level = "loud"\n')

        with pytest.raises(ValueError, match="Invalid configuration"):
            AppConfig.from_file(str(path))


class TestProjectMetadata:
    """pyproject.toml sanity tests"""

    def test_pyproject_parses_and_configures_pytest(self):
        import tomllib
        from pathlib import Path

        pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)

        assert data["project"]["name"] == "score-files"
        assert data["tool"]["pytest"]["ini_options"]["pythonpath"] == ["."]
