# Copyright 2026 Firefly Software Solutions Inc.
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
"""Tests for CLI commands."""

from __future__ import annotations

import os
from pathlib import Path

from click.testing import CliRunner

from liftoff.cli.main import cli


class TestCLI:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "run" in result.output
        assert "info" in result.output


class TestInfoCommand:
    def test_shows_framework_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["info"])
        assert result.exit_code == 0, result.output
        assert "3000" in result.output
        assert "enabled" in result.output

    def test_reads_config_file(self, tmp_path: Path):
        config_file = tmp_path / "liftoff.yaml"
        config_file.write_text("liftoff:\n  application:\n    port: 8123\n    auto-listen: false\n")
        result = CliRunner().invoke(cli, ["info", "--config", str(config_file)])
        assert result.exit_code == 0, result.output
        assert "8123" in result.output
        assert "disabled" in result.output


class TestRunCommand:
    def test_requires_app(self):
        result = CliRunner().invoke(cli, ["run"])
        assert result.exit_code != 0
        assert "--app" in result.output

    def test_rejects_malformed_app_path(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["run", "--app", "no_colon_here", "--port", "3000"])
        assert result.exit_code == 2
        assert "module:attribute" in result.output

    def test_rejects_missing_module(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["run", "--app", "liftoff_missing_module:app", "--port", "3000"])
        assert result.exit_code == 2
        assert "cannot import" in result.output

    def test_auto_listen_flag_sets_environment(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LIFTOFF_APPLICATION_AUTO_LISTEN", "true")
        CliRunner().invoke(cli, ["run", "--app", "liftoff_missing_module:app", "--port", "3000", "--no-auto-listen"])
        assert os.environ["LIFTOFF_APPLICATION_AUTO_LISTEN"] == "false"
