"""Tests for stamp configuration files."""

import os

import pytest

from gitstamp.core.config import OutputFormat, StampConfig, find_config
from gitstamp.core.errors import ConfigError
from gitstamp.core.resolver import PathTarget


class TestStampConfigParsing:
    def test_defaults(self):
        config = StampConfig.from_yaml("")

        assert config.targets == []
        assert config.remote == "origin"
        assert config.format == OutputFormat.JSON
        assert config.env_prefix == "GITSTAMP_"

    def test_full_config(self):
        config = StampConfig.from_yaml(
            """
targets:
  - path: src
    include_subdirs: true
  - path: "docs/*.md"
remote: upstream
format: env
env_prefix: BUILD_
"""
        )

        assert config.targets == [
            PathTarget(path="src", include_subdirs=True),
            PathTarget(path="docs/*.md"),
        ]
        assert config.remote == "upstream"
        assert config.format == OutputFormat.ENV
        assert config.env_prefix == "BUILD_"

    def test_bare_string_targets(self):
        config = StampConfig.from_yaml("targets: [README.md, 'lib/*.py']")

        assert [t.path for t in config.targets] == ["README.md", "lib/*.py"]
        assert all(t.include_subdirs is False for t in config.targets)

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError, match="invalid YAML"):
            StampConfig.from_yaml("targets: [unclosed")

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="mapping"):
            StampConfig.from_yaml("- just\n- a list\n")

    def test_invalid_format(self):
        with pytest.raises(ConfigError, match="invalid configuration"):
            StampConfig.from_yaml("format: xml")


class TestStampConfigLoading:
    def test_relative_targets_anchor_at_config_dir(self, tmp_path):
        config_path = tmp_path / "gitstamp.yaml"
        config_path.write_text(
            f"targets:\n  - path: src\n  - path: {tmp_path / 'abs.txt'}\n"
        )

        config = StampConfig.load(config_path)

        assert config.targets[0].path == os.path.join(str(tmp_path), "src")
        assert config.targets[1].path == str(tmp_path / "abs.txt")

    def test_include_subdirs_survives_anchoring(self, tmp_path):
        config_path = tmp_path / "gitstamp.yaml"
        config_path.write_text("targets:\n  - path: src\n    include_subdirs: true\n")

        config = StampConfig.load(config_path)

        assert config.targets[0].include_subdirs is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read"):
            StampConfig.load(tmp_path / "missing.yaml")


class TestFindConfig:
    def test_found(self, tmp_path):
        (tmp_path / "gitstamp.yaml").write_text("remote: origin\n")
        assert find_config(tmp_path) == tmp_path / "gitstamp.yaml"

    def test_absent(self, tmp_path):
        assert find_config(tmp_path) is None

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "gitstamp.yaml").write_text("remote: origin\n")
        monkeypatch.chdir(tmp_path)
        assert find_config() is not None
