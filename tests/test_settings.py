"""Tests for layered runtime settings."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from archetype.config import DEFAULT_TEMPLATE_ID
from archetype.settings import (
    Settings,
    apply_log_level,
    generate_env_template,
    load_config,
    load_settings,
)

KEYS = ("ARCHETYPE_OUTPUT_DIR", "ARCHETYPE_TEMPLATE", "ARCHETYPE_LOG_LEVEL", "ARCHETYPE_PARALLEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_config(root: Path, data) -> None:
    config_dir = root / ".archetype"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(json.dumps(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# Layering
# ---------------------------------------------------------------------------

class TestLoadConfig:

    def test_defaults(self, tmp_path: Path):
        config = load_config(tmp_path)
        assert config["ARCHETYPE_TEMPLATE"] == DEFAULT_TEMPLATE_ID
        assert config["ARCHETYPE_LOG_LEVEL"] == "INFO"
        assert config["ARCHETYPE_PARALLEL"] == "false"

    def test_config_json_overrides_defaults(self, tmp_path: Path):
        _write_config(tmp_path, {"ARCHETYPE_TEMPLATE": "custom", "ARCHETYPE_PARALLEL": True})
        config = load_config(tmp_path)
        assert config["ARCHETYPE_TEMPLATE"] == "custom"
        assert config["ARCHETYPE_PARALLEL"] == "true"

    def test_env_file_overrides_config_json(self, tmp_path: Path):
        _write_config(tmp_path, {"ARCHETYPE_TEMPLATE": "custom"})
        (tmp_path / ".env").write_text(
            "# local\nARCHETYPE_TEMPLATE='from-dotenv'\n\nnot a setting\n",
            encoding="utf-8",
        )
        assert load_config(tmp_path)["ARCHETYPE_TEMPLATE"] == "from-dotenv"

    def test_environment_wins(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".env").write_text("ARCHETYPE_LOG_LEVEL=DEBUG\n", encoding="utf-8")
        monkeypatch.setenv("ARCHETYPE_LOG_LEVEL", "WARNING")
        assert load_config(tmp_path)["ARCHETYPE_LOG_LEVEL"] == "WARNING"

    def test_corrupt_config_json_is_ignored(self, tmp_path: Path, caplog):
        config_dir = tmp_path / ".archetype"
        config_dir.mkdir()
        (config_dir / "config.json").write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="archetype.settings"):
            config = load_config(tmp_path)
        assert config["ARCHETYPE_TEMPLATE"] == DEFAULT_TEMPLATE_ID
        assert "Could not read" in caplog.text

    def test_non_object_config_json_is_ignored(self, tmp_path: Path, caplog):
        _write_config(tmp_path, ["ARCHETYPE_TEMPLATE"])
        with caplog.at_level(logging.WARNING, logger="archetype.settings"):
            load_config(tmp_path)
        assert "must hold a JSON object" in caplog.text


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:

    def test_load_settings(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("ARCHETYPE_OUTPUT_DIR", "build/out")
        monkeypatch.setenv("ARCHETYPE_PARALLEL", "yes")
        settings = load_settings(tmp_path)
        assert settings.parallel is True
        assert settings.resolved_output_dir == tmp_path / "build" / "out"

    @pytest.mark.parametrize("value,expected", [
        ("1", True),
        ("On", True),
        ("false", False),
        ("", False),
        (True, True),
    ])
    def test_parallel_flag(self, value, expected):
        assert Settings(parallel=value).parallel is expected

    def test_absolute_output_dir_kept(self, tmp_path: Path):
        settings = Settings(output_dir=tmp_path / "out", project_root=Path("/elsewhere"))
        assert settings.resolved_output_dir == tmp_path / "out"

    def test_log_level_uppercased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"


class TestEnvTemplate:

    def test_lists_every_key(self, tmp_path: Path):
        path = generate_env_template(tmp_path)
        assert path == tmp_path / ".env.example"
        content = path.read_text(encoding="utf-8")
        for key in KEYS:
            assert f"{key}=" in content

    def test_template_is_loadable_as_env(self, tmp_path: Path):
        path = generate_env_template(tmp_path)
        path.rename(tmp_path / ".env")
        assert load_config(tmp_path)["ARCHETYPE_TEMPLATE"] == DEFAULT_TEMPLATE_ID


class TestApplyLogLevel:

    def test_sets_package_logger(self):
        package_logger = logging.getLogger("archetype")
        previous = package_logger.level
        try:
            apply_log_level(Settings(log_level="debug"))
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.setLevel(previous)

    def test_unknown_level_falls_back_to_info(self, caplog):
        package_logger = logging.getLogger("archetype")
        previous = package_logger.level
        try:
            with caplog.at_level(logging.WARNING, logger="archetype.settings"):
                apply_log_level(Settings(log_level="chatty"))
            assert package_logger.level == logging.INFO
            assert "Unknown log level" in caplog.text
        finally:
            package_logger.setLevel(previous)
