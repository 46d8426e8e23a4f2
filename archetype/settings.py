"""Runtime settings — layered from defaults, project config, .env and environment."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from archetype.config import DEFAULT_OUTPUT_DIR, DEFAULT_TEMPLATE_ID

logger = logging.getLogger(__name__)

CONFIG_DIR = ".archetype"

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "ARCHETYPE_OUTPUT_DIR": {
        "default": str(DEFAULT_OUTPUT_DIR),
        "description": "Directory generated files are written to",
    },
    "ARCHETYPE_TEMPLATE": {
        "default": DEFAULT_TEMPLATE_ID,
        "description": "Template used when the manifest names none",
    },
    "ARCHETYPE_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "ARCHETYPE_PARALLEL": {
        "default": "false",
        "description": "Generate entities in a thread pool",
    },
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Resolved runtime settings."""

    model_config = ConfigDict(frozen=True)

    output_dir: Path = DEFAULT_OUTPUT_DIR
    template: str = DEFAULT_TEMPLATE_ID
    log_level: str = "INFO"
    parallel: bool = False
    project_root: Path = Field(default_factory=Path)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("parallel", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_VALUES
        return value

    @property
    def resolved_output_dir(self) -> Path:
        """Output directory; relative paths are taken from the project root."""
        if self.output_dir.is_absolute():
            return self.output_dir
        return self.project_root / self.output_dir


def load_config(project_root: str | Path = ".") -> dict[str, str]:
    """Load merged config: defaults -> .archetype/config.json -> .env -> env vars.

    Returns a flat dict of configuration values keyed by variable name.
    """
    root = Path(project_root)
    config: dict[str, str] = {}

    # 1. Defaults
    for key, info in _CONFIG_KEYS.items():
        config[key] = str(info["default"])

    # 2. .archetype/config.json
    config_json = root / CONFIG_DIR / "config.json"
    if config_json.is_file():
        try:
            data = json.loads(config_json.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning("Could not read %s; ignoring it", config_json, exc_info=True)
        else:
            if isinstance(data, dict):
                for k, v in data.items():
                    config[k] = str(v).lower() if isinstance(v, bool) else str(v)
            else:
                logger.warning("%s must hold a JSON object; ignoring it", config_json)

    # 3. .env file
    env_file = root / ".env"
    if env_file.is_file():
        for line in env_file.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                k, v = line.split("=", 1)
                config[k.strip()] = v.strip().strip('"').strip("'")

    # 4. Environment variables override all
    for key in _CONFIG_KEYS:
        env_val = os.environ.get(key)
        if env_val is not None:
            config[key] = env_val

    return config


def load_settings(project_root: str | Path = ".") -> Settings:
    """Resolve :class:`Settings` for *project_root*."""
    config = load_config(project_root)
    return Settings(
        output_dir=Path(config["ARCHETYPE_OUTPUT_DIR"]),
        template=config["ARCHETYPE_TEMPLATE"],
        log_level=config["ARCHETYPE_LOG_LEVEL"],
        parallel=config["ARCHETYPE_PARALLEL"],
        project_root=Path(project_root),
    )


def generate_env_template(project_root: str | Path) -> Path:
    """Create .env.example with all config keys.

    Returns the path to the generated file.
    """
    root = Path(project_root)
    env_path = root / ".env.example"

    lines = ["# archetype configuration", "# Copy to .env and adjust values", ""]
    for key, info in _CONFIG_KEYS.items():
        lines.append(f"# {info['description']}")
        lines.append(f"{key}={info['default']}")
        lines.append("")

    env_path.write_text("\n".join(lines), encoding="utf-8")
    return env_path


def apply_log_level(settings: Settings) -> None:
    """Set the level of the ``archetype`` logger; handlers are left to the application."""
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        logger.warning("Unknown log level %r; keeping INFO", settings.log_level)
        level = logging.INFO
    logging.getLogger("archetype").setLevel(level)
