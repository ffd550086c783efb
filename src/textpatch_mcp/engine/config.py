"""Engine configuration.

Each PatchEngine receives an explicit EngineConfig; there is no process-wide
workspace root. The MCP server builds one at startup with EngineConfigLoader.

Configuration file location priority:
1. Explicit path passed to EngineConfigLoader
2. TEXTPATCH_CONFIG environment variable
3. Standard location: ~/.textpatch/config.yml
4. Built-in defaults (if no config file found)

Environment overrides (applied on top of the file):
- TEXTPATCH_WORKSPACE_PATH (fallback: WORKSPACE_PATH): workspace root
- TEXTPATCH_MAX_OPERATIONS: operations per request, clamped to 1-1000

Example config file:
```yaml
workspace_root: ~/projects/service
max_operations: 10
default_create_backup: true
backup_marker: ".backup."
max_file_size_bytes: 5000000
```
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

MIN_OPERATIONS = 1
MAX_OPERATIONS = 1000


class EngineConfig(BaseModel):
    """Settings for one PatchEngine instance."""

    workspace_root: Path = Field(
        default_factory=Path.cwd,
        description="Directory outside of which no file access is permitted",
    )
    max_operations: int = Field(
        default=20,
        ge=MIN_OPERATIONS,
        le=MAX_OPERATIONS,
        description="Maximum operations accepted in one request",
    )
    default_create_backup: bool = Field(
        default=True,
        description="Backup default for callers that do not specify create_backup",
    )
    backup_marker: str = Field(
        default=".backup.",
        min_length=1,
        description="Marker between the file name and the backup timestamp",
    )
    max_file_size_bytes: int | None = Field(
        default=None,
        ge=1,
        description="Refuse to load files larger than this (None = no limit)",
    )

    @field_validator("workspace_root", mode="before")
    @classmethod
    def expand_workspace_root(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    @field_validator("backup_marker")
    @classmethod
    def validate_backup_marker(cls, v: str) -> str:
        if "/" in v or "\\" in v:
            raise ValueError(f"backup_marker must not contain path separators: {v!r}")
        return v


def get_max_operations_override() -> int | None:
    """Read TEXTPATCH_MAX_OPERATIONS, clamped to the allowed range.

    Returns:
        Clamped value, or None if unset or not an integer
    """
    raw = os.getenv("TEXTPATCH_MAX_OPERATIONS")
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer TEXTPATCH_MAX_OPERATIONS: {raw!r}")
        return None
    return max(MIN_OPERATIONS, min(MAX_OPERATIONS, value))


def get_workspace_override() -> Path | None:
    """Workspace root from TEXTPATCH_WORKSPACE_PATH, falling back to WORKSPACE_PATH."""
    raw = os.getenv("TEXTPATCH_WORKSPACE_PATH") or os.getenv("WORKSPACE_PATH")
    if not raw:
        return None
    return Path(raw).expanduser()


class EngineConfigLoader:
    """Loads EngineConfig from YAML plus environment overrides.

    Usage:
        ```python
        loader = EngineConfigLoader()
        config = loader.load_config()
        engine = PatchEngine(config)
        ```

    The loaded config is cached; call load_config() once at startup.
    """

    def __init__(self, config_path: str | Path | None = None):
        self._config: EngineConfig | None = None
        self._explicit_path = Path(config_path) if config_path else None

    def get_config_path(self) -> Path | None:
        """Determine config file path using priority order.

        Returns:
            Path to config file, or None if no file exists
        """
        if self._explicit_path:
            if self._explicit_path.exists():
                return self._explicit_path
            logger.warning(f"Explicit config path does not exist: {self._explicit_path}")
            return None

        env_path_str = os.getenv("TEXTPATCH_CONFIG")
        if env_path_str:
            env_path = Path(env_path_str).expanduser()
            if env_path.exists():
                return env_path
            logger.warning(f"TEXTPATCH_CONFIG path does not exist: {env_path}")
            return None

        standard_path = Path.home() / ".textpatch" / "config.yml"
        if standard_path.exists():
            return standard_path

        return None

    def load_config(self) -> EngineConfig:
        """Load, validate and cache the engine configuration.

        Raises:
            ValueError: Config file is invalid or fails validation
        """
        if self._config is not None:
            return self._config

        raw_config: dict[str, Any] = {}
        config_path = self.get_config_path()

        if config_path is None:
            logger.info("No config file found, using built-in defaults")
        else:
            logger.info(f"Loading engine config from: {config_path}")
            try:
                with open(config_path, encoding="utf-8") as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Failed to load config from {config_path}: {e}") from e

            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Config file must contain a YAML dictionary: {config_path}")
            raw_config.update(loaded)

        workspace_override = get_workspace_override()
        if workspace_override is not None:
            raw_config["workspace_root"] = workspace_override

        max_operations_override = get_max_operations_override()
        if max_operations_override is not None:
            raw_config["max_operations"] = max_operations_override

        try:
            config = EngineConfig(**raw_config)
        except ValueError as e:
            raise ValueError(f"Invalid engine configuration: {e}") from e

        if not config.workspace_root.is_dir():
            raise ValueError(f"Workspace root is not a directory: {config.workspace_root}")

        logger.info(
            f"Engine config: workspace={config.workspace_root}, "
            f"max_operations={config.max_operations}"
        )
        self._config = config
        return config


__all__ = ["EngineConfig", "EngineConfigLoader"]
