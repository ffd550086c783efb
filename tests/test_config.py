"""Tests for EngineConfig and EngineConfigLoader."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from textpatch_mcp.engine import EngineConfig, EngineConfigLoader


class TestEngineConfig:
    def test_defaults(self) -> None:
        config = EngineConfig()

        assert config.workspace_root == Path.cwd()
        assert config.max_operations == 20
        assert config.default_create_backup is True
        assert config.backup_marker == ".backup."
        assert config.max_file_size_bytes is None

    def test_workspace_string_is_expanded(self, isolated_home: Path) -> None:
        config = EngineConfig(workspace_root="~/project")  # type: ignore[arg-type]

        assert config.workspace_root == isolated_home / "project"

    @pytest.mark.parametrize("value", [0, 1001])
    def test_max_operations_bounds(self, value: int) -> None:
        with pytest.raises(ValidationError):
            EngineConfig(max_operations=value)

    @pytest.mark.parametrize("marker", ["/backup/", "\\bak", ""])
    def test_backup_marker_rejects_separators(self, marker: str) -> None:
        with pytest.raises(ValidationError):
            EngineConfig(backup_marker=marker)


class TestEngineConfigLoader:
    def test_built_in_defaults_without_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        config = EngineConfigLoader().load_config()

        assert config.workspace_root == tmp_path
        assert config.max_operations == 20

    def test_explicit_config_file(self, tmp_path: Path) -> None:
        workspace = tmp_path / "ws"
        workspace.mkdir()
        config_file = tmp_path / "config.yml"
        config_file.write_text(
            f"workspace_root: {workspace}\n"
            "max_operations: 5\n"
            "default_create_backup: false\n"
            "backup_marker: .orig.\n"
        )

        config = EngineConfigLoader(config_file).load_config()

        assert config.workspace_root == workspace
        assert config.max_operations == 5
        assert config.default_create_backup is False
        assert config.backup_marker == ".orig."

    def test_config_from_environment_variable(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "env-config.yml"
        config_file.write_text(f"workspace_root: {tmp_path}\nmax_operations: 7\n")
        monkeypatch.setenv("TEXTPATCH_CONFIG", str(config_file))

        config = EngineConfigLoader().load_config()

        assert config.max_operations == 7

    def test_standard_location(self, tmp_path: Path, isolated_home: Path) -> None:
        config_dir = isolated_home / ".textpatch"
        config_dir.mkdir()
        (config_dir / "config.yml").write_text(f"workspace_root: {tmp_path}\nmax_operations: 9\n")

        config = EngineConfigLoader().load_config()

        assert config.max_operations == 9

    def test_missing_explicit_path_falls_back_to_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        loader = EngineConfigLoader(tmp_path / "nope.yml")

        assert loader.get_config_path() is None
        assert loader.load_config().max_operations == 20

    def test_empty_file_uses_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        config_file = tmp_path / "empty.yml"
        config_file.write_text("")

        assert EngineConfigLoader(config_file).load_config().max_operations == 20

    def test_non_dictionary_file_is_rejected(self, tmp_path: Path) -> None:
        config_file = tmp_path / "list.yml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="YAML dictionary"):
            EngineConfigLoader(config_file).load_config()

    def test_invalid_yaml_is_rejected(self, tmp_path: Path) -> None:
        config_file = tmp_path / "broken.yml"
        config_file.write_text("max_operations: [unclosed\n")

        with pytest.raises(ValueError, match="Failed to load config"):
            EngineConfigLoader(config_file).load_config()

    def test_invalid_values_are_rejected(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.yml"
        config_file.write_text(f"workspace_root: {tmp_path}\nmax_operations: 0\n")

        with pytest.raises(ValueError, match="Invalid engine configuration"):
            EngineConfigLoader(config_file).load_config()

    def test_workspace_must_be_a_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TEXTPATCH_WORKSPACE_PATH", str(tmp_path / "missing"))

        with pytest.raises(ValueError, match="not a directory"):
            EngineConfigLoader().load_config()

    def test_workspace_environment_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        other = tmp_path / "other"
        other.mkdir()
        config_file = tmp_path / "config.yml"
        config_file.write_text(f"workspace_root: {tmp_path}\n")
        monkeypatch.setenv("TEXTPATCH_WORKSPACE_PATH", str(other))

        assert EngineConfigLoader(config_file).load_config().workspace_root == other

    def test_legacy_workspace_variable(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("WORKSPACE_PATH", str(tmp_path))

        assert EngineConfigLoader().load_config().workspace_root == tmp_path

    def test_prefixed_workspace_variable_wins(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        preferred = tmp_path / "preferred"
        preferred.mkdir()
        monkeypatch.setenv("WORKSPACE_PATH", str(tmp_path))
        monkeypatch.setenv("TEXTPATCH_WORKSPACE_PATH", str(preferred))

        assert EngineConfigLoader().load_config().workspace_root == preferred

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("5", 5), ("0", 1), ("-3", 1), ("5000", 1000), ("not-a-number", 20)],
    )
    def test_max_operations_override_is_clamped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, raw: str, expected: int
    ) -> None:
        monkeypatch.setenv("TEXTPATCH_WORKSPACE_PATH", str(tmp_path))
        monkeypatch.setenv("TEXTPATCH_MAX_OPERATIONS", raw)

        assert EngineConfigLoader().load_config().max_operations == expected

    def test_config_is_cached(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEXTPATCH_WORKSPACE_PATH", str(tmp_path))
        loader = EngineConfigLoader()

        first = loader.load_config()
        monkeypatch.setenv("TEXTPATCH_MAX_OPERATIONS", "3")

        assert loader.load_config() is first
