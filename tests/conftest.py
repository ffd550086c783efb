"""Shared test configuration for textpatch-mcp tests.

Provides:
- An isolated workspace directory with the five-line sample file
- A PatchEngine bound to that workspace
- A mock MCP context wrapping an AppContext, for calling tools directly
- Environment cleanup so host TEXTPATCH_* variables never leak into tests
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from textpatch_mcp.context import AppContext
from textpatch_mcp.engine import EditQueue, EngineConfig, PatchEngine

SAMPLE_CONTENT = "line 1\nline 2\nline 3\nline 4\nline 5"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove configuration variables that would change engine behavior."""
    for name in (
        "TEXTPATCH_CONFIG",
        "TEXTPATCH_WORKSPACE_PATH",
        "WORKSPACE_PATH",
        "TEXTPATCH_MAX_OPERATIONS",
        "TEXTPATCH_EDIT_QUEUE_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so ~/.textpatch/config.yml is never read."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace root containing sample.txt (five lines, no trailing newline)."""
    root = tmp_path / "workspace"
    root.mkdir()
    (root / "sample.txt").write_text(SAMPLE_CONTENT, encoding="utf-8")
    return root


@pytest.fixture
def sample_file(workspace: Path) -> Path:
    return workspace / "sample.txt"


@pytest.fixture
def engine_config(workspace: Path) -> EngineConfig:
    return EngineConfig(workspace_root=workspace)


@pytest.fixture
def engine(engine_config: EngineConfig) -> PatchEngine:
    return PatchEngine(engine_config)


@pytest.fixture
def mock_context(engine_config: EngineConfig, engine: PatchEngine) -> MagicMock:
    """Mock MCP context whose lifespan context is a real AppContext.

    The edit queue is created but not started, so tools run the engine inline.
    """
    app_context = AppContext(config=engine_config, engine=engine, edit_queue=EditQueue())

    mock_ctx = MagicMock()
    mock_ctx.request_context.lifespan_context = app_context
    return mock_ctx
