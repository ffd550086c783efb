"""Tests for application context construction and logging setup."""

import logging
from pathlib import Path

import pytest

from textpatch_mcp.context import AppContext
from textpatch_mcp.engine import EngineConfigLoader
from textpatch_mcp.server import app_lifespan, configure_logging, create_app_context, mcp


def test_create_app_context(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEXTPATCH_WORKSPACE_PATH", str(workspace))

    app_context = create_app_context()

    assert app_context.engine.workspace_root == workspace.resolve()
    assert app_context.edit_queue is not None
    assert app_context.config.max_operations == 20


def test_edit_queue_can_be_disabled(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEXTPATCH_WORKSPACE_PATH", str(workspace))
    monkeypatch.setenv("TEXTPATCH_EDIT_QUEUE_ENABLED", "false")

    assert create_app_context().edit_queue is None


def test_invalid_configuration_prevents_startup(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yml"
    config_file.write_text("just a string\n")

    with pytest.raises(RuntimeError, match="Server cannot start"):
        create_app_context(EngineConfigLoader(config_file))


@pytest.mark.asyncio
async def test_lifespan_starts_and_stops_edit_queue(
    workspace: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TEXTPATCH_WORKSPACE_PATH", str(workspace))

    async with app_lifespan(mcp) as app_context:
        assert isinstance(app_context, AppContext)
        assert app_context.edit_queue is not None
        assert app_context.edit_queue.running is True

    assert app_context.edit_queue.running is False


@pytest.mark.asyncio
async def test_app_context_runs_inline_without_queue(engine_config, engine) -> None:
    app_context = AppContext(config=engine_config, engine=engine)

    assert await app_context.run(lambda: "inline") == "inline"


def test_configure_logging_falls_back_to_info(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("TEXTPATCH_LOG_LEVEL", "chatty")
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging()

    assert "Invalid TEXTPATCH_LOG_LEVEL 'CHATTY'" in capsys.readouterr().err
    assert root.level == logging.INFO
