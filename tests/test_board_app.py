"""Tests for board actions: cancelling must not block the UI."""

from __future__ import annotations

import ast
import inspect
import textwrap

import pytest

pytest.importorskip("textual")

from devflow.workflow.aggregate import Workflow
from devflow_board.app import BoardApp, CancelModal, DetailPanel, _progress_bar, _summary
from devflow_board.loader import ColumnInfo


class TestCancelAction:
    def test_checks_transition_before_prompting(self):
        source = inspect.getsource(BoardApp.action_cancel_workflow)
        assert "is_valid_transition" in source

    def test_prompts_for_reason(self):
        source = inspect.getsource(BoardApp.action_cancel_workflow)
        assert "CancelModal" in source
        assert "push_screen" in source

    def test_uses_run_worker(self):
        source = inspect.getsource(BoardApp.action_cancel_workflow)
        assert "run_worker" in source

    def test_no_awaits_in_action(self):
        """The action is synchronous; the service call happens in the worker."""
        source = inspect.getsource(BoardApp.action_cancel_workflow)
        tree = ast.parse(textwrap.dedent(source))
        assert not any(isinstance(node, ast.Await) for node in ast.walk(tree))

    def test_cancel_goes_through_service(self):
        source = inspect.getsource(BoardApp._cancel)
        assert "cancel_workflow" in source
        assert "action_refresh" in source


class TestWidgets:
    def test_detail_panel_disables_markup(self):
        """Task marks like [x] must render literally."""
        source = inspect.getsource(DetailPanel.compose)
        assert "markup=False" in source

    def test_cancel_modal_has_escape_binding(self):
        keys = [b.key for b in CancelModal.BINDINGS]
        assert "escape" in keys

    def test_board_bindings(self):
        keys = {b.key for b in BoardApp.BINDINGS}
        assert {"q", "r", "x", "d"} <= keys

    def test_default_store_dir(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert BoardApp().store_dir == tmp_path / ".devflow"
        assert BoardApp(tmp_path / "s").store_dir == tmp_path / "s"


@pytest.mark.parametrize("progress,bar", [(0, ".........."), (45, "####......"), (100, "##########")])
def test_progress_bar(progress, bar):
    assert _progress_bar(progress) == bar


def test_summary_counts():
    draft = Workflow.create("A", 1, "alice")
    failed = Workflow.create("B", 1, "alice")
    failed.start_spec_generation()
    failed.mark_as_failed("boom")
    columns = [ColumnInfo("draft", "Draft", [draft]), ColumnInfo("stopped", "Stopped", [failed])]
    assert _summary(columns) == "2 workflows, 1 active, 1 failed"
