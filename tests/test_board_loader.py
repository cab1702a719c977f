"""Tests for the board loader: column grouping and detail rendering."""

from __future__ import annotations

import pytest

from devflow.adapters.yaml_store import YamlWorkflowRepository
from devflow.workflow.aggregate import Workflow
from devflow.workflow.models import Stage
from devflow_board.loader import COLUMNS, column_for, load_board, load_workflow, render_detail

from conftest import make_task_list, workflow_at_code_generation


class TestColumns:
    def test_every_stage_has_one_column(self):
        for stage in Stage:
            owners = [name for name, _, stages in COLUMNS if stage in stages]
            assert len(owners) == 1, stage

    @pytest.mark.parametrize(
        "stage,column",
        [
            (Stage.DRAFT, "draft"),
            (Stage.SPEC_GENERATING, "spec"),
            (Stage.TECH_DESIGN_APPROVED, "design"),
            (Stage.TASK_LIST_GENERATED, "tasks"),
            (Stage.CODE_GENERATING, "code"),
            (Stage.COMPLETED, "done"),
            (Stage.FAILED, "stopped"),
            (Stage.CANCELLED, "stopped"),
        ],
    )
    def test_column_for(self, stage, column):
        assert column_for(stage) == column


class TestLoadBoard:
    def test_missing_directory_gives_empty_columns(self, tmp_path):
        board = load_board(tmp_path / "nope")
        assert [c.name for c in board] == [name for name, _, _ in COLUMNS]
        assert all(c.workflows == [] for c in board)

    @pytest.mark.asyncio
    async def test_groups_by_stage(self, tmp_path):
        repo = YamlWorkflowRepository(tmp_path)
        draft = Workflow.create("Draft one", 1, "alice")
        await repo.save(draft)
        cancelled = Workflow.create("Dropped", 1, "bob")
        cancelled.cancel("scope cut")
        await repo.save(cancelled)
        coding = workflow_at_code_generation(make_task_list(("T1", ())))
        coding.id = None
        await repo.save(coding)

        columns = {c.name: c for c in load_board(tmp_path)}
        assert [w.name for w in columns["draft"].workflows] == ["Draft one"]
        assert [w.name for w in columns["stopped"].workflows] == ["Dropped"]
        assert [w.name for w in columns["code"].workflows] == ["Password reset"]

    @pytest.mark.asyncio
    async def test_newest_first(self, tmp_path):
        repo = YamlWorkflowRepository(tmp_path)
        older = Workflow.create("Older", 1, "alice")
        await repo.save(older)
        newer = Workflow.create("Newer", 1, "alice")
        await repo.save(newer)
        older.update_progress(0)
        await repo.save(older)

        draft = load_board(tmp_path)[0]
        assert [w.name for w in draft.workflows] == ["Older", "Newer"]

    def test_unreadable_file_skipped(self, tmp_path, caplog):
        bad = tmp_path / "wf-9.yaml"
        bad.write_text("id: wf-9\nstage: nowhere\n")
        assert load_workflow(bad) is None
        assert all(c.workflows == [] for c in load_board(tmp_path))
        assert "wf-9.yaml" in caplog.text


class TestRenderDetail:
    def test_draft(self):
        wf = Workflow.create("Password reset", 7, "alice")
        wf.id = "wf-3"
        text = render_detail(wf)
        assert text.startswith("# Password reset")
        assert "ID: wf-3" in text
        assert "Stage: Draft" in text
        assert "Specification: no" in text
        assert "Technical design: no" in text
        assert "## Tasks" not in text

    def test_tasks_and_failure(self):
        wf = workflow_at_code_generation(make_task_list(("T1", ()), ("T2", ("T1",))))
        wf.mark_task_in_progress("T1")
        wf.complete_task("T1", "print('hi')")
        wf.mark_task_in_progress("T2")
        wf.fail_task("T2", "model timed out")
        wf.mark_as_failed("Code generation stalled: failed tasks T2")

        text = render_detail(wf)
        assert "Technical design: v1 (approved)" in text
        assert "## Tasks (1/2)" in text
        assert "[x] T1: Task T1" in text
        assert "[!] T2: Task T2" in text
        assert "    model timed out" in text
        assert "Failure: Code generation stalled: failed tasks T2" in text
