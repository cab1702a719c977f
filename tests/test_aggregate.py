"""Tests for the Workflow aggregate."""

import copy

import pytest

from devflow.workflow.aggregate import Workflow
from devflow.workflow.exceptions import InvalidTransitionError, TaskNotFoundError, ValidationError
from devflow.workflow.models import Specification, Stage, TaskStatus, TechnicalDesign

from conftest import DESIGN_TEXT, make_task_list, workflow_at_code_generation


@pytest.fixture
def workflow():
    wf = Workflow.create("W1", repository_id=1, created_by="alice")
    wf.id = "wf-1"
    return wf


def _at_design_generated(wf: Workflow) -> Workflow:
    wf.start_spec_generation()
    wf.complete_spec_generation(Specification(prd_content="PRD", generated_content="spec"))
    wf.start_tech_design()
    wf.complete_tech_design(TechnicalDesign(content="v1 text"))
    return wf


class TestCreate:
    def test_starts_in_draft(self, workflow):
        assert workflow.stage is Stage.DRAFT
        assert workflow.progress == 0
        assert workflow.stage_label == "Draft"
        assert workflow.transitions == []
        assert workflow.created_at == workflow.updated_at

    def test_trigger_from_wrong_stage_raises(self, workflow):
        with pytest.raises(InvalidTransitionError) as exc_info:
            workflow.start_tech_design()
        assert exc_info.value.from_stage is Stage.DRAFT
        assert exc_info.value.to_stage is Stage.TECH_DESIGN_GENERATING

    def test_rejected_call_leaves_state_untouched(self, workflow):
        before = copy.deepcopy(workflow)
        with pytest.raises(InvalidTransitionError):
            workflow.start_code_generation()
        assert workflow == before


class TestSpecification:
    def test_generate_and_complete(self, workflow, spec):
        workflow.start_spec_generation()
        assert workflow.stage is Stage.SPEC_GENERATING
        workflow.complete_spec_generation(spec)
        assert workflow.stage is Stage.SPEC_GENERATED
        assert workflow.progress == 20
        assert workflow.specification == spec

    def test_transitions_recorded(self, workflow, spec):
        workflow.start_spec_generation()
        workflow.complete_spec_generation(spec)
        moves = [(t.from_stage, t.to_stage) for t in workflow.transitions]
        assert moves == [
            (Stage.DRAFT, Stage.SPEC_GENERATING),
            (Stage.SPEC_GENERATING, Stage.SPEC_GENERATED),
        ]

    def test_empty_content_rejected_without_mutation(self, workflow):
        workflow.start_spec_generation()
        with pytest.raises(ValidationError):
            workflow.complete_spec_generation(Specification(prd_content="PRD", generated_content="  "))
        assert workflow.stage is Stage.SPEC_GENERATING
        assert workflow.specification is None

    def test_regenerate_from_generated(self, workflow, spec):
        workflow.start_spec_generation()
        workflow.complete_spec_generation(spec)
        workflow.start_spec_generation()
        assert workflow.stage is Stage.SPEC_GENERATING


class TestTechnicalDesign:
    def test_complete_sets_progress(self, workflow):
        _at_design_generated(workflow)
        assert workflow.stage is Stage.TECH_DESIGN_GENERATED
        assert workflow.progress == 40

    def test_revise_then_approve(self, workflow):
        _at_design_generated(workflow)
        workflow.revise_tech_design("v2 text")
        assert workflow.technical_design.version == 2
        assert workflow.technical_design.approved is False
        assert workflow.stage is Stage.TECH_DESIGN_GENERATED
        assert workflow.progress == 40

        workflow.approve_tech_design()
        assert workflow.stage is Stage.TECH_DESIGN_APPROVED
        assert workflow.technical_design.version == 2
        assert workflow.technical_design.approved is True

    def test_revise_outside_generated_stage(self, workflow):
        with pytest.raises(InvalidTransitionError) as exc_info:
            workflow.revise_tech_design("text")
        assert exc_info.value.to_stage is Stage.TECH_DESIGN_GENERATED

    def test_revise_after_approval_rejected(self, workflow):
        _at_design_generated(workflow)
        workflow.approve_tech_design()
        with pytest.raises(InvalidTransitionError):
            workflow.revise_tech_design("late change")

    def test_each_revision_bumps_by_one(self, workflow):
        _at_design_generated(workflow)
        for expected in (2, 3, 4):
            workflow.revise_tech_design(f"{DESIGN_TEXT} rev {expected}")
            assert workflow.technical_design.version == expected
            assert workflow.technical_design.approved is False


class TestCodeGeneration:
    def test_two_tasks_complete_workflow(self):
        wf = workflow_at_code_generation(make_task_list(("T1", ()), ("T2", ("T1",))))
        assert wf.progress == 60
        assert [t.id for t in wf.task_list.executable_tasks()] == ["T1"]

        wf.complete_task("T1", "code 1")
        assert [t.id for t in wf.task_list.executable_tasks()] == ["T2"]
        assert wf.stage is Stage.CODE_GENERATING
        assert wf.progress == 79

        wf.complete_task("T2", "code 2")
        assert wf.stage is Stage.COMPLETED
        assert wf.progress == 100
        assert wf.stage_label == "Completed"

    def test_unknown_task(self):
        wf = workflow_at_code_generation(make_task_list(("T1", ())))
        with pytest.raises(TaskNotFoundError):
            wf.complete_task("T9", "code")
        assert wf.task_list.get("T1").status is TaskStatus.PENDING

    def test_complete_task_outside_code_generation(self, workflow):
        with pytest.raises(InvalidTransitionError):
            workflow.complete_task("T1", "code")

    def test_fail_task_keeps_stage(self):
        wf = workflow_at_code_generation(make_task_list(("T1", ()), ("T2", ("T1",))))
        wf.mark_task_in_progress("T1")
        assert wf.task_list.get("T1").status is TaskStatus.IN_PROGRESS
        wf.fail_task("T1", "compile error")
        assert wf.stage is Stage.CODE_GENERATING
        assert wf.task_list.get("T1").error == "compile error"
        assert wf.task_list.executable_tasks() == []

    def test_empty_task_list_completes_explicitly(self):
        wf = workflow_at_code_generation(make_task_list())
        wf.complete_code_generation()
        assert wf.stage is Stage.COMPLETED
        assert wf.progress == 100

    def test_complete_code_generation_with_pending_tasks(self):
        wf = workflow_at_code_generation(make_task_list(("T1", ())))
        with pytest.raises(ValidationError, match="Not all tasks"):
            wf.complete_code_generation()
        assert wf.stage is Stage.CODE_GENERATING


class TestTermination:
    def test_mark_as_failed_freezes_progress(self, workflow, spec):
        workflow.start_spec_generation()
        workflow.mark_as_failed("model timeout")
        assert workflow.stage is Stage.FAILED
        assert workflow.progress == 20
        assert workflow.stage_label == "Failed: model timeout"
        assert workflow.failure_reason == "model timeout"

    def test_mark_as_failed_from_draft_rejected(self, workflow):
        with pytest.raises(InvalidTransitionError):
            workflow.mark_as_failed("nope")

    def test_cancel(self, workflow, spec):
        workflow.start_spec_generation()
        workflow.complete_spec_generation(spec)
        workflow.cancel("duplicate request")
        assert workflow.stage is Stage.CANCELLED
        assert workflow.progress == 20
        assert workflow.stage_label == "Cancelled: duplicate request"
        assert workflow.transitions[-1].reason == "duplicate request"

    def test_cancel_completed_workflow_rejected(self):
        wf = workflow_at_code_generation(make_task_list(("T1", ())))
        wf.complete_task("T1", "code")
        assert wf.stage is Stage.COMPLETED
        with pytest.raises(InvalidTransitionError):
            wf.cancel("user requested")
        assert wf.stage is Stage.COMPLETED
        assert wf.progress == 100

    def test_cancel_twice_rejected(self, workflow):
        workflow.cancel("first")
        with pytest.raises(InvalidTransitionError):
            workflow.cancel("second")
        assert workflow.stage_label == "Cancelled: first"


class TestUpdateProgress:
    def test_override(self, workflow):
        workflow.update_progress(42)
        assert workflow.progress == 42

    @pytest.mark.parametrize("bad", [-5, 101])
    def test_out_of_range(self, workflow, bad):
        with pytest.raises(ValidationError):
            workflow.update_progress(bad)
        assert workflow.progress == 0
