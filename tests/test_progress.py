"""Tests for progress calculation and stage labels."""

import pytest

from devflow.workflow.models import Stage
from devflow.workflow.progress import calculate_progress, is_progress_consistent, stage_label


class TestCalculateProgress:
    @pytest.mark.parametrize(
        "stage,expected",
        [
            (Stage.DRAFT, 0),
            (Stage.SPEC_GENERATING, 20),
            (Stage.SPEC_GENERATED, 20),
            (Stage.TECH_DESIGN_GENERATING, 40),
            (Stage.TECH_DESIGN_APPROVED, 40),
            (Stage.TASK_LIST_GENERATING, 60),
            (Stage.TASK_LIST_GENERATED, 60),
            (Stage.COMPLETED, 100),
        ],
    )
    def test_fixed_stages(self, stage, expected):
        assert calculate_progress(stage) == expected

    def test_code_generation_without_task_list(self):
        assert calculate_progress(Stage.CODE_GENERATING) == 60

    @pytest.mark.parametrize("task_progress,expected", [(0, 60), (33, 72), (50, 79), (66, 85), (100, 99)])
    def test_code_generation_scales_task_progress(self, task_progress, expected):
        assert calculate_progress(Stage.CODE_GENERATING, task_progress) == expected

    def test_frozen_stages_keep_value(self):
        assert calculate_progress(Stage.FAILED, frozen_progress=72) == 72
        assert calculate_progress(Stage.CANCELLED, 50, frozen_progress=40) == 40

    @pytest.mark.parametrize("bad", [-1, 101])
    def test_task_progress_out_of_range(self, bad):
        with pytest.raises(ValueError):
            calculate_progress(Stage.CODE_GENERATING, bad)


class TestStageLabel:
    def test_plain_label(self):
        assert stage_label(Stage.DRAFT) == "Draft"
        assert stage_label(Stage.CODE_GENERATING) == "Generating code"

    def test_reason_appended_for_stopped_stages(self):
        assert stage_label(Stage.FAILED, "timeout") == "Failed: timeout"
        assert stage_label(Stage.CANCELLED, "dup") == "Cancelled: dup"

    def test_reason_ignored_elsewhere(self):
        assert stage_label(Stage.COMPLETED, "why") == "Completed"


class TestIsProgressConsistent:
    def test_matching_snapshot(self):
        assert is_progress_consistent(Stage.SPEC_GENERATED, 20)
        assert is_progress_consistent(Stage.CODE_GENERATING, 79, 50)

    def test_mismatch(self):
        assert not is_progress_consistent(Stage.SPEC_GENERATED, 40)

    def test_frozen_stage_accepts_any_in_range(self):
        assert is_progress_consistent(Stage.FAILED, 72)
        assert not is_progress_consistent(Stage.FAILED, 120)
