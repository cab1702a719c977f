"""Shared test configuration."""

from __future__ import annotations

import pytest

from devflow.adapters.memory import InMemoryWorkflowRepository
from devflow.workflow.aggregate import Workflow
from devflow.workflow.models import Specification, Task, TaskList, TechnicalDesign

SPEC_TEXT = (
    "# Specification\n\n"
    "Users can reset their password by email. The link expires after one hour "
    "and can be used only once.\n"
)
DESIGN_TEXT = (
    "# Technical Design\n\n"
    "Add a PasswordReset aggregate, a token repository and a mailer port. "
    "Expose POST /password-resets and PUT /password-resets/{token}.\n"
)


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run slow SDK tests"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="Need --run-slow to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def repository():
    return InMemoryWorkflowRepository()


@pytest.fixture
def spec():
    return Specification(prd_content="Password reset PRD", generated_content=SPEC_TEXT)


@pytest.fixture
def design():
    return TechnicalDesign(content=DESIGN_TEXT)


def make_task_list(*specs: tuple[str, tuple[str, ...]]) -> TaskList:
    """Build a TaskList from (id, dependencies) pairs."""
    return TaskList(
        content="(tasks)",
        tasks=tuple(Task(id=tid, title=f"Task {tid}", dependencies=deps) for tid, deps in specs),
    )


def workflow_at_code_generation(task_list: TaskList) -> Workflow:
    """A workflow walked through every stage up to CODE_GENERATING."""
    wf = Workflow.create("Password reset", repository_id=7, created_by="alice")
    wf.id = "wf-1"
    wf.start_spec_generation()
    wf.complete_spec_generation(
        Specification(prd_content="PRD", generated_content=SPEC_TEXT)
    )
    wf.start_tech_design()
    wf.complete_tech_design(TechnicalDesign(content=DESIGN_TEXT))
    wf.approve_tech_design()
    wf.start_task_list_generation()
    wf.complete_task_list_generation(task_list)
    wf.start_code_generation()
    return wf
