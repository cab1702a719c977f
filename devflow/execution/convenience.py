"""Convenience functions for wiring a WorkflowService."""

from __future__ import annotations

from pathlib import Path

from devflow.agents.execution.registry import GeneratorSet
from devflow.execution.config import RunConfig
from devflow.execution.service import WorkflowService
from devflow.workflow.interface import WorkflowRepository


def create_generators(config: RunConfig | None = None) -> GeneratorSet:
    """Create a GeneratorSet with real agents backed by ClaudeCodeExecutor."""
    from devflow.agents.execution.architect import ArchitectAgent
    from devflow.agents.execution.claude_code import ClaudeCodeExecutor
    from devflow.agents.execution.code_writer import CodeWriterAgent
    from devflow.agents.execution.spec_writer import SpecWriterAgent
    from devflow.agents.execution.task_planner import TaskPlannerAgent

    config = config or RunConfig()
    executor = ClaudeCodeExecutor(model=config.model, max_turns=config.max_turns)
    working_dir = config.repository_root or Path(".")
    kwargs = {"executor": executor, "working_dir": working_dir, "timeout": config.timeout_seconds}
    return GeneratorSet(
        specification=SpecWriterAgent(**kwargs),
        technical_design=ArchitectAgent(**kwargs),
        task_list=TaskPlannerAgent(**kwargs),
        code=CodeWriterAgent(**kwargs),
    )


def create_mock_generators() -> GeneratorSet:
    """Create a GeneratorSet with mock generators for fast testing."""
    from devflow.agents.execution.mocks import (
        MockArchitect,
        MockCodeWriter,
        MockSpecWriter,
        MockTaskPlanner,
    )

    return GeneratorSet(
        specification=MockSpecWriter(),
        technical_design=MockArchitect(),
        task_list=MockTaskPlanner(),
        code=MockCodeWriter(),
    )


def create_service(
    repository: WorkflowRepository | None = None,
    config: RunConfig | None = None,
    mock: bool = False,
) -> WorkflowService:
    """Build a WorkflowService with sensible defaults.

    Without a repository, workflows are stored as YAML under
    ``config.storage_dir``. Pass mock=True to skip real generation.
    """
    config = config or RunConfig()
    if repository is None:
        from devflow.adapters.yaml_store import YamlWorkflowRepository

        repository = YamlWorkflowRepository(config.storage_dir)
    generators = create_mock_generators() if mock else create_generators(config)
    return WorkflowService(repository, generators, config)
