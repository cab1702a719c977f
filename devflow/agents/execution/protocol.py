"""Protocol definitions for the per-stage content generators."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from devflow.workflow.aggregate import Workflow
from devflow.workflow.models import Specification, Task, TaskList, TechnicalDesign


@runtime_checkable
class SpecificationGenerator(Protocol):
    async def generate_specification(
        self, prd_content: str, document_paths: list[str]
    ) -> Specification: ...


@runtime_checkable
class TechnicalDesignGenerator(Protocol):
    async def generate_technical_design(
        self, specification: Specification, repository_context: str
    ) -> TechnicalDesign: ...


@runtime_checkable
class TaskListGenerator(Protocol):
    async def generate_task_list(self, technical_design: TechnicalDesign) -> TaskList: ...


@runtime_checkable
class CodeGenerator(Protocol):
    async def generate_code(self, task: Task, workflow: Workflow) -> str: ...
