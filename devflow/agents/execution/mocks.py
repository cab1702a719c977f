"""Mock generators for testing. Return canned payloads, count calls."""

from __future__ import annotations

from devflow.workflow.aggregate import Workflow
from devflow.workflow.exceptions import GenerationError
from devflow.workflow.models import Specification, Task, TaskList, TechnicalDesign

MOCK_SPEC = (
    "# Specification\n\n"
    "## Goals\n\nDeliver the requested feature with clear acceptance criteria.\n\n"
    "## Modules\n\n- Domain model\n- Application service\n- Persistence adapter\n"
)

MOCK_DESIGN = (
    "# Technical Design\n\n"
    "## Domain\n\nOne aggregate with value objects for each document.\n\n"
    "## Steps\n\n1. Domain model\n2. Repository\n3. Service layer\n"
)

MOCK_TASK_LIST = """\
### P0-1: Create domain model
**Depends**: None
**File**: src/domain/model.py
- [ ] Create the aggregate

### P0-2: Implement repository
**Depends**: P0-1
**File**: src/adapters/repository.py
- [ ] Implement save and load
"""


class MockSpecWriter:
    name: str = "mock_spec_writer"

    def __init__(self, content: str = MOCK_SPEC, error: str | None = None) -> None:
        self._content = content
        self._error = error
        self.call_count = 0
        self.last_prd: str | None = None

    async def generate_specification(
        self, prd_content: str, document_paths: list[str]
    ) -> Specification:
        self.call_count += 1
        self.last_prd = prd_content
        if self._error:
            raise GenerationError("specification", self._error)
        return Specification(
            prd_content=prd_content,
            generated_content=self._content,
            document_paths=tuple(document_paths),
        )


class MockArchitect:
    name: str = "mock_architect"

    def __init__(self, content: str = MOCK_DESIGN, error: str | None = None) -> None:
        self._content = content
        self._error = error
        self.call_count = 0
        self.last_repository_context: str | None = None

    async def generate_technical_design(
        self, specification: Specification, repository_context: str
    ) -> TechnicalDesign:
        self.call_count += 1
        self.last_repository_context = repository_context
        if self._error:
            raise GenerationError("technical design", self._error)
        return TechnicalDesign(content=self._content)


class MockTaskPlanner:
    """Returns ``tasks`` if given, otherwise parses MOCK_TASK_LIST."""

    name: str = "mock_task_planner"

    def __init__(self, tasks: list[Task] | None = None, error: str | None = None) -> None:
        self._tasks = tasks
        self._error = error
        self.call_count = 0

    async def generate_task_list(self, technical_design: TechnicalDesign) -> TaskList:
        self.call_count += 1
        if self._error:
            raise GenerationError("task list", self._error)
        if self._tasks is None:
            from devflow.agents.task_parser import parse_task_list

            return TaskList(content=MOCK_TASK_LIST, tasks=tuple(parse_task_list(MOCK_TASK_LIST)))
        return TaskList(content="(mock task list)", tasks=tuple(self._tasks))


class MockCodeWriter:
    """Generates a stub per task; ids in ``failing`` raise GenerationError."""

    name: str = "mock_code_writer"

    def __init__(self, failing: set[str] | None = None) -> None:
        self._failing = failing or set()
        self.call_count = 0
        self.generated: list[str] = []

    async def generate_code(self, task: Task, workflow: Workflow) -> str:
        self.call_count += 1
        if task.id in self._failing:
            raise GenerationError("code", f"mock failure for {task.id}")
        self.generated.append(task.id)
        return f"# {task.id}: {task.title}\n"
