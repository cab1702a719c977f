"""Domain models for the delivery workflow.

Documents and tasks are immutable values: every change produces a new
instance via ``dataclasses.replace``. The mutable aggregate that holds
them lives in ``aggregate.py``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from .exceptions import CyclicDependencyError, TaskNotFoundError, ValidationError


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Stage(Enum):
    DRAFT = "draft"
    SPEC_GENERATING = "spec_generating"
    SPEC_GENERATED = "spec_generated"
    TECH_DESIGN_GENERATING = "tech_design_generating"
    TECH_DESIGN_GENERATED = "tech_design_generated"
    TECH_DESIGN_APPROVED = "tech_design_approved"
    TASK_LIST_GENERATING = "task_list_generating"
    TASK_LIST_GENERATED = "task_list_generated"
    CODE_GENERATING = "code_generating"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Specification:
    prd_content: str
    generated_content: str
    document_paths: tuple[str, ...] = ()
    generated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "document_paths", tuple(self.document_paths))


@dataclass(frozen=True)
class TechnicalDesign:
    content: str
    version: int = 1
    approved: bool = False
    created_at: datetime = field(default_factory=_now)
    approved_at: datetime | None = None

    def revise_to(self, new_content: str) -> TechnicalDesign:
        """Return the next version of this design. Approval is reset."""
        return TechnicalDesign(
            content=new_content,
            version=self.version + 1,
            approved=False,
            created_at=_now(),
            approved_at=None,
        )

    def approve(self) -> TechnicalDesign:
        if self.approved:
            raise ValidationError(f"Technical design v{self.version} is already approved")
        return replace(self, approved=True, approved_at=_now())


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    dependencies: tuple[str, ...] = ()
    target_file: str | None = None
    generated_code: str | None = None
    error: str | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        # Duplicates carry no meaning; keep first-seen order.
        deps = tuple(dict.fromkeys(self.dependencies))
        if self.id in deps:
            raise ValidationError(f"Task {self.id} cannot depend on itself")
        object.__setattr__(self, "dependencies", deps)

    def mark_in_progress(self) -> Task:
        return replace(self, status=TaskStatus.IN_PROGRESS, error=None)

    def complete(self, code: str) -> Task:
        return replace(
            self,
            status=TaskStatus.COMPLETED,
            generated_code=code,
            error=None,
            completed_at=_now(),
        )

    def fail(self, error: str) -> Task:
        return replace(self, status=TaskStatus.FAILED, error=error, completed_at=_now())

    def skip(self) -> Task:
        return replace(self, status=TaskStatus.SKIPPED)


@dataclass(frozen=True)
class TaskList:
    """Generated task list with an id-keyed index over its tasks.

    Construction rejects duplicate ids and dependency cycles. A dependency
    id that matches no task is tolerated: the dependent task simply never
    becomes executable.
    """

    content: str
    tasks: tuple[Task, ...] = ()
    generated_at: datetime = field(default_factory=_now)
    _index: dict[str, Task] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        tasks = tuple(self.tasks)
        index: dict[str, Task] = {}
        for task in tasks:
            if task.id in index:
                raise ValidationError(f"Duplicate task id: {task.id}")
            index[task.id] = task
        object.__setattr__(self, "tasks", tasks)
        object.__setattr__(self, "_index", index)
        self._validate_no_cycles()

    def _validate_no_cycles(self) -> None:
        """Detect cycles using DFS."""
        WHITE, GRAY, BLACK = 0, 1, 2
        color = {tid: WHITE for tid in self._index}
        path: list[str] = []

        def dfs(tid: str) -> None:
            color[tid] = GRAY
            path.append(tid)
            for dep_id in self._index[tid].dependencies:
                if dep_id not in self._index:
                    continue
                if color[dep_id] == GRAY:
                    start = path.index(dep_id)
                    raise CyclicDependencyError(path[start:] + [dep_id])
                if color[dep_id] == WHITE:
                    dfs(dep_id)
            path.pop()
            color[tid] = BLACK

        for tid in self._index:
            if color[tid] == WHITE:
                dfs(tid)

    def __len__(self) -> int:
        return len(self.tasks)

    def get(self, task_id: str) -> Task | None:
        return self._index.get(task_id)

    def count(self, status: TaskStatus) -> int:
        return sum(1 for t in self.tasks if t.status is status)

    def executable_tasks(self) -> list[Task]:
        """Pending tasks whose every dependency resolves to a completed task."""
        ready = []
        for task in self.tasks:
            if task.status is not TaskStatus.PENDING:
                continue
            deps_met = True
            for dep_id in task.dependencies:
                dep = self._index.get(dep_id)
                if dep is None or dep.status is not TaskStatus.COMPLETED:
                    deps_met = False
                    break
            if deps_met:
                ready.append(task)
        return ready

    def progress(self) -> int:
        """Percentage of completed tasks, truncated. Empty list yields 0."""
        if not self.tasks:
            return 0
        return self.count(TaskStatus.COMPLETED) * 100 // len(self.tasks)

    def unresolved_dependencies(self) -> dict[str, list[str]]:
        """Map task id -> dependency ids that match no task in this list."""
        unresolved = {}
        for task in self.tasks:
            missing = [d for d in task.dependencies if d not in self._index]
            if missing:
                unresolved[task.id] = missing
        return unresolved

    def replace_task(self, task: Task) -> TaskList:
        """Return a copy with ``task`` swapped in for the task of the same id."""
        if task.id not in self._index:
            raise TaskNotFoundError(task.id)
        tasks = tuple(task if t.id == task.id else t for t in self.tasks)
        return TaskList(content=self.content, tasks=tasks, generated_at=self.generated_at)
