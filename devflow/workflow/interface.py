"""Abstract persistence port for workflows."""

from typing import Protocol, runtime_checkable

from .aggregate import Workflow


@runtime_checkable
class WorkflowRepository(Protocol):
    """Whole-value store for workflow aggregates.

    ``save`` assigns an id to new workflows and rejects writes based on a
    stale ``revision`` with ConcurrentModificationError.
    """

    async def save(self, workflow: Workflow) -> Workflow: ...

    async def find_by_id(self, workflow_id: str) -> Workflow | None: ...

    async def find_all(self) -> list[Workflow]: ...

    async def find_by_repository(self, repository_id: int) -> list[Workflow]: ...

    async def delete(self, workflow_id: str) -> None: ...
