"""In-memory workflow repository for testing."""

from __future__ import annotations

import copy
import logging

from ..workflow.aggregate import Workflow
from ..workflow.exceptions import ConcurrentModificationError

logger = logging.getLogger(__name__)


class InMemoryWorkflowRepository:
    """WorkflowRepository backed by a dict. For tests and demos.

    Stores and hands out deep copies, so two loads of the same workflow
    are independent and a stale save is detected by its revision.
    """

    def __init__(self) -> None:
        self._workflows: dict[str, Workflow] = {}
        self._next_id = 1

    async def save(self, workflow: Workflow) -> Workflow:
        if workflow.id is None:
            workflow.id = f"wf-{self._next_id}"
            self._next_id += 1
            workflow.revision = 0
        else:
            stored = self._workflows.get(workflow.id)
            current = stored.revision if stored is not None else 0
            if workflow.revision != current:
                raise ConcurrentModificationError(workflow.id, workflow.revision, current)

        workflow.revision += 1
        self._workflows[workflow.id] = copy.deepcopy(workflow)
        logger.debug("Saved workflow %s at revision %d", workflow.id, workflow.revision)
        return workflow

    async def find_by_id(self, workflow_id: str) -> Workflow | None:
        stored = self._workflows.get(workflow_id)
        return copy.deepcopy(stored) if stored is not None else None

    async def find_all(self) -> list[Workflow]:
        return [copy.deepcopy(w) for w in self._workflows.values()]

    async def find_by_repository(self, repository_id: int) -> list[Workflow]:
        return [
            copy.deepcopy(w)
            for w in self._workflows.values()
            if w.repository_id == repository_id
        ]

    async def delete(self, workflow_id: str) -> None:
        self._workflows.pop(workflow_id, None)
