"""YAML file workflow repository.

One ``<id>.yaml`` file per workflow inside a store directory. State survives
process restarts, unlike InMemoryWorkflowRepository.

Several processes may share a store (``devflow run`` next to the board), so
id allocation and the revision check plus write happen under a ``.lock``
file created with ``O_EXCL``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import time
from contextlib import asynccontextmanager
from pathlib import Path

import yaml

from ..workflow.aggregate import Workflow
from ..workflow.exceptions import ConcurrentModificationError
from ..workflow.serialization import workflow_from_dict, workflow_to_dict

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"^wf-(\d+)$")

LOCK_NAME = ".lock"
COUNTER_NAME = ".next_id"
LOCK_POLL_SECONDS = 0.01
# A lock older than this was left behind by a crashed writer.
STALE_LOCK_SECONDS = 30.0


def _sort_key(workflow: Workflow) -> tuple[int, str]:
    m = _ID_PATTERN.match(workflow.id or "")
    return (int(m.group(1)) if m else 0, workflow.id or "")


class YamlWorkflowRepository:
    """WorkflowRepository persisted as YAML files under ``directory``."""

    def __init__(self, directory: Path, lock_timeout: float = 10.0) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._lock_timeout = lock_timeout

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, workflow_id: str) -> Path:
        return self._dir / f"{workflow_id}.yaml"

    @asynccontextmanager
    async def _locked(self):
        lock = self._dir / LOCK_NAME
        deadline = time.monotonic() + self._lock_timeout
        while True:
            try:
                fd = os.open(lock, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
                break
            except FileExistsError:
                try:
                    age = time.time() - lock.stat().st_mtime
                except FileNotFoundError:
                    continue
                if age > STALE_LOCK_SECONDS:
                    logger.warning("Removing stale store lock %s (%.0fs old)", lock, age)
                    lock.unlink(missing_ok=True)
                    continue
                if time.monotonic() > deadline:
                    raise TimeoutError(f"Could not lock workflow store {self._dir}")
                await asyncio.sleep(LOCK_POLL_SECONDS)
        try:
            os.write(fd, str(os.getpid()).encode())
            os.close(fd)
            yield
        finally:
            lock.unlink(missing_ok=True)

    def _next_id(self) -> str:
        """Allocate from the persisted counter; ids are never reused."""
        counter = self._dir / COUNTER_NAME
        if counter.exists():
            number = int(counter.read_text(encoding="utf-8").strip())
        else:
            # Stores written before the counter existed.
            number = 1
            for path in self._dir.glob("wf-*.yaml"):
                m = _ID_PATTERN.match(path.stem)
                if m:
                    number = max(number, int(m.group(1)) + 1)
        counter.write_text(str(number + 1), encoding="utf-8")
        return f"wf-{number}"

    def _read(self, path: Path) -> Workflow:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return workflow_from_dict(data)

    def _write(self, workflow: Workflow) -> None:
        path = self._path(workflow.id)
        tmp = path.with_suffix(".yaml.tmp")
        tmp.write_text(
            yaml.safe_dump(workflow_to_dict(workflow), sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        tmp.replace(path)

    async def save(self, workflow: Workflow) -> Workflow:
        async with self._locked():
            if workflow.id is None:
                workflow.id = self._next_id()
                workflow.revision = 0
            else:
                path = self._path(workflow.id)
                current = self._read(path).revision if path.exists() else 0
                if workflow.revision != current:
                    raise ConcurrentModificationError(workflow.id, workflow.revision, current)

            workflow.revision += 1
            self._write(workflow)
        logger.debug("Saved workflow %s to %s", workflow.id, self._dir)
        return workflow

    async def find_by_id(self, workflow_id: str) -> Workflow | None:
        path = self._path(workflow_id)
        if not path.exists():
            return None
        return self._read(path)

    async def find_all(self) -> list[Workflow]:
        workflows = [self._read(p) for p in self._dir.glob("wf-*.yaml")]
        return sorted(workflows, key=_sort_key)

    async def find_by_repository(self, repository_id: int) -> list[Workflow]:
        return [w for w in await self.find_all() if w.repository_id == repository_id]

    async def delete(self, workflow_id: str) -> None:
        async with self._locked():
            self._path(workflow_id).unlink(missing_ok=True)
