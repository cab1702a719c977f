"""Parse a generated markdown task list into Task values.

Expected shape (see prompts.TASK_FORMAT_EXAMPLE)::

    ### ✅ P0-1: Create domain enums
    **Depends**: None
    **File**: src/domain/model/
    - [ ] Create the Status enum
"""

from __future__ import annotations

import logging
import re

from ..workflow.models import Task

logger = logging.getLogger(__name__)

TASK_TITLE_PATTERN = re.compile(r"^###\s+.*?\b([A-Z]+\d+-\d+)\b\s*[:：)\-]*\s*(.*)$")
DEPENDENCY_PATTERN = re.compile(r"\*\*(?:Depends|Dependencies|依赖)\*\*\s*[:：]?\s*(.+)", re.IGNORECASE)
TARGET_FILE_PATTERN = re.compile(r"\*\*(?:File|文件)\*\*\s*[:：]?\s*(.+)", re.IGNORECASE)
CHECKLIST_PATTERN = re.compile(r"^\s*- \[[ xX]\] (.+)$")

NO_DEPENDENCY_MARKERS = {"none", "无", "-", "n/a"}


def _parse_dependencies(raw: str) -> list[str]:
    raw = raw.strip()
    if raw.lower() in NO_DEPENDENCY_MARKERS:
        return []
    return [d.strip() for d in re.split(r"[,，]", raw) if d.strip()]


def parse_task_list(markdown: str | None) -> list[Task]:
    if not markdown or not markdown.strip():
        logger.warning("Task list content is empty")
        return []

    tasks: list[Task] = []
    current: dict | None = None

    def _flush() -> None:
        if current is not None:
            tasks.append(
                Task(
                    id=current["id"],
                    title=current["title"],
                    description="\n".join(current["description"]),
                    dependencies=tuple(current["dependencies"]),
                    target_file=current["target_file"],
                )
            )

    for line in markdown.splitlines():
        title_match = TASK_TITLE_PATTERN.match(line)
        if title_match:
            _flush()
            task_id = title_match.group(1)
            current = {
                "id": task_id,
                "title": title_match.group(2).strip() or task_id,
                "description": [],
                "dependencies": [],
                "target_file": None,
            }
            logger.debug("Parsed task heading %s", task_id)
            continue

        if current is None:
            continue

        dep_match = DEPENDENCY_PATTERN.search(line)
        if dep_match:
            current["dependencies"] = _parse_dependencies(dep_match.group(1))
            continue

        file_match = TARGET_FILE_PATTERN.search(line)
        if file_match:
            current["target_file"] = file_match.group(1).strip()
            continue

        item_match = CHECKLIST_PATTERN.match(line)
        if item_match:
            current["description"].append(f"- {item_match.group(1)}")

    _flush()

    known = {t.id for t in tasks}
    for task in tasks:
        missing = [d for d in task.dependencies if d not in known]
        if missing:
            logger.warning("Task %s depends on unknown tasks: %s", task.id, ", ".join(missing))

    logger.info("Parsed %d tasks", len(tasks))
    return tasks
