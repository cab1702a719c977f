"""Code writer agent: generates the code for one task."""

from __future__ import annotations

import re

from devflow.agents.execution.base import ClaudeBackedAgent
from devflow.agents.prompts import build_code_prompt
from devflow.workflow.aggregate import Workflow
from devflow.workflow.models import Task

_FENCE = re.compile(r"^```[\w+-]*\n(.*?)\n```\s*$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Drop a single surrounding markdown fence, if the model added one."""
    m = _FENCE.match(text.strip())
    return m.group(1) if m else text


class CodeWriterAgent(ClaudeBackedAgent):
    name: str = "code_writer"
    stage: str = "code"

    async def generate_code(self, task: Task, workflow: Workflow) -> str:
        output = await self._run_claude(build_code_prompt(task, workflow))
        return strip_code_fence(output)
