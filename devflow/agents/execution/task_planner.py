"""Task planner agent: decomposes a design into a dependency-ordered task list."""

from __future__ import annotations

from devflow.agents.execution.base import ClaudeBackedAgent
from devflow.agents.prompts import build_task_list_prompt
from devflow.agents.task_parser import parse_task_list
from devflow.workflow.models import TaskList, TechnicalDesign


class TaskPlannerAgent(ClaudeBackedAgent):
    name: str = "task_planner"
    stage: str = "task list"

    async def generate_task_list(self, technical_design: TechnicalDesign) -> TaskList:
        markdown = await self._run_claude(build_task_list_prompt(technical_design.content))
        return TaskList(content=markdown, tasks=tuple(parse_task_list(markdown)))
