"""Architect agent: drafts the technical design."""

from __future__ import annotations

from devflow.agents.execution.base import ClaudeBackedAgent
from devflow.agents.prompts import build_tech_design_prompt
from devflow.workflow.models import Specification, TechnicalDesign


class ArchitectAgent(ClaudeBackedAgent):
    name: str = "architect"
    stage: str = "technical design"

    async def generate_technical_design(
        self, specification: Specification, repository_context: str
    ) -> TechnicalDesign:
        prompt = build_tech_design_prompt(specification.generated_content, repository_context)
        return TechnicalDesign(content=await self._run_claude(prompt))
