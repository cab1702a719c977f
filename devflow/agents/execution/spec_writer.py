"""Specification writer agent using claude-agent-sdk."""

from __future__ import annotations

from datetime import datetime, timezone

from devflow.agents.execution.base import ClaudeBackedAgent
from devflow.agents.prompts import build_spec_prompt
from devflow.workflow.models import Specification


class SpecWriterAgent(ClaudeBackedAgent):
    """Turns a requirements document into a specification."""

    name: str = "spec_writer"
    stage: str = "specification"

    async def generate_specification(
        self, prd_content: str, document_paths: list[str]
    ) -> Specification:
        content = await self._run_claude(build_spec_prompt(prd_content, document_paths))
        return Specification(
            prd_content=prd_content,
            generated_content=content,
            document_paths=tuple(document_paths),
            generated_at=datetime.now(timezone.utc),
        )
