"""Shared plumbing for Claude-backed generators."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from devflow.workflow.exceptions import GenerationError

if TYPE_CHECKING:
    from devflow.agents.execution.claude_code import ClaudeCodeExecutor

logger = logging.getLogger(__name__)


class ClaudeBackedAgent:
    """Base for generators that turn one prompt into one block of text."""

    stage: str = "content"

    def __init__(
        self,
        executor: ClaudeCodeExecutor | None = None,
        working_dir: Path | None = None,
        timeout: int = 300,
    ) -> None:
        self._executor = executor
        self._working_dir = working_dir or Path(".")
        self._timeout = timeout

    async def _run_claude(self, prompt: str) -> str:
        """Run via claude-agent-sdk. Separated for testability."""
        if self._executor is None:
            raise RuntimeError(
                "No ClaudeCodeExecutor provided. "
                "Pass executor= to the constructor for real execution."
            )
        result = await self._executor.run(
            prompt=prompt,
            working_dir=self._working_dir,
            timeout=self._timeout,
        )
        if not result.success:
            raise GenerationError(self.stage, result.output)
        logger.debug(
            "%s generated: %d chars, %d turns, cost %s",
            self.stage, len(result.output), result.num_turns, result.cost_usd,
        )
        return result.output
