"""Claude executor for the generation stages.

Each call is one tool-less ``query()`` whose text answer becomes the
generated document.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

# The SDK spawns the claude CLI, which refuses to start nested while this is set.
os.environ.pop("CLAUDECODE", None)

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    TextBlock,
    query,
)

from devflow.agents.execution.types import AgentResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You produce software delivery documents and code for an automated "
    "pipeline. Answer with the requested content only."
)


class ClaudeCodeExecutor:
    """Runs one generation prompt and returns its text.

    Failures of any kind come back as an unsuccessful AgentResult; the
    calling agent decides how to report them.
    """

    def __init__(
        self,
        model: str = "sonnet",
        max_turns: int = 25,
        system_prompt: str = SYSTEM_PROMPT,
        permission_mode: str = "default",
    ) -> None:
        self._model = model
        self._max_turns = max_turns
        self._system_prompt = system_prompt
        self._permission_mode = permission_mode

    def _options(self, working_dir: Path, allowed_tools: list[str] | None) -> ClaudeAgentOptions:
        return ClaudeAgentOptions(
            model=self._model,
            cwd=working_dir,
            system_prompt=self._system_prompt,
            allowed_tools=list(allowed_tools or ()),
            permission_mode=self._permission_mode,
            max_turns=self._max_turns,
        )

    async def run(
        self,
        prompt: str,
        working_dir: Path,
        timeout: int = 300,
        allowed_tools: list[str] | None = None,
    ) -> AgentResult:
        options = self._options(working_dir, allowed_tools)
        logger.debug("Sending %d-char prompt to %s", len(prompt), self._model)
        try:
            async with asyncio.timeout(timeout):
                return await self._collect(prompt, options)
        except TimeoutError:
            logger.warning("Claude run timed out after %ss", timeout)
            return AgentResult(success=False, output=f"Claude execution timed out after {timeout}s")
        except Exception as e:
            logger.exception("Claude execution failed")
            return AgentResult(success=False, output=f"Claude execution failed: {e}")

    async def _collect(self, prompt: str, options: ClaudeAgentOptions) -> AgentResult:
        chunks: list[str] = []
        final: ResultMessage | None = None
        async for message in query(prompt=prompt, options=options):
            if isinstance(message, AssistantMessage):
                chunks.extend(b.text for b in message.content if isinstance(b, TextBlock))
            elif isinstance(message, ResultMessage):
                final = message

        if final is None:
            return AgentResult(success=False, output="\n".join(chunks).strip() or "(no output)")

        # The result repeats the last assistant text and wins over the chunks.
        text = (final.result or "\n".join(chunks)).strip()
        return AgentResult(
            success=bool(text) and not final.is_error,
            output=text or "(no output)",
            cost_usd=final.total_cost_usd,
            num_turns=final.num_turns,
        )
