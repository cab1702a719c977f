"""Result type shared by the executor and the generation agents."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class AgentResult:
    """Text produced by one Claude run, plus its usage when reported."""

    success: bool
    output: str
    cost_usd: float | None = None
    num_turns: int = 0
