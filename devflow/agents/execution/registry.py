"""Bundle of the generators used by each pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass

from devflow.agents.execution.protocol import (
    CodeGenerator,
    SpecificationGenerator,
    TaskListGenerator,
    TechnicalDesignGenerator,
)


@dataclass
class GeneratorSet:
    specification: SpecificationGenerator
    technical_design: TechnicalDesignGenerator
    task_list: TaskListGenerator
    code: CodeGenerator
