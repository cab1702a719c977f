from devflow.agents.execution.architect import ArchitectAgent
from devflow.agents.execution.code_writer import CodeWriterAgent
from devflow.agents.execution.mocks import (
    MockArchitect,
    MockCodeWriter,
    MockSpecWriter,
    MockTaskPlanner,
)
from devflow.agents.execution.protocol import (
    CodeGenerator,
    SpecificationGenerator,
    TaskListGenerator,
    TechnicalDesignGenerator,
)
from devflow.agents.execution.registry import GeneratorSet
from devflow.agents.execution.spec_writer import SpecWriterAgent
from devflow.agents.execution.task_planner import TaskPlannerAgent
from devflow.agents.execution.types import AgentResult

__all__ = [
    "AgentResult",
    "ArchitectAgent",
    "CodeGenerator",
    "CodeWriterAgent",
    "GeneratorSet",
    "MockArchitect",
    "MockCodeWriter",
    "MockSpecWriter",
    "MockTaskPlanner",
    "SpecificationGenerator",
    "SpecWriterAgent",
    "TaskListGenerator",
    "TaskPlannerAgent",
    "TechnicalDesignGenerator",
]
