from .memory import InMemoryWorkflowRepository
from .yaml_store import YamlWorkflowRepository

__all__ = ["InMemoryWorkflowRepository", "YamlWorkflowRepository"]
