"""Tests for the MCP server factory."""

import inspect

from devflow.adapters.memory import InMemoryWorkflowRepository
from devflow.execution.convenience import create_mock_generators
from devflow.execution.service import WorkflowService
from devflow.tools import handlers
from devflow.tools.server import create_workflow_server


def test_server_config():
    service = WorkflowService(InMemoryWorkflowRepository(), create_mock_generators())
    server = create_workflow_server(service)
    assert server["type"] == "sdk"
    assert server["name"] == "devflow_workflow"


def test_every_handler_is_exposed():
    source = inspect.getsource(create_workflow_server)
    names = [n for n in dir(handlers) if n.endswith("_handler")]
    assert len(names) == 14
    for name in names:
        assert f"handlers.{name}(" in source, name
