"""Example 2: Let Claude drive a workflow through the MCP tools.

The workflow server exposes the service operations as tools; the agent
creates a workflow and pushes it through the pipeline. Generation itself
uses mock generators so only the driving agent talks to Claude.
"""

import asyncio
import os

os.environ.pop("CLAUDECODE", None)

from claude_agent_sdk import AssistantMessage, ClaudeAgentOptions, ClaudeSDKClient

from devflow.adapters.memory import InMemoryWorkflowRepository
from devflow.execution import create_service
from devflow.tools.server import create_workflow_server


async def main():
    service = create_service(InMemoryWorkflowRepository(), mock=True)
    server = create_workflow_server(service)

    options = ClaudeAgentOptions(
        mcp_servers={"devflow": server},
        allowed_tools=[
            "mcp__devflow__create_workflow",
            "mcp__devflow__generate_specification",
            "mcp__devflow__generate_technical_design",
            "mcp__devflow__approve_technical_design",
            "mcp__devflow__generate_task_list",
            "mcp__devflow__start_code_generation",
            "mcp__devflow__get_workflow_progress",
        ],
        permission_mode="acceptEdits",
        max_turns=20,
    )

    async with ClaudeSDKClient(options=options) as client:
        await client.query(
            "Create a workflow named 'Password reset' for repository 1. "
            "Generate its specification from this PRD, waiting for each step: "
            "'Users reset their password through an emailed one-time link.' "
            "Then generate and approve the technical design, generate the task "
            "list, run code generation and report the final progress."
        )

        async for message in client.receive_response():
            if isinstance(message, AssistantMessage):
                for block in message.content:
                    if hasattr(block, "text"):
                        print(block.text)
                    elif hasattr(block, "name"):
                        print(f"  [tool: {block.name}]")

    await service.drain()


if __name__ == "__main__":
    asyncio.run(main())
