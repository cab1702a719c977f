"""Example 1: Run a workflow end to end with mock generators.

No Claude calls are made; the in-memory repository and canned
generators show the stage sequence and progress values.
"""

import asyncio

from devflow.adapters.memory import InMemoryWorkflowRepository
from devflow.execution import create_service

PRD = """\
Users must be able to reset their password. A reset link is emailed,
expires after one hour and can be used only once.
"""


async def main():
    service = create_service(InMemoryWorkflowRepository(), mock=True)

    workflow = await service.create_workflow("Password reset", repository_id=1, created_by="demo")
    print(f"{workflow.id}: {workflow.stage_label} ({workflow.progress}%)")

    steps = [
        lambda: service.generate_specification(workflow.id, PRD),
        lambda: service.generate_technical_design(workflow.id),
        lambda: service.approve_technical_design(workflow.id),
        lambda: service.generate_task_list(workflow.id),
        lambda: service.start_code_generation(workflow.id),
    ]
    for step in steps:
        workflow = await step()
        print(f"{workflow.id}: {workflow.stage_label} ({workflow.progress}%)")

    for task in workflow.task_list.tasks:
        print(f"  {task.id} [{task.status.value}] {task.title}")


if __name__ == "__main__":
    asyncio.run(main())
