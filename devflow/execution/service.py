"""Workflow service: drives a workflow through the pipeline stages.

Every generate call validates and saves its *start* transition before any
generation happens, so an invalid request fails fast at the caller. The
generation itself either runs inline (``wait=True``) or as a background
task on the running event loop; ``drain()`` awaits the latter.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable

from devflow.agents.execution.registry import GeneratorSet
from devflow.agents.repo_context import describe_repository
from devflow.execution.config import RunConfig
from devflow.workflow.aggregate import Workflow
from devflow.workflow.exceptions import (
    ConcurrentModificationError,
    DocumentNotAvailableError,
    ValidationError,
    WorkflowNotFoundError,
)
from devflow.workflow.interface import WorkflowRepository
from devflow.workflow.models import Specification, Stage, TaskList, TaskStatus, TechnicalDesign
from devflow.workflow.progress import is_progress_consistent
from devflow.workflow.rules import (
    validate_specification,
    validate_technical_design,
    validate_workflow_name,
)
from devflow.workflow.transitions import is_valid_transition

logger = logging.getLogger(__name__)

Job = Callable[[Workflow], Awaitable[None]]


class WorkflowService:
    """Application service over a WorkflowRepository and a GeneratorSet."""

    def __init__(
        self,
        repository: WorkflowRepository,
        generators: GeneratorSet,
        config: RunConfig | None = None,
    ):
        self._repository = repository
        self._generators = generators
        self._config = config or RunConfig()
        self._background: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_workflow(self, workflow_id: str) -> Workflow:
        workflow = await self._repository.find_by_id(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)
        return workflow

    async def get_status(self, workflow_id: str) -> dict[str, Any]:
        return self._status(await self.get_workflow(workflow_id))

    async def get_progress(self, workflow_id: str) -> dict[str, Any]:
        """Status plus task counts and an audit of the stored progress value."""
        workflow = await self.get_workflow(workflow_id)
        data = self._status(workflow)
        task_list = workflow.task_list
        task_progress = task_list.progress() if task_list is not None else None
        data["completed_tasks"] = task_list.count(TaskStatus.COMPLETED) if task_list else 0
        data["failed_tasks"] = task_list.count(TaskStatus.FAILED) if task_list else 0
        data["total_tasks"] = len(task_list) if task_list else 0
        data["consistent"] = is_progress_consistent(
            workflow.stage, workflow.progress, task_progress
        )
        return data

    async def list_workflows(self, repository_id: int | None = None) -> list[dict[str, Any]]:
        if repository_id is None:
            workflows = await self._repository.find_all()
        else:
            workflows = await self._repository.find_by_repository(repository_id)
        return [self._status(w) for w in workflows]

    async def get_specification(self, workflow_id: str) -> Specification:
        workflow = await self.get_workflow(workflow_id)
        if workflow.specification is None:
            raise DocumentNotAvailableError(workflow_id, "specification")
        return workflow.specification

    async def get_technical_design(self, workflow_id: str) -> TechnicalDesign:
        workflow = await self.get_workflow(workflow_id)
        if workflow.technical_design is None:
            raise DocumentNotAvailableError(workflow_id, "technical design")
        return workflow.technical_design

    async def get_task_list(self, workflow_id: str) -> TaskList:
        workflow = await self.get_workflow(workflow_id)
        if workflow.task_list is None:
            raise DocumentNotAvailableError(workflow_id, "task list")
        return workflow.task_list

    @staticmethod
    def _status(workflow: Workflow) -> dict[str, Any]:
        return {
            "id": workflow.id,
            "name": workflow.name,
            "repository_id": workflow.repository_id,
            "created_by": workflow.created_by,
            "stage": workflow.stage.value,
            "stage_label": workflow.stage_label,
            "progress": workflow.progress,
            "failure_reason": workflow.failure_reason,
            "created_at": workflow.created_at.isoformat(),
            "updated_at": workflow.updated_at.isoformat(),
        }

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_workflow(self, name: str, repository_id: int, created_by: str) -> Workflow:
        validate_workflow_name(name, max_length=self._config.max_name_length)
        workflow = Workflow.create(name.strip(), repository_id, created_by)
        await self._repository.save(workflow)
        logger.info("Created workflow %s (%s)", workflow.id, workflow.name)
        return workflow

    async def generate_specification(
        self,
        workflow_id: str,
        prd_content: str,
        document_paths: list[str] | tuple[str, ...] = (),
        wait: bool = True,
    ) -> Workflow:
        if prd_content is None or not prd_content.strip():
            raise ValidationError("Requirements content must not be empty")
        workflow = await self.get_workflow(workflow_id)
        workflow.start_spec_generation()
        await self._repository.save(workflow)
        logger.info("Workflow %s: generating specification", workflow.id)

        async def job(wf: Workflow) -> None:
            logger.debug("Calling specification generator for %s", wf.id)
            spec = await self._generators.specification.generate_specification(
                prd_content, list(document_paths)
            )
            validate_specification(spec, min_length=self._config.min_document_length)
            wf.complete_spec_generation(spec)
            await self._repository.save(wf)
            logger.info("Workflow %s: specification generated", wf.id)

        return await self._dispatch(workflow, "specification", job, wait)

    async def generate_technical_design(self, workflow_id: str, wait: bool = True) -> Workflow:
        workflow = await self.get_workflow(workflow_id)
        workflow.start_tech_design()
        await self._repository.save(workflow)
        logger.info("Workflow %s: generating technical design", workflow.id)

        async def job(wf: Workflow) -> None:
            context = describe_repository(self._config.repository_root)
            logger.debug("Calling technical design generator for %s", wf.id)
            design = await self._generators.technical_design.generate_technical_design(
                wf.specification, context
            )
            previous = wf.technical_design
            if previous is not None:
                design = previous.revise_to(design.content)
            validate_technical_design(design, min_length=self._config.min_document_length)
            wf.complete_tech_design(design)
            await self._repository.save(wf)
            logger.info(
                "Workflow %s: technical design v%d generated", wf.id, design.version
            )

        return await self._dispatch(workflow, "technical design", job, wait)

    async def update_technical_design(self, workflow_id: str, content: str) -> Workflow:
        workflow = await self.get_workflow(workflow_id)
        workflow.revise_tech_design(content)
        validate_technical_design(
            workflow.technical_design, min_length=self._config.min_document_length
        )
        await self._repository.save(workflow)
        logger.info(
            "Workflow %s: technical design revised to v%d",
            workflow.id, workflow.technical_design.version,
        )
        return workflow

    async def approve_technical_design(self, workflow_id: str) -> Workflow:
        workflow = await self.get_workflow(workflow_id)
        workflow.approve_tech_design()
        await self._repository.save(workflow)
        logger.info("Workflow %s: technical design approved", workflow.id)
        return workflow

    async def generate_task_list(self, workflow_id: str, wait: bool = True) -> Workflow:
        workflow = await self.get_workflow(workflow_id)
        workflow.start_task_list_generation()
        await self._repository.save(workflow)
        logger.info("Workflow %s: generating task list", workflow.id)

        async def job(wf: Workflow) -> None:
            logger.debug("Calling task list generator for %s", wf.id)
            task_list = await self._generators.task_list.generate_task_list(wf.technical_design)
            unresolved = task_list.unresolved_dependencies()
            if unresolved:
                logger.warning("Workflow %s: unresolved task dependencies %s", wf.id, unresolved)
            wf.complete_task_list_generation(task_list)
            await self._repository.save(wf)
            logger.info("Workflow %s: task list generated (%d tasks)", wf.id, len(task_list))

        return await self._dispatch(workflow, "task list", job, wait)

    async def start_code_generation(self, workflow_id: str, wait: bool = True) -> Workflow:
        workflow = await self.get_workflow(workflow_id)
        workflow.start_code_generation()
        await self._repository.save(workflow)
        logger.info("Workflow %s: generating code", workflow.id)
        return await self._dispatch(workflow, "code", self._generate_code, wait)

    async def cancel_workflow(self, workflow_id: str, reason: str) -> Workflow:
        workflow = await self.get_workflow(workflow_id)
        workflow.cancel(reason)
        await self._repository.save(workflow)
        logger.info("Workflow %s cancelled: %s", workflow.id, reason)
        return workflow

    async def delete_workflow(self, workflow_id: str) -> None:
        await self.get_workflow(workflow_id)
        await self._repository.delete(workflow_id)
        logger.info("Deleted workflow %s", workflow_id)

    async def drain(self) -> None:
        """Wait for every background generation to finish."""
        while self._background:
            await asyncio.gather(*list(self._background))

    # ------------------------------------------------------------------
    # Generation plumbing
    # ------------------------------------------------------------------

    async def _dispatch(self, workflow: Workflow, stage: str, job: Job, wait: bool) -> Workflow:
        if wait:
            return await self._run_job(workflow, stage, job)
        task = asyncio.create_task(self._run_job(copy.deepcopy(workflow), stage, job))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return workflow

    async def _run_job(self, workflow: Workflow, stage: str, job: Job) -> Workflow:
        """Run one generation job; any failure moves the workflow to FAILED.

        Returns the workflow as it ended up. When the failure cannot be
        recorded the original error is re-raised.
        """
        try:
            await job(workflow)
        except ConcurrentModificationError:
            logger.warning(
                "Workflow %s changed during %s generation; result discarded",
                workflow.id, stage,
            )
        except Exception as exc:
            logger.exception("Workflow %s: %s generation failed", workflow.id, stage)
            try:
                failed = await self._fail(workflow, str(exc))
            except Exception:
                logger.exception("Workflow %s: could not record the failure", workflow.id)
                failed = None
            if failed is None:
                raise
            return failed
        return workflow

    async def _fail(self, workflow: Workflow, reason: str) -> Workflow | None:
        """Mark FAILED and save; None when no stored copy can be failed."""
        if not is_valid_transition(workflow.stage, Stage.FAILED):
            # The job advanced the stage before its save raised; the stored copy did not.
            stored = await self._repository.find_by_id(workflow.id)
            if stored is None or not is_valid_transition(stored.stage, Stage.FAILED):
                logger.error(
                    "Workflow %s cannot be marked failed from %s", workflow.id, workflow.stage.value
                )
                return None
            workflow = stored
        workflow.mark_as_failed(reason)
        try:
            await self._repository.save(workflow)
        except ConcurrentModificationError:
            logger.warning("Workflow %s changed concurrently; failure not recorded", workflow.id)
        return workflow

    async def _generate_code(self, workflow: Workflow) -> None:
        """Generate code task by task, in dependency order.

        Runs at most ``len(tasks) * max_rounds_factor`` rounds. A failing
        task is recorded and the loop carries on with whatever else is
        executable. Once nothing is left to run the workflow either
        completes or fails naming the tasks that did not finish.
        """
        task_list = workflow.task_list
        total = len(task_list) if task_list is not None else 0
        max_rounds = total * self._config.max_rounds_factor

        for round_no in range(1, max_rounds + 1):
            ready = workflow.task_list.executable_tasks()
            if not ready:
                break
            logger.debug(
                "Workflow %s: round %d, %d executable tasks", workflow.id, round_no, len(ready)
            )
            for task in ready:
                workflow.mark_task_in_progress(task.id)
                await self._repository.save(workflow)
                try:
                    code = await self._generators.code.generate_code(
                        workflow.task_list.get(task.id), workflow
                    )
                except Exception as exc:
                    logger.exception("Workflow %s: task %s failed", workflow.id, task.id)
                    workflow.fail_task(task.id, str(exc))
                    await self._repository.save(workflow)
                    continue
                workflow.complete_task(task.id, code)
                await self._repository.save(workflow)
                logger.info(
                    "Workflow %s: task %s done (%d%%)", workflow.id, task.id, workflow.progress
                )
            if workflow.stage is not Stage.CODE_GENERATING:
                break

        if workflow.stage is not Stage.CODE_GENERATING:
            logger.info("Workflow %s: code generation completed", workflow.id)
            return

        unfinished = [
            t for t in (workflow.task_list.tasks if workflow.task_list else ())
            if t.status not in (TaskStatus.COMPLETED, TaskStatus.SKIPPED)
        ]
        if not unfinished:
            workflow.complete_code_generation()
            await self._repository.save(workflow)
            logger.info("Workflow %s: code generation completed", workflow.id)
            return

        failed = [t.id for t in unfinished if t.status is TaskStatus.FAILED]
        blocked = [t.id for t in unfinished if t.status is not TaskStatus.FAILED]
        parts = []
        if failed:
            parts.append(f"failed tasks {', '.join(failed)}")
        if blocked:
            parts.append(f"blocked tasks {', '.join(blocked)}")
        reason = "Code generation stalled: " + "; ".join(parts)
        logger.warning("Workflow %s: %s", workflow.id, reason)
        await self._fail(workflow, reason)
