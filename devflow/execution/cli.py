"""CLI entry point for workflow execution.

Usage:
  python -m devflow.execution create <name> --repository-id N [--created-by USER]
  python -m devflow.execution status <workflow_id>
  python -m devflow.execution list [--repository-id N]
  python -m devflow.execution cancel <workflow_id> [--reason TEXT]
  python -m devflow.execution approve <workflow_id>
  python -m devflow.execution run <workflow_id> [--prd FILE] [--doc PATH ...] [--approve] [--mock]
  python -m devflow.execution board

Global options (before the subcommand):
  --store DIR  --config FILE  --log-level LEVEL  --log-file FILE
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Workflow orchestration CLI")
    parser.add_argument("--store", default=None, help="Workflow store directory (default: .devflow)")
    parser.add_argument("--config", default=None, help="YAML file with RunConfig overrides")
    parser.add_argument("--log-level", default="WARNING", help="Console log level")
    parser.add_argument("--log-file", default=None, help="Write JSON-lines logs to this file")
    subparsers = parser.add_subparsers(dest="command")

    create_parser = subparsers.add_parser("create", help="Create a workflow")
    create_parser.add_argument("name", help="Workflow name")
    create_parser.add_argument("--repository-id", type=int, required=True, help="Target repository id")
    create_parser.add_argument("--created-by", default=None, help="Creator (default: current user)")

    status_parser = subparsers.add_parser("status", help="Show workflow status")
    status_parser.add_argument("workflow_id", help="Workflow ID to check")

    list_parser = subparsers.add_parser("list", help="List workflows")
    list_parser.add_argument("--repository-id", type=int, default=None, help="Filter by repository")

    cancel_parser = subparsers.add_parser("cancel", help="Cancel a workflow")
    cancel_parser.add_argument("workflow_id", help="Workflow ID to cancel")
    cancel_parser.add_argument("--reason", default="Cancelled from CLI", help="Cancellation reason")

    approve_parser = subparsers.add_parser("approve", help="Approve the technical design")
    approve_parser.add_argument("workflow_id", help="Workflow ID to approve")

    run_parser = subparsers.add_parser("run", help="Advance a workflow through the pipeline")
    run_parser.add_argument("workflow_id", help="Workflow ID to run")
    run_parser.add_argument("--prd", default=None, help="PRD file (required from the draft stage)")
    run_parser.add_argument("--doc", action="append", default=[], help="Reference document path")
    run_parser.add_argument("--approve", action="store_true", help="Approve the technical design without stopping")
    run_parser.add_argument("--mock", action="store_true", help="Use mock generators (skip real execution)")
    run_parser.add_argument("--model", default=None, help="Claude model (default: sonnet)")
    run_parser.add_argument("--repository-root", default=None, help="Local checkout for the design prompt")

    subparsers.add_parser("board", help="Open the workflow board")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    from devflow.log import setup_logging

    setup_logging(args.log_level.upper(), Path(args.log_file) if args.log_file else None)

    if args.command == "board":
        from devflow_board.app import run_board

        run_board(_load_config(args).storage_dir)
        return

    commands = {
        "create": _create_command,
        "status": _status_command,
        "list": _list_command,
        "cancel": _cancel_command,
        "approve": _approve_command,
        "run": _run_command,
    }
    asyncio.run(commands[args.command](args))


def _load_config(args):
    from devflow.execution.config import RunConfig

    config = RunConfig.from_yaml(Path(args.config)) if args.config else RunConfig()
    if args.store:
        config.storage_dir = Path(args.store)
    if getattr(args, "model", None):
        config.model = args.model
    if getattr(args, "repository_root", None):
        config.repository_root = Path(args.repository_root)
    return config


def _service(args, mock: bool = True):
    """Commands other than ``run`` never generate, so they get mock generators."""
    from devflow.adapters.yaml_store import YamlWorkflowRepository
    from devflow.execution.convenience import create_service

    config = _load_config(args)
    return create_service(YamlWorkflowRepository(config.storage_dir), config, mock=mock)


def _print_status(status: dict) -> None:
    print(f"Workflow {status['id']}: {status['name']}")
    print(f"  Stage: {status['stage_label']} ({status['stage']})")
    print(f"  Progress: {status['progress']}%")
    if "total_tasks" in status and status["total_tasks"]:
        print(f"  Tasks: {status['completed_tasks']}/{status['total_tasks']} completed")
    if status.get("consistent") is False:
        print("  Warning: stored progress does not match the stage")


async def _create_command(args) -> None:
    from devflow.workflow.exceptions import WorkflowError

    service = _service(args)
    try:
        workflow = await service.create_workflow(
            args.name, args.repository_id, args.created_by or getpass.getuser()
        )
    except WorkflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Created workflow {workflow.id}")


async def _status_command(args) -> None:
    from devflow.workflow.exceptions import WorkflowNotFoundError

    service = _service(args)
    try:
        _print_status(await service.get_progress(args.workflow_id))
    except WorkflowNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


async def _list_command(args) -> None:
    service = _service(args)
    workflows = await service.list_workflows(args.repository_id)
    if not workflows:
        print("No workflows found.")
        return
    for status in workflows:
        print(f"{status['id']:<8} {status['progress']:>3}%  {status['stage_label']:<30} {status['name']}")


async def _cancel_command(args) -> None:
    from devflow.workflow.exceptions import WorkflowError

    service = _service(args)
    try:
        workflow = await service.cancel_workflow(args.workflow_id, args.reason)
    except WorkflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Workflow {workflow.id}: {workflow.stage_label}")


async def _approve_command(args) -> None:
    from devflow.workflow.exceptions import WorkflowError

    service = _service(args)
    try:
        workflow = await service.approve_technical_design(args.workflow_id)
    except WorkflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Workflow {workflow.id}: {workflow.stage_label}")


async def _run_command(args) -> None:
    from devflow.workflow.exceptions import WorkflowError
    from devflow.workflow.models import Stage

    service = _service(args, mock=args.mock)
    prd = Path(args.prd).read_text(encoding="utf-8") if args.prd else None

    try:
        workflow = await service.get_workflow(args.workflow_id)
        while True:
            stage = workflow.stage
            if stage is Stage.DRAFT:
                if prd is None:
                    print("Error: --prd is required to start a draft workflow", file=sys.stderr)
                    sys.exit(1)
                workflow = await service.generate_specification(workflow.id, prd, args.doc)
            elif stage is Stage.SPEC_GENERATED:
                workflow = await service.generate_technical_design(workflow.id)
            elif stage is Stage.TECH_DESIGN_GENERATED:
                if not args.approve:
                    print(f"Technical design v{workflow.technical_design.version} ready for review.")
                    print(f"Approve with: python -m devflow.execution approve {workflow.id}")
                    break
                workflow = await service.approve_technical_design(workflow.id)
            elif stage is Stage.TECH_DESIGN_APPROVED:
                workflow = await service.generate_task_list(workflow.id)
            elif stage is Stage.TASK_LIST_GENERATED:
                workflow = await service.start_code_generation(workflow.id)
            else:
                break
            print(f"  {workflow.stage_label} ({workflow.progress}%)")
    except WorkflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    _print_status(await service.get_progress(workflow.id))
    if workflow.stage is Stage.FAILED:
        sys.exit(1)


if __name__ == "__main__":
    main()
