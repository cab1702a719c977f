from .prompts import build_code_prompt, build_spec_prompt, build_task_list_prompt, build_tech_design_prompt
from .repo_context import describe_repository
from .task_parser import parse_task_list

__all__ = [
    "build_spec_prompt",
    "build_tech_design_prompt",
    "build_task_list_prompt",
    "build_code_prompt",
    "describe_repository",
    "parse_task_list",
]
