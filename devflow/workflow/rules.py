"""Validation rules applied before payloads enter the aggregate."""

from __future__ import annotations

from .exceptions import ValidationError
from .models import Specification, TechnicalDesign


def _check_text(value: str | None, what: str, min_length: int) -> None:
    if value is None or not value.strip():
        raise ValidationError(f"{what} must not be empty")
    if len(value) < min_length:
        raise ValidationError(
            f"{what} is too short: {len(value)} characters, at least {min_length} required"
        )


def validate_workflow_name(name: str | None, max_length: int = 100) -> None:
    if name is None or not name.strip():
        raise ValidationError("Workflow name must not be empty")
    if len(name) > max_length:
        raise ValidationError(f"Workflow name exceeds {max_length} characters")


def validate_specification(spec: Specification | None, min_length: int = 1) -> None:
    """Both the requirements input and the generated text must be present.

    ``min_length`` applies to the generated content only.
    """
    if spec is None:
        raise ValidationError("Specification is required")
    _check_text(spec.prd_content, "Requirements content", 1)
    _check_text(spec.generated_content, "Specification content", min_length)


def validate_technical_design(design: TechnicalDesign | None, min_length: int = 1) -> None:
    if design is None:
        raise ValidationError("Technical design is required")
    _check_text(design.content, "Technical design content", min_length)
