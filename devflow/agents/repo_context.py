"""Summarise a local repository checkout for the technical-design prompt."""

from __future__ import annotations

from pathlib import Path

IGNORED_NAMES = {
    ".git", ".hg", ".svn", "__pycache__", "node_modules", ".venv", "venv",
    ".mypy_cache", ".pytest_cache", ".tox", "dist", "build", ".devflow",
}

NO_CHECKOUT = (
    "## Repository structure\n\n"
    "(no local checkout configured; infer the layout from the specification)"
)


def describe_repository(
    root: Path | None,
    max_depth: int = 3,
    max_entries: int = 200,
) -> str:
    """Render an indented directory tree of ``root``.

    Hidden entries and common build/cache directories are skipped. Output
    stops after ``max_entries`` lines.
    """
    if root is None or not Path(root).is_dir():
        return NO_CHECKOUT

    root = Path(root)
    lines = ["## Repository structure", "", f"{root.name}/"]
    count = 0

    def walk(directory: Path, depth: int) -> bool:
        nonlocal count
        entries = sorted(
            (e for e in directory.iterdir()
             if e.name not in IGNORED_NAMES and not e.name.startswith(".")),
            key=lambda e: (not e.is_dir(), e.name),
        )
        for entry in entries:
            if count >= max_entries:
                lines.append("  " * depth + "...")
                return False
            count += 1
            suffix = "/" if entry.is_dir() else ""
            lines.append("  " * depth + f"- {entry.name}{suffix}")
            if entry.is_dir() and depth < max_depth:
                if not walk(entry, depth + 1):
                    return False
        return True

    walk(root, 1)
    return "\n".join(lines)
