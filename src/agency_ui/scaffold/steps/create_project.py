"""Base project step: lay down a Next.js skeleton and install it.

Every later step works inside the directory this step creates, so a
failure here aborts the whole pipeline.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path
from typing import Any

from agency_ui.models.config import ScaffoldConfig
from agency_ui.models.step import FatalityPolicy
from agency_ui.models.target import PackageManager, ProjectTarget
from agency_ui.scaffold.merge import FileSystemError, ensure_dir, upsert_json_keys, write_text
from agency_ui.scaffold.package_manager import install_command
from agency_ui.scaffold.questions import Choice, Question, QuestionKind, collect
from agency_ui.scaffold.renderer import load_static_template
from agency_ui.scaffold.steps.base import SetupStep, StepContext, SubAction

PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9-_]+$")

# Static boilerplate: (template_name, output_path)
_FILE_MAP: list[tuple[str, str]] = [
    ("next/tsconfig.json", "tsconfig.json"),
    ("next/tailwind.config.ts", "tailwind.config.ts"),
    ("next/postcss.config.mjs", "postcss.config.mjs"),
    ("next/next.config.ts", "next.config.ts"),
    ("next/gitignore.txt", ".gitignore"),
    ("next/globals.css", "src/app/globals.css"),
    ("next/layout.tsx", "src/app/layout.tsx"),
    ("next/page.tsx", "src/app/page.tsx"),
]

_PACKAGE_MANAGER_CHOICES = [Choice(pm.value, pm.value) for pm in PackageManager]


def validate_project_name(name: str) -> str | None:
    """Return an error message if name is not a valid project name."""
    if not PROJECT_NAME_PATTERN.match(name):
        return (
            "Project name can only contain lowercase letters, numbers, "
            "hyphens, and underscores"
        )
    return None


def project_questions(config: ScaffoldConfig) -> list[Question]:
    """Questions asked before anything is written."""
    return [
        Question(
            key="project_name",
            message="What is your project named?",
            kind=QuestionKind.text,
            default=config.default_project_name,
            validate=validate_project_name,
            required=True,
            cancel_message="Project name is required. Initialization cancelled.",
        ),
        Question(
            key="package_manager",
            message="Which package manager should install dependencies?",
            kind=QuestionKind.select,
            choices=_PACKAGE_MANAGER_CHOICES,
            default=config.default_package_manager,
        ),
    ]


def overwrite_question(project_name: str) -> Question:
    """Confirmation asked only when the project directory already exists."""
    return Question(
        key="overwrite",
        message=f'Directory "{project_name}" already exists. Overwrite?',
        kind=QuestionKind.confirm,
        default=False,
        required=True,
        cancel_message="Initialization cancelled.",
    )


def base_manifest(project_name: str, manager: PackageManager) -> dict[str, Any]:
    """package.json content for a fresh project."""
    manifest: dict[str, Any] = {
        "name": project_name,
        "version": "0.1.0",
        "private": True,
        "scripts": {
            "dev": "next dev --turbopack",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        },
        "dependencies": {
            "react": "^18",
            "react-dom": "^18",
            "next": "^15.0.0",
        },
        "devDependencies": {
            "typescript": "^5",
            "@types/node": "^20",
            "@types/react": "^18",
            "@types/react-dom": "^18",
            "@tailwindcss/postcss": "^4",
            "tailwindcss": "^4",
        },
    }
    if manager == PackageManager.yarn:
        manifest["packageManager"] = "yarn@1.22.22"
    return manifest


def _remove_directory(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except OSError as exc:
        raise FileSystemError(path, "remove", exc.strerror or str(exc)) from exc


def write_skeleton(target: ProjectTarget, project_name: str) -> list[str]:
    """Write the Next.js skeleton into target.

    Returns:
        List of written file paths, relative to the project root.
    """
    root = target.path
    ensure_dir(root)

    upsert_json_keys(root / "package.json", base_manifest(project_name, target.package_manager))
    created = ["package.json"]

    for template_name, output_path in _FILE_MAP:
        write_text(root / output_path, load_static_template(template_name))
        created.append(output_path)

    ensure_dir(root / "public")

    # Empty lockfile stops yarn from adopting an enclosing workspace
    if target.package_manager == PackageManager.yarn:
        write_text(root / "yarn.lock", "")
        created.append("yarn.lock")

    return created


class CreateProjectStep(SetupStep):
    """Create the project directory, its skeleton files, and install them."""

    name = "create-next-project"
    title = "Create Next.js Project"
    policy = FatalityPolicy.abort

    def plan(self, ctx: StepContext) -> list[SubAction]:
        answers = collect(project_questions(ctx.config), ctx.prompter)
        project_name: str = answers["project_name"]
        project_path = (ctx.project_path / project_name).resolve()

        actions: list[SubAction] = []
        if project_path.exists():
            collect([overwrite_question(project_name)], ctx.prompter)
            actions.append(
                SubAction(
                    f"Removed existing {project_name}/",
                    lambda: _remove_directory(project_path),
                )
            )

        target = ProjectTarget(
            path=project_path,
            package_manager=PackageManager(answers["package_manager"]),
        )
        ctx.bind(target)

        actions.append(
            SubAction(
                "Next.js project structure created",
                lambda: write_skeleton(target, project_name),
            )
        )
        actions.append(
            SubAction(
                f"Dependencies installed with {target.package_manager.value}",
                lambda: ctx.run(install_command(target.package_manager)),
            )
        )
        return actions

    def result_path(self, ctx: StepContext) -> Path | None:
        return ctx.project_path
