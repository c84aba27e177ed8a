"""ORM step: install Prisma, write the schema, and point .env at the database.

Connection questions are gated on the database kind: a SQLite store is a
local file, so name/host/port/user/password are never asked for it and
never appear in the answers.
"""

from __future__ import annotations

from pathlib import Path

from agency_ui.models.config import ScaffoldConfig
from agency_ui.scaffold.merge import ensure_dir, merge_env_file, upsert_json_keys, write_text
from agency_ui.scaffold.package_manager import add_command, exec_command
from agency_ui.scaffold.questions import Answers, Choice, Question, QuestionKind, collect, when
from agency_ui.scaffold.renderer import (
    DEFAULT_PORTS,
    FALLBACK_PORT,
    KNOWN_DATABASES,
    DatabaseConfig,
    load_static_template,
    render_env,
    render_prisma_schema,
)
from agency_ui.scaffold.steps.base import SetupStep, StepContext, SubAction

DB_TYPES: list[Choice] = [Choice(title, value) for value, title in KNOWN_DATABASES.items()]

SEED_SCRIPT = "tsx prisma/seed.ts"


def _needs_server(answers: Answers) -> bool:
    return answers.get("db_type") != "sqlite"


def default_port(answers: Answers) -> str:
    return DEFAULT_PORTS.get(answers.get("db_type", ""), FALLBACK_PORT)


def database_questions(config: ScaffoldConfig) -> list[Question]:
    return [
        Question(
            key="db_type",
            message="Select database type",
            kind=QuestionKind.select,
            choices=DB_TYPES,
            default=config.default_database,
        ),
        Question(
            key="db_name",
            message="Database name",
            kind=when(_needs_server, QuestionKind.text),
            default="myapp_db",
        ),
        Question(
            key="db_host",
            message="Database host",
            kind=when(_needs_server, QuestionKind.text),
            default="localhost",
        ),
        Question(
            key="db_port",
            message="Database port",
            kind=when(_needs_server, QuestionKind.text),
            default=default_port,
        ),
        Question(
            key="db_user",
            message="Database username",
            kind=when(_needs_server, QuestionKind.text),
            default="root",
        ),
        Question(
            key="db_password",
            message="Database password",
            kind=when(_needs_server, QuestionKind.password),
            default="",
        ),
    ]


def configure_prisma(project_root: Path, database: DatabaseConfig) -> None:
    """Write schema and seed, and register the seed script in package.json."""
    prisma_dir = project_root / "prisma"
    ensure_dir(prisma_dir)
    write_text(prisma_dir / "schema.prisma", render_prisma_schema(database.db_type))
    write_text(prisma_dir / "seed.ts", load_static_template("prisma/seed.ts"))
    upsert_json_keys(
        project_root / "package.json",
        {
            "prisma": {"seed": SEED_SCRIPT},
            "devDependencies": {"tsx": "^4.6.2"},
        },
    )


class PrismaStep(SetupStep):
    """Install and configure Prisma for the chosen database."""

    name = "setup-prisma"
    title = "Setup Prisma ORM"

    def plan(self, ctx: StepContext) -> list[SubAction]:
        answers = collect(database_questions(ctx.config), ctx.prompter)
        database = DatabaseConfig(**answers)

        manager = ctx.package_manager
        root = ctx.target().path
        schema_exists = (root / "prisma" / "schema.prisma").exists()

        def install() -> None:
            ctx.run(add_command(manager, ["prisma", "@prisma/client"]))
            # prisma init refuses to overwrite an existing schema
            if not schema_exists:
                ctx.run(exec_command(manager, "prisma init"))

        def migrate() -> None:
            ctx.run(exec_command(manager, "prisma migrate dev --name init"))
            ctx.run(exec_command(manager, "prisma db seed"))

        actions = [
            SubAction("Prisma installed", install),
            SubAction("Prisma schema and seed written", lambda: configure_prisma(root, database)),
            SubAction("tsx installed", lambda: ctx.run(add_command(manager, ["tsx"], dev=True))),
            SubAction(
                ".env updated",
                lambda: merge_env_file(root / ".env", render_env(database), overwrite=True),
            ),
        ]
        if ctx.config.run_migrations:
            actions.append(SubAction("Database migrated and seeded", migrate))
        return actions
