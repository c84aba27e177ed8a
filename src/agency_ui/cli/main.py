"""agency-ui command-line entry point.

``init`` runs the whole scaffolding pipeline; each ``create-*``/``setup-*``
command runs a single step against an existing directory.
"""

import typer

from agency_ui import __version__
from agency_ui.cli.init_cmd import init
from agency_ui.cli.setup_cmds import (
    create_next_project,
    setup_auth,
    setup_prisma,
    setup_shadcn,
    setup_ui,
)

app = typer.Typer(
    name="agency-ui",
    help="Scaffold a Next.js project with auth, shadcn/ui, Prisma, and fonts.",
    no_args_is_help=True,
)

app.command()(init)
for _command in (create_next_project, setup_auth, setup_shadcn, setup_prisma, setup_ui):
    app.command(name=_command.__name__.replace("_", "-"))(_command)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"agency-ui {__version__}")
        raise typer.Exit()


@app.callback()
def cli(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Print the agency-ui version.",
        callback=_print_version,
        is_eager=True,
    ),
) -> None:
    """Run with no step name to see the available steps."""
