"""Template rendering for generated project files.

Parametric templates (Prisma schema, .env fragments, root layout,
global stylesheet) are Jinja2 templates (``templates/**/*.j2``) rendered
from their configuration: the same input always yields byte-identical
text. Static boilerplate ships beside them and is read verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from pydantic import BaseModel


class TemplateKind(str, Enum):
    """Parametric templates the renderer knows how to produce."""

    schema = "schema"
    env = "env"
    auth_env = "auth-env"
    layout = "layout"
    stylesheet = "stylesheet"


# Unknown database kinds fall back to this one, for both the schema
# provider and the connection string.
DEFAULT_DATABASE = "postgresql"

KNOWN_DATABASES: dict[str, str] = {
    "postgresql": "PostgreSQL",
    "mysql": "MySQL",
    "sqlite": "SQLite",
    "mongodb": "MongoDB",
    "sqlserver": "SQL Server",
}

DEFAULT_PORTS: dict[str, str] = {
    "postgresql": "5432",
    "mysql": "3306",
    "mongodb": "27017",
    "sqlserver": "1433",
}
FALLBACK_PORT = "3306"


class DatabaseConfig(BaseModel):
    """Connection settings collected by the ORM step.

    ``db_type`` is deliberately a free string: unrecognized kinds render
    as PostgreSQL instead of failing.
    """

    db_type: str
    db_name: str | None = None
    db_host: str | None = None
    db_port: str | None = None
    db_user: str | None = None
    db_password: str | None = None


@dataclass(frozen=True)
class FontSpec:
    """A Google font offered by the layout step."""

    name: str
    variable: str


AVAILABLE_FONTS: list[FontSpec] = [
    FontSpec("Poppins", "poppins"),
    FontSpec("Montserrat", "montserrat"),
    FontSpec("Inter", "inter"),
    FontSpec("Roboto", "roboto"),
]


class FontSelection(BaseModel):
    """Fonts chosen for the root layout, in display order."""

    fonts: list[str]
    primary: str | None = None

    def specs(self) -> list[FontSpec]:
        """Resolve selected variables to FontSpecs, keeping catalogue order."""
        return [f for f in AVAILABLE_FONTS if f.variable in self.fonts]


def resolve_provider(db_type: str) -> str:
    """Map a database kind to its Prisma provider name."""
    return db_type if db_type in KNOWN_DATABASES else DEFAULT_DATABASE


def database_url(config: DatabaseConfig) -> str:
    """Build the DATABASE_URL connection string for config."""
    user = config.db_user or ""
    password = config.db_password or ""
    host = config.db_host or ""
    port = config.db_port or ""
    name = config.db_name or ""

    kind = resolve_provider(config.db_type)
    if kind == "sqlite":
        return "file:./dev.db"
    if kind == "mysql":
        return f"mysql://{user}:{password}@{host}:{port}/{name}"
    if kind == "mongodb":
        return f"mongodb://{user}:{password}@{host}:{port}/{name}?authSource=admin"
    if kind == "sqlserver":
        return (
            f"sqlserver://{host}:{port};database={name};"
            f"user={user};password={password};encrypt=true"
        )
    return f"postgresql://{user}:{password}@{host}:{port}/{name}?schema=public"


def render_env(config: DatabaseConfig) -> str:
    """Render the database block merged into .env."""
    return _render("env/database.env.j2", url=database_url(config))


_AUTH_ENV: dict[str, list[tuple[str, str]]] = {
    "nextauth": [
        ("NEXTAUTH_SECRET", "your_secret_key_here"),
        ("NEXTAUTH_URL", "http://localhost:3000"),
        ("GOOGLE_CLIENT_ID", "your_google_client_id"),
        ("GOOGLE_CLIENT_SECRET", "your_google_client_secret"),
    ],
    "better-auth": [
        ("BETTER_AUTH_SECRET", "your_secret_key_here"),
        ("BETTER_AUTH_URL", "http://localhost:3000"),
    ],
}


def render_auth_env(auth_type: str) -> str:
    """Render the authentication placeholder block merged into .env.

    Unknown auth types fall back to the NextAuth placeholders.
    """
    entries = _AUTH_ENV.get(auth_type, _AUTH_ENV["nextauth"])
    return _render("env/auth.env.j2", entries=entries)


def render_prisma_schema(db_type: str) -> str:
    """Render prisma/schema.prisma for the given database kind."""
    return _render("prisma/schema.prisma.j2", provider=resolve_provider(db_type))


def render_layout(selection: FontSelection) -> str:
    """Render the root layout loading the selected Google fonts."""
    fonts = selection.specs()
    body_classes = " ".join([*(f"${{{f.variable}.variable}}" for f in fonts), "antialiased"])
    return _render("ui/layout.tsx.j2", fonts=fonts, body_classes=body_classes)


def render_globals_css(selection: FontSelection) -> str:
    """Render globals.css wiring the font variables into the Tailwind theme.

    The primary font drives ``--font-sans``; when it is not among the
    selected fonts, the first selected font is used.
    """
    variables = [f.variable for f in selection.specs()]
    primary = selection.primary if selection.primary in variables else None
    if primary is None and variables:
        primary = variables[0]
    return _render("ui/globals.css.j2", primary=primary, variables=variables)


def render(kind: TemplateKind | str, config: Any) -> str:
    """Render a parametric template by kind.

    Args:
        kind: A TemplateKind or its string value.
        config: DatabaseConfig for env, FontSelection for layout and
            stylesheet, a database kind string for schema, an auth type
            string for auth-env.

    Raises:
        ValueError: If kind is not a known template kind.
    """
    kind = TemplateKind(kind)
    if kind == TemplateKind.schema:
        return render_prisma_schema(config)
    if kind == TemplateKind.env:
        return render_env(config)
    if kind == TemplateKind.auth_env:
        return render_auth_env(config)
    if kind == TemplateKind.layout:
        return render_layout(config)
    return render_globals_css(config)


def _get_templates_dir() -> Path:
    """Return the path to the static templates directory within the package."""
    return Path(__file__).parent / "templates"


def load_static_template(name: str) -> str:
    """Read a static boilerplate file shipped with the package."""
    return (_get_templates_dir() / name).read_text(encoding="utf-8")


_env = Environment(
    loader=FileSystemLoader(str(_get_templates_dir())),
    autoescape=select_autoescape([]),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def _render(template_name: str, **context: Any) -> str:
    return _env.get_template(template_name).render(**context)
