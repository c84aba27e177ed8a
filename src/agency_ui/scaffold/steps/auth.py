"""Authentication step: install an auth library and wire it into the app."""

from __future__ import annotations

from pathlib import Path

from agency_ui.models.config import ScaffoldConfig
from agency_ui.scaffold.merge import (
    Anchor,
    MarkerPatch,
    PatchResult,
    apply_marker_patch,
    locate_app_directory,
    merge_env_file,
    write_text,
)
from agency_ui.scaffold.package_manager import add_command, exec_command
from agency_ui.scaffold.questions import Choice, Question, QuestionKind, collect
from agency_ui.scaffold.renderer import load_static_template, render_auth_env
from agency_ui.scaffold.steps.base import SetupStep, StepContext, StepSkipped, SubAction

AUTH_TYPES: list[Choice] = [
    Choice("Better Auth", "better-auth"),
    Choice("NextAuth.js", "nextauth"),
    Choice("None", "none"),
]

AUTH_PACKAGES: dict[str, list[str]] = {
    "better-auth": ["better-auth"],
    "nextauth": ["next-auth", "@next-auth/prisma-adapter", "bcryptjs", "jsonwebtoken"],
}

PROVIDERS_IMPORT = 'import { Providers } from "@/components/providers/providers";'

# Wraps the layout's children in <Providers>. Each anchor matches a small,
# recognizable fragment; none spans the file.
PROVIDERS_PATCH = MarkerPatch(
    marker="<Providers>",
    anchors=[
        Anchor(
            name="providers import",
            pattern=r"""^(import\s+["']\./globals\.css["'];?)[ \t]*$""",
            replacement=rf"\1\n{PROVIDERS_IMPORT}",
            present=PROVIDERS_IMPORT,
        ),
        Anchor(
            name="html hydration attribute",
            pattern=r"<html\b([^>]*?)\s*>",
            replacement=r"<html\1 suppressHydrationWarning>",
            present="suppressHydrationWarning",
        ),
        Anchor(
            name="children wrapper",
            pattern=r"(<body\b[^>]*>\s*)\{children\}(\s*</body>)",
            replacement=r"\1<Providers>{children}</Providers>\2",
        ),
    ],
)

# (template_name, output path relative to the app directory or project root)
_APP_FILES: list[tuple[str, str]] = [
    ("auth/route.ts", "api/auth/[...nextauth]/route.ts"),
    ("auth/sign-in.tsx", "(auth)/sign-in/page.tsx"),
    ("auth/forgot-password.tsx", "(auth)/forgot-password/page.tsx"),
]
_SRC_FILES: list[tuple[str, str]] = [
    ("auth/lib-auth.ts", "src/lib/auth.ts"),
    ("auth/validations.ts", "src/lib/validations/auth.ts"),
    ("auth/theme-toggle.tsx", "src/components/layout-module/themeToggle.tsx"),
    ("auth/providers.tsx", "src/components/providers/providers.tsx"),
]


def auth_questions(config: ScaffoldConfig) -> list[Question]:
    return [
        Question(
            key="auth_type",
            message="Select authentication type",
            kind=QuestionKind.select,
            choices=AUTH_TYPES,
            default=config.default_auth,
        ),
    ]


def write_nextauth_files(project_root: Path) -> None:
    """Write the NextAuth route, pages, helpers, and providers component."""
    app_dir = locate_app_directory(project_root)
    for template_name, output_path in _APP_FILES:
        write_text(app_dir / output_path, load_static_template(template_name))
    for template_name, output_path in _SRC_FILES:
        write_text(project_root / output_path, load_static_template(template_name))


def patch_layout_with_providers(project_root: Path) -> PatchResult:
    """Marker-patch the root layout so children render inside <Providers>."""
    layout_path = locate_app_directory(project_root) / "layout.tsx"
    return apply_marker_patch(layout_path, PROVIDERS_PATCH)


class AuthStep(SetupStep):
    """Install Better Auth or NextAuth.js and the UI pieces they need."""

    name = "setup-auth"
    title = "Setup Authentication"

    def plan(self, ctx: StepContext) -> list[SubAction]:
        answers = collect(auth_questions(ctx.config), ctx.prompter)
        auth_type: str = answers["auth_type"]
        if auth_type not in AUTH_PACKAGES:
            raise StepSkipped("Skipping authentication setup")

        manager = ctx.package_manager
        root = ctx.target().path
        components = list(ctx.config.auth_components)

        def install_components() -> None:
            for component in components:
                ctx.run(exec_command(manager, f"shadcn@latest add {component}"))

        def install_theme_support() -> None:
            ctx.run(exec_command(manager, "shadcn@latest add dropdown-menu"))
            ctx.run(add_command(manager, ["next-themes"]))

        actions = [
            SubAction(
                f"{auth_type} installed",
                lambda: ctx.run(add_command(manager, AUTH_PACKAGES[auth_type])),
            ),
        ]
        if components:
            actions.append(SubAction("shadcn components installed", install_components))

        if auth_type == "nextauth":
            actions.extend(
                [
                    SubAction("Authentication files created", lambda: write_nextauth_files(root)),
                    SubAction("Theme toggle dependencies installed", install_theme_support),
                    SubAction(
                        "Root layout wrapped in providers",
                        lambda: patch_layout_with_providers(root),
                    ),
                ]
            )

        actions.append(
            SubAction(
                ".env updated",
                lambda: merge_env_file(root / ".env", render_auth_env(auth_type), overwrite=False),
            )
        )
        return actions
