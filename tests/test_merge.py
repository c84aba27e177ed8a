"""Tests for agency_ui.scaffold.merge - env, JSON, and marker-patch merges."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from agency_ui.scaffold.merge import (
    Anchor,
    FileSystemError,
    MarkerPatch,
    apply_marker_patch,
    env_keys,
    locate_app_directory,
    merge_env_file,
    patch_text,
    upsert_json_keys,
)
from agency_ui.scaffold.renderer import load_static_template
from agency_ui.scaffold.steps.auth import PROVIDERS_IMPORT, PROVIDERS_PATCH

DB_FRAGMENT_A = '# Database Configuration\nDATABASE_URL="a"\n'
DB_FRAGMENT_B = '# Database Configuration\nDATABASE_URL="b"\n'


class TestMergeEnvFile:
    """Tests for merge_env_file()."""

    def test_missing_file_is_created_with_fragment(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        assert merge_env_file(env, DB_FRAGMENT_A) is True
        assert env.read_text() == DB_FRAGMENT_A

    def test_new_value_replaces_old_key(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text('DATABASE_URL="a"\n')

        merge_env_file(env, DB_FRAGMENT_B)

        lines = [line for line in env.read_text().splitlines() if line.startswith("DATABASE_URL")]
        assert lines == ['DATABASE_URL="b"']

    def test_second_merge_is_a_no_op(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text('DATABASE_URL="a"\n')
        merge_env_file(env, DB_FRAGMENT_B)
        once = env.read_text()

        assert merge_env_file(env, DB_FRAGMENT_B) is False
        assert env.read_text() == once

    def test_unrelated_keys_preserved_and_block_separated(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text('API_KEY="x"\n')

        merge_env_file(env, DB_FRAGMENT_A)

        assert env.read_text() == 'API_KEY="x"\n\n' + DB_FRAGMENT_A

    def test_comment_lines_do_not_accumulate(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text('API_KEY="x"\n')
        merge_env_file(env, DB_FRAGMENT_A)
        merge_env_file(env, DB_FRAGMENT_B)

        content = env.read_text()
        assert content.count("# Database Configuration") == 1
        assert content.count("DATABASE_URL") == 1

    def test_export_prefixed_key_is_owned(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text('export DATABASE_URL="old"\n')
        merge_env_file(env, DB_FRAGMENT_B)
        assert "old" not in env.read_text()

    def test_without_overwrite_existing_keys_win(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text('NEXTAUTH_SECRET="real"\n')
        fragment = '# Authentication\nNEXTAUTH_SECRET="placeholder"\nNEXTAUTH_URL="http://localhost:3000"\n'

        assert merge_env_file(env, fragment, overwrite=False) is True

        content = env.read_text()
        assert 'NEXTAUTH_SECRET="real"' in content
        assert "placeholder" not in content
        assert 'NEXTAUTH_URL="http://localhost:3000"' in content

    def test_without_overwrite_is_idempotent(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        fragment = '# Authentication\nBETTER_AUTH_SECRET="s"\n'
        merge_env_file(env, fragment, overwrite=False)
        once = env.read_text()

        assert merge_env_file(env, fragment, overwrite=False) is False
        assert env.read_text() == once

    def test_replacing_middle_block_leaves_single_separator(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text("FOO=1\n")
        merge_env_file(env, DB_FRAGMENT_A)
        merge_env_file(env, '# Authentication\nX="1"\n', overwrite=False)
        for value in ("b", "c", "d"):
            merge_env_file(env, f'# Database Configuration\nDATABASE_URL="{value}"\n')

        assert env.read_text() == (
            'FOO=1\n\n# Authentication\nX="1"\n\n# Database Configuration\nDATABASE_URL="d"\n'
        )

    def test_replacing_leading_block_leaves_no_leading_blank(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text(DB_FRAGMENT_A + '\nAPI_KEY="x"\n')
        merge_env_file(env, DB_FRAGMENT_B)
        assert env.read_text() == 'API_KEY="x"\n\n' + DB_FRAGMENT_B

    def test_env_keys(self) -> None:
        assert env_keys('# c\nA="1"\nexport B=2\nA="3"\n') == ["A", "B"]


class TestUpsertJsonKeys:
    """Tests for upsert_json_keys()."""

    def test_unowned_keys_untouched(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        original = {
            "name": "app",
            "scripts": {"dev": "next dev"},
            "devDependencies": {"typescript": "^5"},
            "custom": [1, 2, 3],
        }
        manifest.write_text(json.dumps(original))

        upsert_json_keys(
            manifest,
            {"prisma": {"seed": "tsx prisma/seed.ts"}, "devDependencies": {"tsx": "^4.6.2"}},
        )

        data = json.loads(manifest.read_text())
        assert data["name"] == "app"
        assert data["scripts"] == {"dev": "next dev"}
        assert data["custom"] == [1, 2, 3]
        assert data["devDependencies"] == {"typescript": "^5", "tsx": "^4.6.2"}
        assert data["prisma"] == {"seed": "tsx prisma/seed.ts"}

    def test_key_order_preserved(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        manifest.write_text('{"b": 1, "a": 2}')
        upsert_json_keys(manifest, {"a": 3, "c": 4})
        assert list(json.loads(manifest.read_text())) == ["b", "a", "c"]

    def test_stable_formatting(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        upsert_json_keys(manifest, {"name": "app"})
        assert manifest.read_text() == '{\n  "name": "app"\n}\n'

    def test_second_upsert_is_a_no_op(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        updates = {"dependencies": {"next": "^15.0.0"}}
        assert upsert_json_keys(manifest, updates) is True
        once = manifest.read_text()
        assert upsert_json_keys(manifest, updates) is False
        assert manifest.read_text() == once

    def test_invalid_json_raises_file_system_error(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        manifest.write_text("{not json")
        with pytest.raises(FileSystemError) as exc_info:
            upsert_json_keys(manifest, {"a": 1})
        assert exc_info.value.operation == "parse"
        assert manifest.read_text() == "{not json"

    def test_non_object_raises(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        manifest.write_text("[]")
        with pytest.raises(FileSystemError):
            upsert_json_keys(manifest, {"a": 1})


class TestMarkerPatch:
    """Tests for patch_text() and apply_marker_patch()."""

    def test_patches_starter_layout(self, tmp_path: Path) -> None:
        layout = tmp_path / "layout.tsx"
        layout.write_text(load_static_template("next/layout.tsx"))

        result = apply_marker_patch(layout, PROVIDERS_PATCH)

        content = layout.read_text()
        assert result.changed
        assert result.missing == []
        assert PROVIDERS_IMPORT in content
        assert '<html lang="en" suppressHydrationWarning>' in content
        assert "<body><Providers>{children}</Providers></body>" in content

    def test_marker_present_leaves_file_unchanged(self, tmp_path: Path) -> None:
        layout = tmp_path / "layout.tsx"
        layout.write_text(load_static_template("next/layout.tsx"))
        apply_marker_patch(layout, PROVIDERS_PATCH)
        once = layout.read_text()

        result = apply_marker_patch(layout, PROVIDERS_PATCH)

        assert result.already_applied
        assert layout.read_text() == once
        assert once.count("<Providers>") == 1

    def test_missing_anchor_skips_only_that_change(self) -> None:
        content = 'import "./globals.css";\n<html lang="en">\n<main>{children}</main>\n'
        result = patch_text(content, PROVIDERS_PATCH)
        assert result.missing == ["children wrapper"]
        assert "providers import" in result.applied
        assert "<main>{children}</main>" in result.content

    def test_all_anchors_missing_does_not_write(self, tmp_path: Path) -> None:
        page = tmp_path / "page.tsx"
        page.write_text("export default function Page() { return null; }\n")
        result = apply_marker_patch(page, PROVIDERS_PATCH)
        assert not result.changed
        assert page.read_text() == "export default function Page() { return null; }\n"

    def test_partial_application_is_completed_without_duplicates(self) -> None:
        content = (
            'import "./globals.css";\n'
            f"{PROVIDERS_IMPORT}\n"
            '<html lang="en" suppressHydrationWarning>\n'
            "<body>{children}</body>\n"
        )
        result = patch_text(content, PROVIDERS_PATCH)
        assert result.applied == ["children wrapper"]
        assert result.content.count(PROVIDERS_IMPORT) == 1
        assert result.content.count("suppressHydrationWarning") == 1

    def test_surrounding_content_is_preserved(self) -> None:
        content = (
            "// banner\n"
            'import "./globals.css";\n'
            "const x = 1;\n"
            '<html lang="en">\n'
            '  <body className="a">\n'
            "    {children}\n"
            "  </body>\n"
            "</html>\n"
            "// footer\n"
        )
        patched = patch_text(content, PROVIDERS_PATCH).content
        assert patched.startswith("// banner\n")
        assert patched.endswith("// footer\n")
        assert "const x = 1;" in patched
        assert "<Providers>{children}</Providers>" in patched

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileSystemError):
            apply_marker_patch(tmp_path / "layout.tsx", PROVIDERS_PATCH)

    def test_callable_replacement(self) -> None:
        patch = MarkerPatch(
            marker="// patched",
            anchors=[Anchor("title", r"^title$", lambda m: m.group(0).upper() + "\n// patched")],
        )
        result = patch_text("title\nbody\n", patch)
        assert result.content == "TITLE\n// patched\nbody\n"
        assert patch_text(result.content, patch).already_applied


class TestLocateAppDirectory:
    """Tests for locate_app_directory() precedence."""

    def test_prefers_existing_src_app(self, tmp_path: Path) -> None:
        (tmp_path / "src" / "app").mkdir(parents=True)
        (tmp_path / "app").mkdir()
        assert locate_app_directory(tmp_path) == tmp_path / "src" / "app"

    def test_existing_app(self, tmp_path: Path) -> None:
        (tmp_path / "app").mkdir()
        assert locate_app_directory(tmp_path) == tmp_path / "app"

    def test_src_without_app(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        assert locate_app_directory(tmp_path) == tmp_path / "src" / "app"

    def test_empty_project(self, tmp_path: Path) -> None:
        assert locate_app_directory(tmp_path) == tmp_path / "app"
