"""Idempotent merging of generated content into existing project files.

Three strategies, one per kind of file the scaffolder touches:

- ``merge_env_file``: line-oriented KEY="value" files. Owned keys are
  stripped and the new block is appended after a blank line.
- ``upsert_json_keys``: package.json and friends. Owned keys are set,
  every other key is left as it was.
- ``apply_marker_patch``: source files. A sentinel marker short-circuits
  the patch; otherwise bounded anchor replacements are applied one by one,
  and a missing anchor skips only that replacement.

Running any merge twice with the same input leaves the file unchanged the
second time.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rich.console import Console

console = Console()

_ASSIGNMENT = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=")


class FileSystemError(Exception):
    """Raised when a project file cannot be read, parsed, or written.

    Attributes:
        path: The file involved.
        operation: What was being attempted ("read", "write", "parse").
    """

    def __init__(self, path: Path, operation: str, reason: str = "") -> None:
        self.path = path
        self.operation = operation
        message = f"Could not {operation} {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


def read_text(path: Path) -> str:
    """Read a UTF-8 file, wrapping OS errors as FileSystemError."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileSystemError(path, "read", exc.strerror or str(exc)) from exc


def write_text(path: Path, content: str) -> None:
    """Write a UTF-8 file, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FileSystemError(path, "write", exc.strerror or str(exc)) from exc


def ensure_dir(path: Path) -> None:
    """Create a directory and its parents, wrapping OS errors."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(path, "create", exc.strerror or str(exc)) from exc


def locate_app_directory(project_root: Path) -> Path:
    """Return the Next.js app router directory for project_root.

    Prefers an existing ``src/app``, then an existing ``app``; when neither
    exists, ``src/app`` if the project has a ``src`` directory, else ``app``.
    """
    src_app = project_root / "src" / "app"
    root_app = project_root / "app"
    if src_app.is_dir():
        return src_app
    if root_app.is_dir():
        return root_app
    if (project_root / "src").is_dir():
        return src_app
    return root_app


# -- Environment files --


def env_keys(fragment: str) -> list[str]:
    """Return the variable names assigned in an env fragment, in order."""
    keys: list[str] = []
    for line in fragment.splitlines():
        match = _ASSIGNMENT.match(line)
        if match and match.group(1) not in keys:
            keys.append(match.group(1))
    return keys


def _assigned_key(line: str) -> str | None:
    match = _ASSIGNMENT.match(line)
    return match.group(1) if match else None


def _collapse_blank_lines(lines: list[str]) -> list[str]:
    """Drop blank lines that directly follow another blank line."""
    collapsed: list[str] = []
    for line in lines:
        if not line.strip() and collapsed and not collapsed[-1].strip():
            continue
        collapsed.append(line)
    return collapsed


def merge_env_file(path: Path, fragment: str, overwrite: bool = True) -> bool:
    """Merge an env fragment into path.

    With ``overwrite=True`` every key the fragment assigns is owned: existing
    assignments of those keys (and earlier copies of the fragment's other
    lines) are removed before the fragment is appended. With
    ``overwrite=False`` keys that are already defined keep their value and
    are dropped from the fragment; if nothing remains, the file is untouched.

    Args:
        path: The env file; created with the fragment if absent.
        fragment: New KEY="value" block, newline-terminated.
        overwrite: Whether fragment values replace existing ones.

    Returns:
        True if the file was written, False if it was already up to date.
    """
    if not fragment.endswith("\n"):
        fragment += "\n"

    if not path.exists():
        write_text(path, fragment)
        return True

    existing = read_text(path)
    lines = existing.splitlines()
    defined = [k for k in (_assigned_key(line) for line in lines) if k]

    if overwrite:
        owned = env_keys(fragment)
        contains_fragment = existing.startswith(fragment) or f"\n{fragment}" in existing
        if contains_fragment and all(defined.count(k) == 1 for k in owned):
            return False
        fragment_lines = {line.strip() for line in fragment.splitlines() if line.strip()}
        kept = _collapse_blank_lines(
            [
                line
                for line in lines
                if _assigned_key(line) not in owned and line.strip() not in fragment_lines
            ]
        )
        block = fragment
    else:
        remaining = [
            line
            for line in fragment.splitlines()
            if _assigned_key(line) is None or _assigned_key(line) not in defined
        ]
        if not any(_assigned_key(line) for line in remaining):
            return False
        kept = lines
        block = "\n".join(remaining) + "\n"

    body = "\n".join(kept).rstrip().lstrip("\n")
    content = f"{body}\n\n{block}" if body else block
    if content == existing:
        return False
    write_text(path, content)
    return True


# -- Structured (JSON) files --


def _deep_update(target: dict[str, Any], updates: dict[str, Any]) -> None:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value


def upsert_json_keys(path: Path, updates: dict[str, Any]) -> bool:
    """Set the keys in updates on the JSON object stored at path.

    Nested objects are merged key by key, so owning ``devDependencies.tsx``
    leaves the other dev dependencies alone. Keys not mentioned in updates
    are preserved in their original order. Output uses two-space indent and
    a trailing newline.

    Returns:
        True if the file was written, False if it was already up to date.

    Raises:
        FileSystemError: If the file cannot be read or is not a JSON object.
    """
    existing: str | None = None
    data: dict[str, Any] = {}
    if path.exists():
        existing = read_text(path)
        try:
            loaded = json.loads(existing) if existing.strip() else {}
        except json.JSONDecodeError as exc:
            raise FileSystemError(path, "parse", f"invalid JSON ({exc.msg})") from exc
        if not isinstance(loaded, dict):
            raise FileSystemError(path, "parse", "expected a JSON object")
        data = loaded

    _deep_update(data, updates)
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if content == existing:
        return False
    write_text(path, content)
    return True


# -- Source files --

Replacement = str | Callable[[re.Match[str]], str]


@dataclass(frozen=True)
class Anchor:
    """One bounded replacement within a marker patch.

    Attributes:
        name: Label used in warnings.
        pattern: Regex locating the anchor; only the first match is replaced.
        replacement: Replacement template or callable, as for ``re.sub``.
        present: Text proving this replacement was already applied; when
            found, the anchor is skipped silently.
    """

    name: str
    pattern: str
    replacement: Replacement
    present: str | None = None


@dataclass(frozen=True)
class MarkerPatch:
    """An ordered list of anchors guarded by an "already applied" marker."""

    marker: str
    anchors: list[Anchor] = field(default_factory=list)


@dataclass
class PatchResult:
    """Outcome of applying a MarkerPatch to some text."""

    content: str
    already_applied: bool = False
    applied: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def patch_text(content: str, patch: MarkerPatch) -> PatchResult:
    """Apply patch to content without touching the filesystem."""
    if patch.marker in content:
        return PatchResult(content=content, already_applied=True)

    result = PatchResult(content=content)
    for anchor in patch.anchors:
        if anchor.present and anchor.present in result.content:
            continue
        updated, count = re.subn(
            anchor.pattern, anchor.replacement, result.content, count=1, flags=re.MULTILINE
        )
        if count == 0:
            result.missing.append(anchor.name)
            continue
        result.content = updated
        result.applied.append(anchor.name)
    return result


def apply_marker_patch(path: Path, patch: MarkerPatch) -> PatchResult:
    """Apply patch to the file at path.

    Missing anchors are reported as warnings and skipped; the file is only
    written when at least one anchor applied.

    Raises:
        FileSystemError: If the file does not exist or cannot be read/written.
    """
    if not path.exists():
        raise FileSystemError(path, "patch", "file does not exist")

    result = patch_text(read_text(path), patch)
    for name in result.missing:
        console.print(
            f"[yellow]Warning:[/yellow] {path.name}: anchor '{name}' not found, "
            "skipping that change"
        )
    if result.changed:
        write_text(path, result.content)
    return result
