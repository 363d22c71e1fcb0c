"""Package-manifest identity rewriting.

After a template is copied, its ``package.json`` may still carry the
template's own published identity.  :func:`rewrite_manifest` replaces the
``name`` and ``description`` fields only while they still hold a known
template default, and leaves every other field (and the key order) alone.

A missing or malformed manifest is not an error here: there is simply
nothing to rewrite.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from skelgen.config import ManifestDefaults

from .identity import IdentitySet


@dataclass(frozen=True)
class ManifestChange:
    """One rewritten manifest field."""

    field: str
    old: str
    new: str

    def __str__(self) -> str:
        return f"{self.field}: {self.old} -> {self.new}"


def load_manifest(path: str | Path) -> dict[str, Any] | None:
    """Load a JSON manifest.

    Returns:
        The parsed object, or ``None`` if the file is missing, unreadable,
        not valid JSON, or not a JSON object.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def dump_manifest(data: dict[str, Any]) -> str:
    """Serialise a manifest with two-space indent and a trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def read_org_scope(path: str | Path) -> str | None:
    """Return the ``@scope`` of the manifest's ``name``, if it has one.

    ``{"name": "@acme/web"}`` yields ``"@acme"``.
    """
    data = load_manifest(path)
    if data is None:
        return None
    name = data.get("name")
    if isinstance(name, str) and name.startswith("@"):
        return name.split("/")[0]
    return None


def rewrite_manifest(
    manifest_path: str | Path,
    identity: IdentitySet,
    description: str,
    defaults: ManifestDefaults | None = None,
) -> list[ManifestChange]:
    """Rewrite template-default identity fields of a manifest.

    ``name`` is replaced by ``identity.kebab`` only if it currently equals one
    of ``defaults.template_names``; ``description`` is replaced only if it
    equals ``defaults.template_description`` exactly.

    Args:
        manifest_path: Path to the manifest (usually ``package.json``).
        identity: Names derived for the new project.
        description: The generated project description.
        defaults: Known template defaults.  Defaults to ``ManifestDefaults()``.

    Returns:
        The applied changes.  The file is written only when this list is
        non-empty.
    """
    defaults = defaults or ManifestDefaults()
    data = load_manifest(manifest_path)
    if data is None:
        return []

    changes: list[ManifestChange] = []

    name = data.get("name")
    if isinstance(name, str) and name in defaults.template_names and name != identity.kebab:
        data["name"] = identity.kebab
        changes.append(ManifestChange("name", name, identity.kebab))

    current = data.get("description")
    if current == defaults.template_description and current != description:
        data["description"] = description
        changes.append(ManifestChange("description", current, description))

    if changes:
        Path(manifest_path).write_text(dump_manifest(data), encoding="utf-8")
    return changes
