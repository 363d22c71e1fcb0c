"""Placeholder substitution.

Tokens such as ``{{PROJECT_NAME}}`` are plain literal text: they are matched
verbatim, never interpreted as pattern syntax, and every occurrence is
replaced.  The closed token set is defined here together with the helpers
that build a placeholder map for a project or a sub-unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .identity import IdentitySet

# ---------------------------------------------------------------------------
# Token set
# ---------------------------------------------------------------------------

PROJECT_NAME = "{{PROJECT_NAME}}"
PROJECT_NAME_PASCAL = "{{PROJECT_NAME_PASCAL}}"
ORG_NAME = "{{ORG_NAME}}"
PROJECT_DESCRIPTION = "{{PROJECT_DESCRIPTION}}"
UNIT_NAME = "{{name}}"
UNIT_NAME_PASCAL = "{{NamePascal}}"

ALL_TOKENS: tuple[str, ...] = (
    PROJECT_NAME,
    PROJECT_NAME_PASCAL,
    ORG_NAME,
    PROJECT_DESCRIPTION,
    UNIT_NAME,
    UNIT_NAME_PASCAL,
)

PlaceholderMap = dict[str, str]


def project_placeholders(
    identity: IdentitySet, org_name: str, description: str
) -> PlaceholderMap:
    """Build the placeholder map for a whole-project instantiation."""
    return {
        PROJECT_NAME: identity.kebab,
        PROJECT_NAME_PASCAL: identity.pascal,
        ORG_NAME: org_name,
        PROJECT_DESCRIPTION: description,
    }


def unit_placeholders(
    identity: IdentitySet, org_name: str, *, with_pascal: bool = False
) -> PlaceholderMap:
    """Build the placeholder map for a sub-unit.

    Args:
        identity: Derived names of the sub-unit.
        org_name: Resolved organisation scope of the enclosing project.
        with_pascal: Include ``{{NamePascal}}`` (function units only).
    """
    placeholders: PlaceholderMap = {
        UNIT_NAME: identity.kebab,
        ORG_NAME: org_name,
    }
    if with_pascal:
        placeholders[UNIT_NAME_PASCAL] = identity.pascal
    return placeholders


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------


def substitute(content: str, placeholders: PlaceholderMap) -> str:
    """Replace every occurrence of every token in *content*.

    Values are inserted verbatim; backslashes or ``$`` in a value carry no
    special meaning.
    """
    for token, value in placeholders.items():
        if token in content:
            content = content.replace(token, value)
    return content


def find_leftovers(content: str, tokens: tuple[str, ...] = ALL_TOKENS) -> list[str]:
    """Return the known tokens still present in *content*."""
    return [token for token in tokens if token in content]


@dataclass
class FileSubstitution:
    """Outcome of substituting placeholders in one file."""

    path: Path
    changed: bool = False
    skipped: bool = False
    warning: str | None = None


def substitute_file(path: Path, placeholders: PlaceholderMap) -> FileSubstitution:
    """Substitute placeholders in *path* in place.

    The file is read and written as raw UTF-8 bytes so line endings survive
    untouched.  It is only rewritten when its content actually changes.

    Per-file problems never raise:

    * a file that vanished, or that is not valid UTF-8, is skipped silently;
    * any other ``OSError`` is skipped and reported through ``warning``.
    """
    result = FileSubstitution(path=path)
    try:
        original = path.read_bytes().decode("utf-8")
        updated = substitute(original, placeholders)
        if updated != original:
            path.write_bytes(updated.encode("utf-8"))
            result.changed = True
    except (FileNotFoundError, UnicodeDecodeError):
        result.skipped = True
    except OSError as exc:
        result.skipped = True
        result.warning = f"Could not process {path}: {exc}"
    return result
