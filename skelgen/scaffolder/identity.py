"""Name derivation for projects and sub-units.

A single free-form name yields exactly two canonical forms: ``kebab``
(lower-case, whitespace runs collapsed to ``-``) and ``pascal`` (kebab
segments re-joined with leading capitals).  This is intentionally narrower
than a slugifier: punctuation and underscores pass through unchanged.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

DEFAULT_NAME = "my-project"

_WHITESPACE = re.compile(r"\s+")


class IdentitySet(BaseModel):
    """The canonical name forms derived from one raw name."""

    kebab: str = Field(..., min_length=1)
    pascal: str


def to_kebab(raw_name: str) -> str:
    """Lower-case *raw_name* and collapse whitespace runs into one hyphen.

    Leading and trailing whitespace is dropped first, so ``"  My App "``
    becomes ``"my-app"`` rather than ``"-my-app-"``.
    """
    return _WHITESPACE.sub("-", raw_name.strip().lower())


def to_pascal(kebab: str) -> str:
    """Convert ``some-thing`` to ``SomeThing``.

    Only the first character of each segment is changed; the rest of the
    segment is kept as-is.
    """
    return "".join(part[0].upper() + part[1:] for part in kebab.split("-") if part)


def derive_identity(raw_name: str, fallback: str = DEFAULT_NAME) -> IdentitySet:
    """Derive the :class:`IdentitySet` for *raw_name*.

    Args:
        raw_name: The name as typed by the user (or a directory base name).
        fallback: Used when *raw_name* is empty or blank.

    Returns:
        ``IdentitySet`` whose ``kebab`` is never empty.

    Examples::

        derive_identity("My Cool App") -> kebab="my-cool-app", pascal="MyCoolApp"
        derive_identity("")            -> kebab="my-project",  pascal="MyProject"
    """
    kebab = to_kebab(raw_name) or to_kebab(fallback) or DEFAULT_NAME
    return IdentitySet(kebab=kebab, pascal=to_pascal(kebab))
