"""File classification for placeholder substitution.

A file is either ``text`` (eligible for substitution) or ``opaque`` (copied
byte-for-byte and never touched again).  The decision looks only at the file
extension, never at the content.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath


class FileKind(str, Enum):
    """Two-valued file classification."""

    TEXT = "text"
    OPAQUE = "opaque"


# Source, markup, data and style formats.  Anything else is opaque.
TEXT_EXTENSIONS: frozenset[str] = frozenset(
    {
        "ts",
        "tsx",
        "js",
        "jsx",
        "json",
        "md",
        "yaml",
        "yml",
        "toml",
        "txt",
        "env",
        "html",
        "css",
        "xml",
    }
)


def extension_of(file_name: str) -> str:
    """Return the lower-cased extension of *file_name* without the dot.

    Dotfiles such as ``.gitignore`` have no extension.
    """
    return PurePath(file_name).suffix.lower().lstrip(".")


def classify(file_name: str) -> FileKind:
    """Classify a file by name.

    Examples::

        classify("index.TS")    -> FileKind.TEXT
        classify("logo.png")    -> FileKind.OPAQUE
        classify("Makefile")    -> FileKind.OPAQUE
    """
    if extension_of(file_name) in TEXT_EXTENSIONS:
        return FileKind.TEXT
    return FileKind.OPAQUE


def is_text(file_name: str) -> bool:
    """Shorthand for ``classify(file_name) is FileKind.TEXT``."""
    return classify(file_name) is FileKind.TEXT
