"""Directory replication.

Materialising a template happens in two independent passes:

1. :func:`replicate` copies the template tree verbatim (bytes only, no
   substitution), honouring the :class:`~skelgen.config.ExclusionPolicy`.
2. :func:`substitute_tree` walks the copied tree and substitutes
   placeholders in place in every file classified as text.

Keeping the passes apart guarantees binary fidelity of opaque files and lets
the substitution pass be re-run on its own.  Both walks are iterative and
carry the resolved directories on the current path, so a symlink that
points back up the tree is not followed again.  A symlinked directory that
merely aliases another part of the tree is copied like any other.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from skelgen.config import ExclusionPolicy

from .classifier import is_text
from .placeholders import PlaceholderMap, substitute_file


@dataclass
class ReplicationReport:
    """What the copy pass produced."""

    files_copied: list[Path] = field(default_factory=list)
    directories_created: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class SubstitutionReport:
    """What the substitution pass touched."""

    files_scanned: int = 0
    files_changed: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _list_dir(directory: Path) -> list[Path]:
    """Return the entries of *directory* sorted by name."""
    return sorted(directory.iterdir(), key=lambda p: p.name)


def replicate(
    source_dir: str | Path,
    dest_dir: str | Path,
    policy: ExclusionPolicy | None = None,
) -> ReplicationReport:
    """Copy *source_dir* to *dest_dir*, skipping excluded entries.

    Args:
        source_dir: Root of the template tree.  Must exist; failing to list
            it raises.
        dest_dir: Destination root.  Created (with parents) if missing.
        policy: Exclusion rules.  Defaults to ``ExclusionPolicy()``.

    Returns:
        A ``ReplicationReport``.  Unreadable nested directories and files
        that cannot be copied are skipped and listed in ``warnings``.
    """
    policy = policy or ExclusionPolicy()
    source_root = Path(source_dir)
    report = ReplicationReport()

    stack: list[tuple[Path, Path, frozenset[Path]]] = [
        (source_root, Path(dest_dir), frozenset())
    ]

    while stack:
        src, dst, ancestors = stack.pop()
        real = src.resolve()
        if real in ancestors:
            report.warnings.append(f"Skipping {src}: symlink loop back to {real}")
            continue
        ancestors = ancestors | {real}

        try:
            entries = _list_dir(src)
        except OSError as exc:
            if src == source_root:
                raise
            report.warnings.append(f"Could not read directory {src}: {exc}")
            continue

        dst.mkdir(parents=True, exist_ok=True)
        report.directories_created.append(dst)

        for entry in entries:
            if policy.is_excluded(entry.name):
                continue
            target = dst / entry.name
            if entry.is_dir():
                stack.append((entry, target, ancestors))
                continue
            try:
                shutil.copy2(entry, target)
            except OSError as exc:
                report.warnings.append(f"Could not copy {entry}: {exc}")
                continue
            report.files_copied.append(target)

    return report


def walk_files(
    root: str | Path,
    policy: ExclusionPolicy | None = None,
    warnings: list[str] | None = None,
) -> Iterator[Path]:
    """Yield every non-excluded file below *root*.

    Directories that cannot be listed are skipped; a message is appended to
    *warnings* when a list is given.  Listing *root* itself is not guarded.
    """
    policy = policy or ExclusionPolicy()
    root = Path(root)
    stack: list[tuple[Path, frozenset[Path]]] = [(root, frozenset())]

    while stack:
        directory, ancestors = stack.pop()
        real = directory.resolve()
        if real in ancestors:
            continue
        ancestors = ancestors | {real}

        try:
            entries = _list_dir(directory)
        except OSError as exc:
            if directory == root:
                raise
            if warnings is not None:
                warnings.append(f"Could not read directory {directory}: {exc}")
            continue

        for entry in entries:
            if policy.is_excluded(entry.name):
                continue
            if entry.is_dir():
                stack.append((entry, ancestors))
            else:
                yield entry


def substitute_tree(
    root: str | Path,
    placeholders: PlaceholderMap,
    policy: ExclusionPolicy | None = None,
) -> SubstitutionReport:
    """Substitute *placeholders* in every text file below *root*.

    Opaque files are never opened.  Running this twice with the same map is
    a no-op the second time.
    """
    report = SubstitutionReport()
    for path in walk_files(root, policy, report.warnings):
        if not is_text(path.name):
            continue
        report.files_scanned += 1
        outcome = substitute_file(path, placeholders)
        if outcome.changed:
            report.files_changed.append(path)
        if outcome.warning:
            report.warnings.append(outcome.warning)
    return report
