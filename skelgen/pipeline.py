"""skelgen instantiation pipeline.

Turns a template tree into a concrete project (or a sub-unit inside an
existing project) in six phases:

Phase 1: RESOLVE    -- Locate the template, the destination and the names.
Phase 2: VALIDATE   -- Destination must not exist, template must.
Phase 3: COPY       -- Replicate the template verbatim.
Phase 4: SUBSTITUTE -- Replace placeholders in every text file.
Phase 5: MANIFEST   -- Rewrite template-default package.json identity.
Phase 6: DONE       -- Report what was created and what to do next.

Usage::

    skelgen create ./templates/monorepo ./my-project
    skelgen create function send-email
    skelgen init --name "My Project"
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
import time
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel
from rich.markup import escape

from skelgen.config import Config
from skelgen.scaffolder.identity import IdentitySet, derive_identity
from skelgen.scaffolder.manifest import rewrite_manifest
from skelgen.scaffolder.placeholders import (
    PlaceholderMap,
    project_placeholders,
    unit_placeholders,
)
from skelgen.scaffolder.replicator import replicate, substitute_tree
from skelgen.scaffolder.units import (
    UNIT_TYPES,
    UnitType,
    UnknownUnitTypeError,
    get_unit_type,
)
from skelgen.utils import (
    PHASE_NAMES,
    console,
    format_duration,
    pluralize,
    print_error,
    print_phase_header,
    print_success,
    print_summary_table,
    print_warning,
    set_quiet,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised when a pipeline phase fails irrecoverably."""

    def __init__(self, phase: int, message: str) -> None:
        self.phase = phase
        self.message = message
        super().__init__(f"Phase {phase} ({PHASE_NAMES.get(phase, '?')}): {message}")


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class InstantiationRequest(BaseModel):
    """What the caller asked for.

    ``project`` copies ``template_root`` to ``destination``; ``unit`` creates
    a sub-unit of ``unit_type`` inside ``project_root``; ``init`` substitutes
    placeholders in place inside ``destination``.
    """

    kind: Literal["project", "unit", "init"]
    name: str = ""
    template_root: Path | None = None
    destination: Path | None = None
    project_root: Path | None = None
    unit_type: str | None = None

    @classmethod
    def for_project(
        cls, template_root: str | Path, target: str | Path, name: str = ""
    ) -> "InstantiationRequest":
        return cls(
            kind="project", name=name, template_root=Path(template_root), destination=Path(target)
        )

    @classmethod
    def for_unit(
        cls, unit_type: str, name: str, project_root: str | Path | None = None
    ) -> "InstantiationRequest":
        """Build a sub-unit request; unknown unit types fail right here."""
        get_unit_type(unit_type)
        return cls(
            kind="unit",
            name=name,
            unit_type=unit_type,
            project_root=Path(project_root) if project_root is not None else None,
        )

    @classmethod
    def for_init(
        cls, directory: str | Path | None = None, name: str = ""
    ) -> "InstantiationRequest":
        return cls(
            kind="init",
            name=name,
            destination=Path(directory) if directory is not None else None,
        )


@dataclass
class ResolvedTarget:
    """Where and as what a request materialises, as worked out in RESOLVE."""

    template_dir: Path
    destination: Path
    identity: IdentitySet
    unit: UnitType | None = None


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives one instantiation from RESOLVE to DONE.

    Phases run strictly one after another; file-system work is handed to a
    worker thread so the event loop stays free, but nothing runs
    concurrently.  The first failing phase stops the run; files already
    written stay where they are.

    Attributes:
        config: Resolved configuration (org name, exclusion rules, defaults).
        request: The requested operation.
        state: Accumulates per-phase results, warnings and the outcome.
    """

    _PHASE_METHODS: dict[int, str] = {
        1: "phase1_resolve",
        2: "phase2_validate",
        3: "phase3_copy",
        4: "phase4_substitute",
        5: "phase5_manifest",
        6: "phase6_done",
    }

    _PHASES_BY_KIND: dict[str, list[int]] = {
        "project": [1, 2, 3, 4, 5, 6],
        "unit": [1, 2, 3, 4, 6],
        "init": [1, 2, 4, 5, 6],
    }

    def __init__(self, config: Config, request: InstantiationRequest) -> None:
        self.config = config
        self.request = request
        self.state: dict[str, Any] = {
            "kind": request.kind,
            "started_at": datetime.now(timezone.utc).isoformat(),
            "phases_completed": [],
            "phases_failed": [],
            "warnings": [],
            "success": False,
        }

        # Filled in by phase 1.
        self.resolved: ResolvedTarget | None = None
        self.org_name: str = config.default_org
        self.description: str = ""
        self.placeholders: PlaceholderMap = {}
        self._phase = 1

    @property
    def phases(self) -> list[int]:
        """Phase numbers executed for this request's kind."""
        return self._PHASES_BY_KIND[self.request.kind]

    @property
    def target(self) -> ResolvedTarget:
        """The phase-1 result; later phases cannot run without it."""
        if self.resolved is None:
            raise PipelineError(self._phase, "Template and destination have not been resolved")
        return self.resolved

    @property
    def manifest_path(self) -> Path:
        return self.target.destination / self.config.manifest_name

    # ------------------------------------------------------------------
    # Phase dispatch
    # ------------------------------------------------------------------

    async def run(self) -> dict[str, Any]:
        """Execute every phase for the request.

        Returns:
            The final state dictionary, including a top-level ``success``
            boolean and, on failure, ``error`` with the failing message.
        """
        start = time.monotonic()
        all_success = True

        for phase_num in self.phases:
            method = getattr(self, self._PHASE_METHODS[phase_num])
            phase_name = PHASE_NAMES[phase_num]
            print_phase_header(phase_num, phase_name)
            self._phase = phase_num

            try:
                result = await method()
                self.state[f"phase{phase_num}"] = result
                self.state["phases_completed"].append(phase_num)

            except PipelineError as exc:
                all_success = False
                self.state["phases_failed"].append(phase_num)
                self.state["error"] = exc.message
                print_error(str(exc))
                break

            except Exception as exc:
                all_success = False
                self.state["phases_failed"].append(phase_num)
                self.state["error"] = str(exc)
                self.state[f"phase{phase_num}_error"] = traceback.format_exc()
                print_error(f"Phase {phase_num} ({phase_name}) FAILED: {exc}")
                console.print(self.state[f"phase{phase_num}_error"], style="dim", markup=False)
                break

        self.state["success"] = all_success
        self.state["total_duration"] = format_duration(time.monotonic() - start)
        self.state["finished_at"] = datetime.now(timezone.utc).isoformat()
        return self.state

    def _warn(self, warnings: list[str]) -> None:
        for message in warnings:
            print_warning(f"  {message}")
        self.state["warnings"].extend(warnings)

    # ------------------------------------------------------------------
    # Phase 1: RESOLVE
    # ------------------------------------------------------------------

    async def phase1_resolve(self) -> dict[str, Any]:
        """Resolve template, destination, names, org scope and description."""
        request = self.request
        fallback = self.config.fallback_project_name
        unit: UnitType | None = None

        if request.kind == "unit":
            try:
                unit = get_unit_type(request.unit_type or "")
            except UnknownUnitTypeError as exc:
                raise PipelineError(1, str(exc)) from None
            if not request.name.strip():
                raise PipelineError(1, f"A name is required to create a {unit.keyword}")
            root = (request.project_root or Path.cwd()).resolve()
            identity = derive_identity(request.name, fallback)
            template_dir = root / "templates" / unit.template_folder
            destination = root / unit.parent_folder / identity.kebab
            org_manifest = root / self.config.manifest_name

        elif request.kind == "project":
            if request.template_root is None or request.destination is None:
                raise PipelineError(1, "Both a template root and a target are required")
            template_dir = request.template_root.resolve()
            destination = request.destination.resolve()
            identity = derive_identity(request.name or destination.name, fallback)
            org_manifest = template_dir / self.config.manifest_name

        else:
            destination = (request.destination or Path.cwd()).resolve()
            template_dir = destination
            identity = derive_identity(request.name or destination.name, fallback)
            org_manifest = destination / self.config.manifest_name

        self.resolved = ResolvedTarget(
            template_dir=template_dir, destination=destination, identity=identity, unit=unit
        )
        self.org_name = self.config.resolve_org(org_manifest)
        self.description = self.config.describe(identity.kebab, identity.pascal)

        console.print(
            f"  Name        : [bold]{escape(identity.kebab)}[/bold] ({escape(identity.pascal)})"
        )
        console.print(f"  Organization: {escape(self.org_name)}")
        console.print(f"  Template    : {escape(str(template_dir))}")
        console.print(f"  Destination : {escape(str(destination))}")

        return {
            "template_dir": str(template_dir),
            "destination": str(destination),
            "name": identity.kebab,
            "name_pascal": identity.pascal,
            "org_name": self.org_name,
            "unit_type": unit.keyword if unit else None,
        }

    # ------------------------------------------------------------------
    # Phase 2: VALIDATE
    # ------------------------------------------------------------------

    async def phase2_validate(self) -> dict[str, Any]:
        """Check the destination and template preconditions.

        * project: the destination may exist only as an empty directory.
        * unit: the destination must not exist at all.
        * init: the directory must exist.
        """
        target = self.target
        kind = self.request.kind
        destination = target.destination

        if kind == "project" and destination.exists():
            if not destination.is_dir() or any(destination.iterdir()):
                raise PipelineError(2, f"Destination already exists: {destination}")
        if target.unit is not None and destination.exists():
            raise PipelineError(
                2, f"{target.unit.label} {target.identity.kebab} already exists: {destination}"
            )

        if not target.template_dir.is_dir():
            raise PipelineError(2, f"Template directory not found: {target.template_dir}")

        if kind == "project" and target.template_dir in destination.parents:
            raise PipelineError(2, "Destination must not be inside the template directory")

        entries = sorted(p.name for p in target.template_dir.iterdir())
        console.print(f"  Template entries: {escape(', '.join(entries)) or '(empty)'}")
        return {"template_entries": entries}

    # ------------------------------------------------------------------
    # Phase 3: COPY
    # ------------------------------------------------------------------

    async def phase3_copy(self) -> dict[str, Any]:
        """Replicate the template tree verbatim."""
        target = self.target
        report = await asyncio.to_thread(
            replicate, target.template_dir, target.destination, self.config.exclusion
        )
        console.print(f"  Copied {pluralize(len(report.files_copied), 'file')}")
        self._warn(report.warnings)
        return {
            "files_copied": len(report.files_copied),
            "directories_created": len(report.directories_created),
        }

    # ------------------------------------------------------------------
    # Phase 4: SUBSTITUTE
    # ------------------------------------------------------------------

    async def phase4_substitute(self) -> dict[str, Any]:
        """Build the placeholder map and substitute it in place."""
        target = self.target

        if target.unit is not None:
            self.placeholders = unit_placeholders(
                target.identity, self.org_name, with_pascal=target.unit.pascal_token
            )
        else:
            self.placeholders = project_placeholders(
                target.identity, self.org_name, self.description
            )

        report = await asyncio.to_thread(
            substitute_tree, target.destination, self.placeholders, self.config.exclusion
        )
        console.print(
            f"  Substituted placeholders in {pluralize(len(report.files_changed), 'file')} "
            f"({report.files_scanned} text files scanned)"
        )
        self._warn(report.warnings)
        return {
            "placeholders": dict(self.placeholders),
            "files_scanned": report.files_scanned,
            "files_changed": len(report.files_changed),
        }

    # ------------------------------------------------------------------
    # Phase 5: MANIFEST
    # ------------------------------------------------------------------

    async def phase5_manifest(self) -> dict[str, Any]:
        """Rewrite template-default identity fields in the manifest."""
        changes = await asyncio.to_thread(
            rewrite_manifest,
            self.manifest_path,
            self.target.identity,
            self.description,
            self.config.manifest_defaults,
        )
        for change in changes:
            console.print(f"  Updated {self.config.manifest_name} {escape(str(change))}")
        if not changes:
            console.print(f"  {self.config.manifest_name}: nothing to rewrite")
        return {"changes": [[c.field, c.old, c.new] for c in changes]}

    # ------------------------------------------------------------------
    # Phase 6: DONE
    # ------------------------------------------------------------------

    async def phase6_done(self) -> dict[str, Any]:
        """Print a summary and the suggested next steps."""
        target = self.target
        kebab = target.identity.kebab

        if target.unit is not None:
            headline = f"{target.unit.label} {kebab} created successfully!"
            next_steps = [step.format(name=kebab) for step in target.unit.next_steps]
        else:
            verb = "initialized" if self.request.kind == "init" else "created"
            headline = f"Project {kebab} {verb} successfully!"
            next_steps = [
                f"cd {target.destination}",
                "bun install",
                "bun run create:function <name>",
                "bun run create:package <name>",
                "bun run create:app <name>",
            ]

        print_success(headline)
        print_summary_table(
            {
                "Name": kebab,
                "Organization": self.org_name,
                "Location": str(target.destination),
                "Warnings": str(len(self.state["warnings"])),
            },
            title="Created",
        )
        console.print("Next steps:")
        for index, step in enumerate(next_steps, start=1):
            console.print(f"  {index}. {escape(step)}")

        return {"destination": str(target.destination), "next_steps": next_steps}


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _looks_like_path(value: str) -> bool:
    return (
        os.sep in value
        or "/" in value
        or value.startswith(".")
        or Path(value).is_dir()
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skelgen",
        description="skelgen -- materialise project skeletons from templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  skelgen create ./templates/monorepo ./my-project\n"
            "  skelgen create function send-email\n"
            "  skelgen create app:react dashboard --root ./my-project\n"
            "  skelgen init --name my-project\n"
        ),
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--org", default=None, help="Organisation scope, e.g. @acme")
    common.add_argument("--config", default=None, help="Path to a JSON config file")
    common.add_argument("--quiet", "-q", action="store_true", help="Only print errors")

    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser(
        "create",
        parents=[common],
        help="Create a project from a template, or a sub-unit inside a project",
    )
    create.add_argument(
        "source",
        help=f"Template root directory, or a unit type ({', '.join(UNIT_TYPES)})",
    )
    create.add_argument("target", help="Target directory (project) or unit name")
    create.add_argument(
        "--root",
        default=None,
        help="Project root for sub-unit creation (default: current directory)",
    )

    init = sub.add_parser(
        "init",
        parents=[common],
        help="Substitute placeholders in an existing directory, in place",
    )
    init.add_argument("directory", nargs="?", default=None, help="Directory (default: cwd)")
    init.add_argument("--name", default="", help="Project name (default: directory name)")

    return parser


def _build_request(args: argparse.Namespace) -> InstantiationRequest:
    """Translate parsed arguments into a request.

    Raises:
        UnknownUnitTypeError: ``create`` was given a bare word that is neither
            a unit type nor a directory.
        ValueError: a sub-unit name is blank.
    """
    if args.command == "init":
        return InstantiationRequest.for_init(args.directory, args.name)

    if args.source in UNIT_TYPES:
        if not args.target.strip():
            raise ValueError(f"A name is required to create a {args.source}")
        return InstantiationRequest.for_unit(args.source, args.target, args.root)
    if _looks_like_path(args.source):
        return InstantiationRequest.for_project(args.source, args.target)
    raise UnknownUnitTypeError(args.source)


def _load_config(args: argparse.Namespace) -> Config:
    base = Config.load(Path(args.config)) if args.config else None
    config = Config.from_env(base)
    if args.org:
        config = config.model_copy(update={"org_name": args.org})
    return config


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``skelgen`` / ``python -m skelgen``.

    Returns:
        ``0`` on success, ``1`` when the run fails, ``2`` on usage errors.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    set_quiet(args.quiet)

    try:
        request = _build_request(args)
    except ValueError as exc:
        parser.print_usage(sys.stderr)
        print_error(f"Error: {exc}")
        return 2

    try:
        config = _load_config(args)
    except (OSError, ValueError) as exc:
        print_error(f"Error: could not load config {args.config}: {exc}")
        return 2

    state = asyncio.run(Pipeline(config, request).run())
    if not state["success"]:
        print_error("Instantiation failed.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
