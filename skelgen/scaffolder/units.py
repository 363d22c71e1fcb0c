"""Sub-unit types that can be generated inside an existing project.

Each unit-type keyword maps deterministically to the folder that receives
new units of that type and to the sub-template that seeds them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UnknownUnitTypeError(ValueError):
    """Raised for a unit-type keyword outside :data:`UNIT_TYPES`."""

    def __init__(self, unit_type: str) -> None:
        self.unit_type = unit_type
        super().__init__(
            f"Unknown unit type {unit_type!r} (expected one of: {', '.join(UNIT_TYPES)})"
        )


class UnitType(BaseModel):
    """How a sub-unit keyword is materialised."""

    keyword: str
    parent_folder: str = Field(..., description="Folder under the project root, e.g. 'functions'")
    template_folder: str = Field(..., description="Folder under '<root>/templates'")
    label: str
    pascal_token: bool = Field(
        default=False, description="Whether {{NamePascal}} is substituted"
    )
    next_steps: list[str] = Field(default_factory=list)


UNIT_TYPES: dict[str, UnitType] = {
    "function": UnitType(
        keyword="function",
        parent_folder="functions",
        template_folder="function",
        label="Function",
        pascal_token=True,
        next_steps=["cd functions/{name}", "bun install", "bun run build"],
    ),
    "package": UnitType(
        keyword="package",
        parent_folder="packages",
        template_folder="package",
        label="Package",
        next_steps=["cd packages/{name}", "bun install"],
    ),
    "app:react": UnitType(
        keyword="app:react",
        parent_folder="apps",
        template_folder="app-react",
        label="React app",
        next_steps=["cd apps/{name}", "bun install", "bun run dev"],
    ),
    "app:elysia": UnitType(
        keyword="app:elysia",
        parent_folder="apps",
        template_folder="app-elysia",
        label="Elysia app",
        next_steps=["cd apps/{name}", "bun install", "bun run dev"],
    ),
}


def get_unit_type(keyword: str) -> UnitType:
    """Look up *keyword*, raising :class:`UnknownUnitTypeError` if unknown."""
    try:
        return UNIT_TYPES[keyword]
    except KeyError:
        raise UnknownUnitTypeError(keyword) from None
