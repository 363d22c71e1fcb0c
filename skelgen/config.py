"""skelgen configuration.

Centralised, typed configuration for project instantiation. All settings use
Pydantic v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.

The environment is consulted only by :meth:`Config.from_env`; everything
downstream receives an already-resolved ``Config`` instance.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class ExclusionPolicy(BaseModel):
    """Names that are never copied into, nor walked inside, a generated tree.

    Any entry whose name starts with ``.`` is excluded as well, unless it is
    listed in ``allowed_dotfiles``.
    """

    skip_names: list[str] = Field(
        default=[
            "node_modules",
            "dist",
            "build",
            ".aws-sam",
            ".turbo",
            "coverage",
            ".git",
            ".bun",
            "bun.lockb",
            ".npm",
        ]
    )
    allowed_dotfiles: list[str] = Field(default=[".github", ".gitignore"])

    def is_excluded(self, name: str) -> bool:
        """Return ``True`` if an entry called *name* must be skipped."""
        if name in self.skip_names:
            return True
        return name.startswith(".") and name not in self.allowed_dotfiles


class ManifestDefaults(BaseModel):
    """Identity values a template ships with before it is instantiated.

    A manifest field is only rewritten while it still holds one of these.
    """

    template_names: list[str] = Field(
        default=["bun-fullstack-monorepo", "create-bun-fullstack-monorepo"]
    )
    template_description: str = Field(
        default="A fullstack monorepo template with Bun, TypeScript, AWS Lambda, and React"
    )


class Config(BaseModel):
    """Global skelgen configuration.

    Instances are typically created once by the CLI entry point (from the
    environment or a JSON file) and then passed to ``Pipeline``.
    """

    org_name: str | None = Field(
        default=None, description="Explicit organisation scope, e.g. '@acme'"
    )
    default_org: str = Field(default="@myorg")
    fallback_project_name: str = Field(default="my-project", min_length=1)
    description_template: str = Field(
        default="{pascal} - Fullstack Monorepo with Bun",
        description="Format string for {{PROJECT_DESCRIPTION}}; receives kebab and pascal",
    )
    manifest_name: str = Field(default="package.json")
    exclusion: ExclusionPolicy = Field(default_factory=ExclusionPolicy)
    manifest_defaults: ManifestDefaults = Field(default_factory=ManifestDefaults)

    @field_validator("description_template")
    @classmethod
    def _check_description_template(cls, value: str) -> str:
        try:
            value.format(kebab="my-project", pascal="MyProject")
        except (KeyError, IndexError, AttributeError, ValueError) as exc:
            raise ValueError(
                f"description_template may only use {{kebab}} and {{pascal}}: {exc!r}"
            ) from None
        return value

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def describe(self, kebab: str, pascal: str) -> str:
        """Render the generated project description."""
        return self.description_template.format(kebab=kebab, pascal=pascal)

    def resolve_org(self, manifest_path: Path | None = None) -> str:
        """Resolve the organisation scope used for ``{{ORG_NAME}}``.

        Precedence: the explicit ``org_name``, then the ``@scope`` prefix of
        the manifest at *manifest_path* (if any), then ``default_org``.
        """
        if self.org_name:
            return self.org_name
        if manifest_path is not None:
            from skelgen.scaffolder.manifest import read_org_scope

            scope = read_org_scope(manifest_path)
            if scope:
                return scope
        return self.default_org

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON.

        Args:
            path: The JSON file to read.

        Returns:
            A validated ``Config`` instance.
        """
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            SKELGEN_ORG_NAME, ORG_NAME (fallback), SKELGEN_DEFAULT_ORG,
            SKELGEN_EXTRA_TEMPLATE_NAMES (comma-separated).

        Args:
            base: Configuration to start from, e.g. one loaded from a file.
                Environment values override its fields.
        """
        data = json.loads(base.model_dump_json()) if base is not None else {}

        org = os.environ.get("SKELGEN_ORG_NAME") or os.environ.get("ORG_NAME")
        if org:
            data["org_name"] = org
        if os.environ.get("SKELGEN_DEFAULT_ORG"):
            data["default_org"] = os.environ["SKELGEN_DEFAULT_ORG"]

        extra = os.environ.get("SKELGEN_EXTRA_TEMPLATE_NAMES", "")
        extra_names = [n.strip() for n in extra.split(",") if n.strip()]
        if extra_names:
            defaults = data.setdefault("manifest_defaults", ManifestDefaults().model_dump())
            defaults["template_names"] = [*defaults["template_names"], *extra_names]

        return cls.model_validate(data)
