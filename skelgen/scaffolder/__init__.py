"""skelgen scaffolder -- the template instantiation engine.

Copies a template tree, substitutes ``{{TOKEN}}`` placeholders in text files,
derives the project's canonical names and rewrites the identity fields of its
package manifest.

Quick usage::

    from skelgen.scaffolder import derive_identity, replicate, substitute_tree

    identity = derive_identity("My Cool App")
    replicate("templates/monorepo", "out/my-cool-app")
    substitute_tree("out/my-cool-app", {"{{PROJECT_NAME}}": identity.kebab})
"""

from skelgen.scaffolder.classifier import FileKind, classify, is_text
from skelgen.scaffolder.identity import IdentitySet, derive_identity
from skelgen.scaffolder.manifest import ManifestChange, read_org_scope, rewrite_manifest
from skelgen.scaffolder.placeholders import (
    project_placeholders,
    substitute,
    substitute_file,
    unit_placeholders,
)
from skelgen.scaffolder.replicator import replicate, substitute_tree
from skelgen.scaffolder.units import UNIT_TYPES, UnitType, UnknownUnitTypeError, get_unit_type

__all__ = [
    "FileKind",
    "IdentitySet",
    "ManifestChange",
    "UNIT_TYPES",
    "UnitType",
    "UnknownUnitTypeError",
    "classify",
    "derive_identity",
    "get_unit_type",
    "is_text",
    "project_placeholders",
    "read_org_scope",
    "replicate",
    "rewrite_manifest",
    "substitute",
    "substitute_file",
    "substitute_tree",
    "unit_placeholders",
]
