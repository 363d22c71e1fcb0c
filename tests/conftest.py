"""Shared pytest fixtures for the skelgen test suite.

Provides reusable fixtures for:
- A whole-project template tree (text, binary, excluded and dotfile entries)
- An already-materialised project root carrying sub-unit templates
- A clean environment and a default ``Config``
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from skelgen.config import Config
from skelgen.utils import set_quiet

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TEMPLATE_DESCRIPTION = (
    "A fullstack monorepo template with Bun, TypeScript, AWS Lambda, and React"
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00{{PROJECT_NAME}}\xff\xfe\x00"

ELYSIA_INDEX = """\
import { Elysia } from 'elysia';

const app = new Elysia()
  .get('/', () => 'Hello from {{name}}!')
  .listen(3000);

console.log(`{{name}} is running at ${app.server?.hostname}:${app.server?.port}`);
"""

FUNCTION_HANDLER = """\
export const handler{{NamePascal}} = async () => ({
  statusCode: 200,
  body: JSON.stringify({ source: '{{ORG_NAME}}/{{name}}' }),
});
"""


def write(path: Path, content: str | bytes) -> Path:
    """Create parent directories and write *content* to *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no org/template overrides leak in from the host."""
    for var in (
        "ORG_NAME",
        "SKELGEN_ORG_NAME",
        "SKELGEN_DEFAULT_ORG",
        "SKELGEN_EXTRA_TEMPLATE_NAMES",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def loud_console():
    """Undo any ``--quiet`` a test switched on."""
    yield
    set_quiet(False)


@pytest.fixture
def config() -> Config:
    """Default configuration with no explicit org."""
    return Config()


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A whole-project template tree.

    Layout::

        package.json                 template-default name/description
        README.md                    {{PROJECT_NAME_PASCAL}}, {{PROJECT_DESCRIPTION}}
        src/index.ts                 {{PROJECT_NAME}}, {{ORG_NAME}}
        docs/notes.md                CRLF line endings
        assets/logo.png              binary payload containing a token
        Makefile                     no extension -> opaque
        .github/workflows/ci.yml     allow-listed dotfile directory
        .gitignore                   allow-listed dotfile
        .env                         excluded dotfile
        node_modules/dep/index.js    excluded directory
        .git/HEAD                    excluded directory
        templates/function/...       sub-unit template ({{name}} survives)
    """
    root = tmp_path / "monorepo-template"
    write(
        root / "package.json",
        json.dumps(
            {
                "name": "bun-fullstack-monorepo",
                "version": "0.0.0",
                "description": TEMPLATE_DESCRIPTION,
                "private": True,
                "workspaces": ["apps/*", "functions/*", "packages/*"],
            },
            indent=2,
        )
        + "\n",
    )
    write(root / "README.md", "# {{PROJECT_NAME_PASCAL}}\n\n{{PROJECT_DESCRIPTION}}\n")
    write(
        root / "src" / "index.ts",
        "export const name = '{{PROJECT_NAME}}';\n"
        "export const org = '{{ORG_NAME}}';\n"
        "export const scoped = '{{ORG_NAME}}/{{PROJECT_NAME}}';\n",
    )
    write(root / "docs" / "notes.md", "Project {{PROJECT_NAME}}\r\nSecond line\r\n".encode())
    write(root / "assets" / "logo.png", PNG_BYTES)
    write(root / "Makefile", "build:\n\techo {{PROJECT_NAME}}\n")
    write(root / ".github" / "workflows" / "ci.yml", "name: {{PROJECT_NAME}} CI\n")
    write(root / ".gitignore", "node_modules\ndist\n")
    write(root / ".env", "SECRET={{PROJECT_NAME}}\n")
    write(root / "node_modules" / "dep" / "index.js", "module.exports = '{{PROJECT_NAME}}';\n")
    write(root / ".git" / "HEAD", "ref: refs/heads/main\n")
    write(root / "templates" / "function" / "src" / "index.ts", FUNCTION_HANDLER)
    return root


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """An already-materialised project carrying the sub-unit templates."""
    root = tmp_path / "my-project"
    write(
        root / "package.json",
        json.dumps({"name": "@acme/my-project", "private": True}, indent=2) + "\n",
    )
    write(root / "templates" / "function" / "src" / "index.ts", FUNCTION_HANDLER)
    write(
        root / "templates" / "function" / "package.json",
        json.dumps({"name": "{{ORG_NAME}}/{{name}}", "version": "0.0.0"}, indent=2) + "\n",
    )
    write(root / "templates" / "function" / "template.yaml", "{{NamePascal}}Function:\n")
    write(
        root / "templates" / "package" / "package.json",
        json.dumps({"name": "{{ORG_NAME}}/{{name}}"}, indent=2) + "\n",
    )
    write(root / "templates" / "package" / "src" / "index.ts", "export const pkg = '{{name}}';\n")
    write(root / "templates" / "app-react" / "src" / "App.tsx", "<h1>{{name}}</h1>\n")
    write(root / "templates" / "app-elysia" / "src" / "index.ts", ELYSIA_INDEX)
    write(root / "templates" / "app-elysia" / "public" / "favicon.ico", b"\x00\x00\x01\x00{{name}}")
    return root


@pytest.fixture
def write_file():
    """Expose :func:`write` to test modules."""
    return write
