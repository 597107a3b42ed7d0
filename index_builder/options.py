"""
Build Options — typed, immutable options for one index-generation run
=====================================================================
Options arrive as a JSON/YAML object with camelCase keys:

    templates:                       # absent or empty → nothing to do
      - id: index                    # output name; "index" also triggers the debug loader
      - id: admin
        file: admin/admin-template.html
      - id: legacy
        skip: true
    basePath: .                      # templates + debug output (default: cwd)
    appPath: .                       # holds the .build directory (default: basePath)
    distPath: dist                   # compiled output (default: <basePath>/dist)
    appVersion: "1.4.0"
    packageVersion: "1.4.0"
    overrideVersion: ""              # wins over packageVersion when set
    debugCss: styles/debug.css
    compiledCss: styles/app.min.css
    compiledJs: app.min.js
    closureLibraryPath: node_modules/google-closure-library

Relative paths resolve against the working directory, once, here. Nothing
downstream consults the process cwd or the environment.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import jsonschema

from .errors import OptionsError

logger = logging.getLogger("index_builder.options")

# Template id that owns the one-time debug loader generation
RESERVED_INDEX_ID = "index"

# Environment overlay applied by the CLI after .env is loaded
ENV_OPTIONS_FILE = "INDEX_BUILDER_OPTIONS"
ENV_OVERRIDE_VERSION = "INDEX_OVERRIDE_VERSION"

_VERSION = {"type": ["string", "number", "null"]}
_PATH = {"type": ["string", "null"]}

OPTIONS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "templates": {
            "type": ["array", "null"],
            "items": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "file": _PATH,
                    "skip": {"type": ["boolean", "null"]},
                },
            },
        },
        "basePath": _PATH,
        "appPath": _PATH,
        "distPath": _PATH,
        "closureLibraryPath": _PATH,
        "appVersion": _VERSION,
        "packageVersion": _VERSION,
        "overrideVersion": _VERSION,
        "debugCss": _PATH,
        "compiledCss": _PATH,
        "compiledJs": _PATH,
    },
}


# ─────────────────────────────────────────────────────────────────────────────
# Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TemplateDescriptor:
    """One HTML template to generate debug/compiled indexes from."""
    id: str
    file: Optional[str] = None
    skip: bool = False

    @property
    def template_file(self) -> str:
        return self.file or f"{self.id}-template.html"

    def template_path(self, base_path: Path) -> Path:
        """Absolute file override, otherwise the file relative to base_path."""
        path = Path(self.template_file)
        return path if path.is_absolute() else base_path / path


@dataclass(frozen=True)
class BuildOptions:
    """Resolved options for one run. All paths are absolute."""
    base_path: Path
    app_path: Path
    dist_path: Path
    closure_library_path: Path
    templates: tuple[TemplateDescriptor, ...] = ()
    app_version: str = ""
    package_version: str = ""
    override_version: str = ""
    debug_css: str = ""
    compiled_css: str = ""
    compiled_js: str = ""

    @property
    def build_dir(self) -> Path:
        """Directory the resource resolver writes manifests and loader inputs to."""
        return self.app_path / ".build"

    @property
    def effective_package_version(self) -> str:
        return self.override_version or self.package_version

    @property
    def closure_goog_dir(self) -> Path:
        return self.closure_library_path / "closure" / "goog"

    @property
    def app_loader_path(self) -> Path:
        return self.build_dir / "app-loader.js"

    @property
    def gcc_args_path(self) -> Path:
        return self.build_dir / "gcc-args.json"

    def manifest_path(self, kind: str, mode: str, template_id: str) -> Path:
        """kind: "css" | "js"; mode: "debug" | "dist"."""
        return self.build_dir / f"resources-{kind}-{mode}-{template_id}"


# ─────────────────────────────────────────────────────────────────────────────
# Loaders
# ─────────────────────────────────────────────────────────────────────────────

def load_options_dict(data: dict[str, Any], cwd: str | Path | None = None) -> BuildOptions:
    """
    Validate a raw options object and resolve it into BuildOptions.

    Raises
    ------
    OptionsError  — the object does not match OPTIONS_SCHEMA
    """
    validator = jsonschema.Draft7Validator(OPTIONS_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        raise OptionsError([_format_error(e) for e in errors])

    root = Path(cwd) if cwd is not None else Path.cwd()

    def _resolve(value: Optional[str], default: Path) -> Path:
        if not value:
            return default
        path = Path(value)
        return path if path.is_absolute() else root / path

    base_path = _resolve(data.get("basePath"), root)
    app_path = _resolve(data.get("appPath"), base_path)
    dist_path = _resolve(data.get("distPath"), base_path / "dist")
    closure_path = _resolve(
        data.get("closureLibraryPath"),
        base_path / "node_modules" / "google-closure-library",
    )

    templates = tuple(
        TemplateDescriptor(
            id=t["id"],
            file=t.get("file") or None,
            skip=bool(t.get("skip")),
        )
        for t in (data.get("templates") or [])
    )

    return BuildOptions(
        base_path=base_path,
        app_path=app_path,
        dist_path=dist_path,
        closure_library_path=closure_path,
        templates=templates,
        app_version=_str(data.get("appVersion")),
        package_version=_str(data.get("packageVersion")),
        override_version=_str(data.get("overrideVersion")),
        debug_css=_str(data.get("debugCss")),
        compiled_css=_str(data.get("compiledCss")),
        compiled_js=_str(data.get("compiledJs")),
    )


def load_options_file(path: str | Path, cwd: str | Path | None = None) -> BuildOptions:
    """
    Load build options from a JSON or YAML file.

    Supported formats:
      .json          — stdlib json
      .yaml / .yml   — PyYAML safe_load

    Raises
    ------
    FileNotFoundError  — the path does not exist
    OptionsError       — unsupported extension, non-object content, or schema errors
    """
    p = Path(path)
    logger.info("Loading index options from %s", p)
    if not p.exists():
        raise FileNotFoundError(f"Options file not found: {p}")

    suffix = p.suffix.lower()
    if suffix == ".json":
        with open(p, encoding="utf-8") as fh:
            data = json.load(fh)
    elif suffix in (".yaml", ".yml"):
        import yaml  # type: ignore[import-untyped]
        with open(p, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    else:
        raise OptionsError([
            f"Unsupported options file extension '{suffix}'. Supported: .json, .yaml, .yml"
        ])

    if not isinstance(data, dict):
        raise OptionsError([f"Options file '{p.name}' must contain a JSON/YAML object at the top level."])

    return load_options_dict(data, cwd=cwd)


def apply_env_overrides(options: BuildOptions, environ: Optional[dict[str, str]] = None) -> BuildOptions:
    """Overlay INDEX_OVERRIDE_VERSION from the environment, when set."""
    env = os.environ if environ is None else environ
    override = env.get(ENV_OVERRIDE_VERSION, "").strip()
    if override:
        logger.debug("Override version %r taken from %s", override, ENV_OVERRIDE_VERSION)
        return replace(options, override_version=override)
    return options


# ─────────────────────────────────────────────────────────────────────────────
# Internal helpers
# ─────────────────────────────────────────────────────────────────────────────

def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _format_error(error: jsonschema.ValidationError) -> str:
    location = "/".join(str(p) for p in error.absolute_path) or "<root>"
    return f"{location}: {error.message}"
