"""
Debug Loader — generates <appPath>/.build/app-loader.js
=======================================================
The debug index boots uncompiled Closure code with base.js + deps.js and then
this loader, which registers the application's own dependency graph and
requires the compiler entry points.

Inputs come from the GCC args file written by the resource resolver:

    {
      "js": ["!/excluded/**.js", "/app/src", "/app/lib/util.js"],
      "entry_point": ["goog:app.main"]
    }

Sources prefixed with "!" and Closure Library sources are not scanned: the
library's own graph is already in deps.js.

Any callable with the signature ``writer(gcc_args, output_path)`` can replace
DebugLoaderWriter (it may also be a coroutine function); it signals failure
by raising.
"""
from __future__ import annotations

import glob
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Iterable

logger = logging.getLogger("index_builder.loader")

CLOSURE_LIBRARY_MARKER = "google-closure-library"

_PROVIDE = re.compile(r"""^\s*goog\.(provide|module)\(\s*['"]([\w.$]+)['"]\s*\)""", re.MULTILINE)
_REQUIRE = re.compile(r"""goog\.require(?:Type)?\(\s*['"]([\w.$]+)['"]\s*\)""")


def load_gcc_args(path: str | Path) -> dict[str, Any]:
    """Read the GCC args JSON; errors propagate to the caller."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"GCC args file '{path}' must contain a JSON object")
    return data


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def source_files(js_args: Iterable[str]) -> list[Path]:
    """
    Expand the GCC "js" arguments into concrete .js files, in argument order.

    Directories are walked recursively; Closure-style ``**.js`` globs are
    accepted. Entries that match nothing are ignored.
    """
    files: list[Path] = []
    seen: set[Path] = set()
    for entry in js_args:
        if entry.startswith("!") or CLOSURE_LIBRARY_MARKER in entry:
            continue
        path = Path(entry)
        if path.is_dir():
            matches = sorted(path.rglob("*.js"))
        elif path.is_file():
            matches = [path]
        elif any(ch in entry for ch in "*?["):
            pattern = entry.replace("**.js", "**/*.js")
            matches = sorted(Path(m) for m in glob.glob(pattern, recursive=True))
        else:
            logger.debug("GCC source %s matched no files", entry)
            continue
        for match in matches:
            if match not in seen:
                seen.add(match)
                files.append(match)
    return files


def entry_namespaces(entry_points: Iterable[str]) -> list[str]:
    """Closure namespaces from "goog:ns" entry points; other entries are ignored."""
    return [e.split(":", 1)[1] for e in entry_points if e.startswith("goog:")]


def _js_list(values: Iterable[str]) -> str:
    return "[" + ", ".join(f"'{v}'" for v in values) + "]"


class DebugLoaderWriter:
    """
    Default loader generator.

    Usage:
        writer = DebugLoaderWriter(options.closure_goog_dir)
        writer(load_gcc_args(options.gcc_args_path), options.app_loader_path)
    """

    def __init__(self, closure_goog_dir: Path) -> None:
        # goog.addDependency paths are relative to base.js
        self.closure_goog_dir = Path(closure_goog_dir).resolve()

    def render(self, gcc_args: dict[str, Any]) -> str:
        lines = ["// Generated debug loader. Do not edit."]
        for src in source_files(_as_list(gcc_args.get("js"))):
            text = src.read_text(encoding="utf-8")
            provides = _PROVIDE.findall(text)
            if not provides:
                continue
            names = [name for _, name in provides]
            is_module = any(kind == "module" for kind, _ in provides)
            requires = sorted(set(_REQUIRE.findall(text)))
            rel = os.path.relpath(src.resolve(), self.closure_goog_dir).replace("\\", "/")
            load_flags = "{'module': 'goog'}" if is_module else "{}"
            lines.append(
                f"goog.addDependency('{rel}', {_js_list(names)}, {_js_list(requires)}, {load_flags});"
            )
        for ns in entry_namespaces(_as_list(gcc_args.get("entry_point"))):
            lines.append(f"goog.require('{ns}');")
        return "\n".join(lines) + "\n"

    def __call__(self, gcc_args: dict[str, Any], output_path: Path) -> None:
        content = self.render(gcc_args)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote debug loader to %s", output_path)
