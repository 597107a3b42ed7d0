"""
Vendor resource manifests.

A manifest is a plain-text file written by the resource resolution step that
runs before index generation: one resource path per line. An empty manifest
is a valid state meaning "no vendor resources"; a manifest that cannot be
read means that step is broken, so ManifestReadError is fatal to the run.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .errors import ManifestReadError
from .tags import VENDOR_CSS, VENDOR_JS, create_link_tag, create_script_tag, fill_marker

logger = logging.getLogger("index_builder.manifest")


def read_manifest(path: str | Path) -> list[str]:
    """
    Return the resource paths listed in the manifest, in file order.

    Blank lines are not resources and are dropped.

    Raises
    ------
    ManifestReadError  — the file is missing or unreadable
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Failed reading vendor resources from %s: %s", path, exc)
        raise ManifestReadError(path, exc) from exc
    return [line.strip() for line in content.splitlines() if line.strip()]


def add_vendor_css(template: str, manifest_path: str | Path) -> str:
    """Fill <!--VENDOR_CSS--> with one stylesheet link per manifest entry."""
    files = read_manifest(manifest_path)
    if files:
        logger.info("Adding %d vendor styles from %s", len(files), manifest_path)
    return fill_marker(template, VENDOR_CSS, (create_link_tag(f) for f in files))


def add_vendor_scripts(template: str, manifest_path: str | Path) -> str:
    """Fill <!--VENDOR_JS--> with one script tag per manifest entry."""
    files = read_manifest(manifest_path)
    if files:
        logger.info("Adding %d vendor scripts from %s", len(files), manifest_path)
    return fill_marker(template, VENDOR_JS, (create_script_tag(f) for f in files))
