"""
Template tag helpers — pure string substitution, no I/O.

Placeholder contract (must stay bit-exact, templates in the wild depend on it):

    @version@         versioned asset directory prefix ("" in debug builds)
    @appVersion@      application version ("dev" in debug builds)
    @packageVersion@  package version ("dev" in debug builds)
    <!--VENDOR_CSS-->  <!--VENDOR_JS-->  <!--APP_CSS-->  <!--APP_JS-->
"""
from __future__ import annotations

from collections.abc import Iterable
from os import PathLike
from typing import Optional, Union

VERSION_TOKEN = "@version@"
APP_VERSION_TOKEN = "@appVersion@"
PACKAGE_VERSION_TOKEN = "@packageVersion@"

VENDOR_CSS = "<!--VENDOR_CSS-->"
VENDOR_JS = "<!--VENDOR_JS-->"
APP_CSS = "<!--APP_CSS-->"
APP_JS = "<!--APP_JS-->"

MARKERS: tuple[str, ...] = (VENDOR_CSS, VENDOR_JS, APP_CSS, APP_JS)

# Literal used for both version tokens in debug builds
DEBUG_VERSION = "dev"

PathArg = Optional[Union[str, PathLike]]


def to_url(path: PathArg) -> str:
    """Normalise a filesystem path to forward slashes for use in an href/src."""
    if not path:
        return ""
    return str(path).replace("\\", "/")


def create_link_tag(path: PathArg) -> str:
    """Stylesheet <link> for path, or "" when the path is empty."""
    url = to_url(path)
    return f'<link rel="stylesheet" href="{url}">' if url else ""


def create_script_tag(path: PathArg) -> str:
    """<script> for path, or "" when the path is empty."""
    url = to_url(path)
    return f'<script src="{url}"></script>' if url else ""


def find_markers(template: str) -> frozenset[str]:
    """Return the insertion markers present in template."""
    return frozenset(m for m in MARKERS if m in template)


def fill_marker(template: str, marker: str, tags: Iterable[str]) -> str:
    """
    Replace the first occurrence of marker with the newline-joined tags.

    Empty tags are dropped; with nothing left the marker is stripped rather
    than left dangling in the output.
    """
    block = "\n".join(t for t in tags if t)
    return template.replace(marker, block, 1)


def replace_debug_versions(template: str) -> str:
    """Debug builds serve unversioned paths and report "dev" for both versions."""
    template = template.replace(VERSION_TOKEN, "")
    template = template.replace(APP_VERSION_TOKEN, DEBUG_VERSION)
    return template.replace(PACKAGE_VERSION_TOKEN, DEBUG_VERSION)


def replace_compiled_versions(
    template: str,
    app_version: Optional[str],
    package_version: Optional[str],
) -> str:
    """
    Substitute real version values.

    @version@ becomes "<app_version>/" so it can prefix versioned asset
    directories, or "" when no app version is configured.
    """
    version = app_version or ""
    version_path = f"{version}/" if version else ""
    template = template.replace(APP_VERSION_TOKEN, version)
    template = template.replace(PACKAGE_VERSION_TOKEN, package_version or "")
    return template.replace(VERSION_TOKEN, version_path)
