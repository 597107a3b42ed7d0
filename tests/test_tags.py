"""
Tests for index_builder/tags.py — pure string helpers, no filesystem.
"""
from __future__ import annotations

from pathlib import PureWindowsPath

import pytest

from index_builder.tags import (
    APP_CSS, APP_JS, MARKERS, VENDOR_CSS, VENDOR_JS,
    create_link_tag, create_script_tag, fill_marker, find_markers,
    replace_compiled_versions, replace_debug_versions,
)


VERSION_LINE = "ng-init=\"version='@appVersion@';pkg='@packageVersion@';versionPath='@version@'\""


# ─────────────────────────────────────────────────────────────────────────────
# Tags
# ─────────────────────────────────────────────────────────────────────────────

def test_link_tag():
    assert create_link_tag("styles/app.css") == '<link rel="stylesheet" href="styles/app.css">'


def test_script_tag():
    assert create_script_tag("app.min.js") == '<script src="app.min.js"></script>'


def test_tags_normalise_backslashes():
    path = PureWindowsPath("resources", "js", "debug", "0.js")
    assert create_script_tag(path) == '<script src="resources/js/debug/0.js"></script>'
    assert create_link_tag("styles\\debug.css") == '<link rel="stylesheet" href="styles/debug.css">'


@pytest.mark.parametrize("empty", ["", None])
def test_empty_path_produces_no_tag(empty):
    assert create_link_tag(empty) == ""
    assert create_script_tag(empty) == ""


# ─────────────────────────────────────────────────────────────────────────────
# Markers
# ─────────────────────────────────────────────────────────────────────────────

def test_find_markers_reports_only_present_markers():
    template = f"<head>{VENDOR_CSS}{APP_CSS}</head><body>{APP_JS}</body>"
    assert find_markers(template) == {VENDOR_CSS, APP_CSS, APP_JS}
    assert find_markers("<html></html>") == frozenset()
    assert set(MARKERS) == {VENDOR_CSS, VENDOR_JS, APP_CSS, APP_JS}


def test_fill_marker_joins_tags_with_newlines():
    out = fill_marker(f"a\n{VENDOR_JS}\nb", VENDOR_JS, ["<script src=\"1.js\"></script>", "<script src=\"2.js\"></script>"])
    assert out == 'a\n<script src="1.js"></script>\n<script src="2.js"></script>\nb'


def test_fill_marker_strips_marker_when_no_tags():
    out = fill_marker(f"a{APP_CSS}b", APP_CSS, [])
    assert out == "ab"


def test_fill_marker_drops_empty_tags():
    out = fill_marker(APP_CSS, APP_CSS, [create_link_tag("")])
    assert out == ""


def test_fill_marker_without_marker_is_noop():
    assert fill_marker("<p>hi</p>", APP_JS, ["<script src=\"x.js\"></script>"]) == "<p>hi</p>"


# ─────────────────────────────────────────────────────────────────────────────
# Version tokens
# ─────────────────────────────────────────────────────────────────────────────

def test_debug_versions():
    out = replace_debug_versions(VERSION_LINE + VERSION_LINE)
    assert "@" not in out
    assert out.count("version='dev'") == 2
    assert out.count("pkg='dev'") == 2
    assert out.count("versionPath=''") == 2


def test_compiled_versions_with_app_version():
    out = replace_compiled_versions(VERSION_LINE, "v2", "1.0.0")
    assert out == "ng-init=\"version='v2';pkg='1.0.0';versionPath='v2/'\""


def test_compiled_versions_without_app_version():
    out = replace_compiled_versions(VERSION_LINE, "", None)
    assert out == "ng-init=\"version='';pkg='';versionPath=''\""
