"""
Tests for DebugIndexBuilder.
Uses tmp_path for filesystem isolation; no loader generation involved.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from index_builder.debug_index import DebugIndexBuilder, bootstrap_scripts
from index_builder.errors import ManifestReadError, MissingTemplateError
from index_builder.options import BuildOptions, TemplateDescriptor, load_options_dict

FULL_TEMPLATE = (
    "<!DOCTYPE html>\n"
    "<!--VENDOR_CSS-->\n"
    "<!--APP_CSS-->\n"
    "<div ng-init=\"version='@appVersion@';pkg='@packageVersion@';versionPath='@version@'\"></div>\n"
    "<!--VENDOR_JS-->\n"
    "<!--APP_JS-->"
)

NO_APP_TEMPLATE = (
    "<!DOCTYPE html>\n"
    "<!--VENDOR_CSS-->\n"
    "<div ng-init=\"version='@appVersion@'\"></div>\n"
    "<!--VENDOR_JS-->"
)


def _options(tmp_path: Path, **extra) -> BuildOptions:
    data = {"appVersion": "test-version", "debugCss": "styles/debug.css", **extra}
    return load_options_dict(data, cwd=tmp_path)


def _manifest(options: BuildOptions, kind: str, template_id: str, count: int) -> None:
    path = options.manifest_path(kind, "debug", template_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(f"vendor/{kind}/{i}.{kind}" for i in range(count)), encoding="utf-8")


def _lines(html: str, prefix: str) -> list[str]:
    return [line for line in html.split("\n") if line.startswith(prefix)]


def test_debug_index_full_template(tmp_path):
    options = _options(tmp_path)
    (tmp_path / "index1-template.html").write_text(FULL_TEMPLATE, encoding="utf-8")
    _manifest(options, "css", "index1", 5)
    _manifest(options, "js", "index1", 5)

    path = DebugIndexBuilder(options).build(TemplateDescriptor(id="index1"))

    assert path == tmp_path / "index1.html"
    html = path.read_text(encoding="utf-8")
    assert "version='dev';pkg='dev';versionPath=''" in html
    assert "@" not in html
    assert "<!--" not in html.replace("<!DOCTYPE", "")

    links = _lines(html, "<link ")
    assert len(links) == 6
    assert links[:5] == [f'<link rel="stylesheet" href="vendor/css/{i}.css">' for i in range(5)]
    assert links[5] == '<link rel="stylesheet" href="styles/debug.css">'

    scripts = _lines(html, "<script src=")
    assert len(scripts) == 9
    assert scripts[:5] == [f'<script src="vendor/js/{i}.js"></script>' for i in range(5)]
    assert ".build/gcc-defines-debug.js" in scripts[5]
    assert "google-closure-library/closure/goog/base.js" in scripts[6]
    assert "google-closure-library/closure/goog/deps.js" in scripts[7]
    assert ".build/app-loader.js" in scripts[8]


def test_debug_index_ignores_configured_version(tmp_path):
    options = _options(tmp_path, appVersion="", packageVersion="2.0")
    (tmp_path / "a-template.html").write_text(FULL_TEMPLATE, encoding="utf-8")
    _manifest(options, "css", "a", 0)
    _manifest(options, "js", "a", 0)

    html = DebugIndexBuilder(options).render(TemplateDescriptor(id="a"))
    assert "@appVersion@" not in html
    assert "version='dev';pkg='dev'" in html


def test_template_without_app_markers_gets_no_bootstrap(tmp_path):
    options = _options(tmp_path)
    (tmp_path / "noapp-template.html").write_text(NO_APP_TEMPLATE, encoding="utf-8")
    _manifest(options, "css", "noapp", 2)
    _manifest(options, "js", "noapp", 2)

    html = DebugIndexBuilder(options).render(TemplateDescriptor(id="noapp"))
    assert len(_lines(html, "<link ")) == 2
    assert len(_lines(html, "<script src=")) == 2
    assert "app-loader.js" not in html
    assert "debug.css" not in html


def test_vendor_js_manifest_not_read_without_marker(tmp_path):
    options = _options(tmp_path)
    (tmp_path / "novendor-template.html").write_text(
        "<!--VENDOR_CSS--><!--APP_CSS-->", encoding="utf-8"
    )
    _manifest(options, "css", "novendor", 1)
    # no resources-js-debug-novendor on disk: must not be read

    html = DebugIndexBuilder(options).render(TemplateDescriptor(id="novendor"))
    assert "<script" not in html


def test_vendor_css_manifest_always_read(tmp_path):
    options = _options(tmp_path)
    (tmp_path / "plain-template.html").write_text("<p>no markers</p>", encoding="utf-8")
    with pytest.raises(ManifestReadError):
        DebugIndexBuilder(options).render(TemplateDescriptor(id="plain"))


def test_missing_template(tmp_path):
    options = _options(tmp_path)
    with pytest.raises(MissingTemplateError) as exc_info:
        DebugIndexBuilder(options).build(TemplateDescriptor(id="ghost"))
    assert exc_info.value.path == tmp_path / "ghost-template.html"
    assert not (tmp_path / "ghost.html").exists()


def test_template_file_override(tmp_path):
    options = _options(tmp_path)
    custom = tmp_path / "modules" / "custom.html"
    custom.parent.mkdir()
    custom.write_text("<!--APP_CSS-->", encoding="utf-8")
    _manifest(options, "css", "index2", 0)

    path = DebugIndexBuilder(options).build(TemplateDescriptor(id="index2", file=str(custom)))
    assert path == tmp_path / "index2.html"
    assert path.read_text(encoding="utf-8") == '<link rel="stylesheet" href="styles/debug.css">'


def test_bootstrap_scripts_relative_to_base_path(tmp_path):
    options = load_options_dict(
        {"basePath": "web", "appPath": "app", "closureLibraryPath": "lib/closure"}, cwd=tmp_path
    )
    assert bootstrap_scripts(options) == [
        "../app/.build/gcc-defines-debug.js",
        "../lib/closure/closure/goog/base.js",
        "../lib/closure/closure/goog/deps.js",
        "../app/.build/app-loader.js",
    ]
