"""
DebugIndexBuilder — writes <basePath>/<id>.html for development.

The debug index loads individual sources: vendor scripts from the debug
manifests, then the Closure bootstrap sequence (GCC debug defines, base.js,
deps.js, the generated app loader). Version tokens are neutralised.

Marker handling is two-phase: the markers present in the template are
detected once after version substitution, and the vendor JS and app JS fills
run only for markers that exist. A template authored without an app
bootstrap therefore never has one injected.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import MissingTemplateError
from .manifest import add_vendor_css, read_manifest
from .options import BuildOptions, TemplateDescriptor
from .tags import (
    APP_CSS, APP_JS, VENDOR_JS,
    create_link_tag, create_script_tag, fill_marker, find_markers,
    replace_debug_versions,
)

logger = logging.getLogger("index_builder.debug_index")


def resolve_template(options: BuildOptions, descriptor: TemplateDescriptor) -> Path:
    """Return the template path for descriptor, raising if it does not exist."""
    path = descriptor.template_path(options.base_path)
    if not path.exists():
        raise MissingTemplateError(path)
    return path


def bootstrap_scripts(options: BuildOptions) -> list[str]:
    """The four scripts that boot uncompiled Closure code, relative to basePath."""
    sources = [
        options.build_dir / "gcc-defines-debug.js",
        options.closure_goog_dir / "base.js",
        options.closure_goog_dir / "deps.js",
        options.app_loader_path,
    ]
    return [os.path.relpath(src, options.base_path) for src in sources]


class DebugIndexBuilder:
    """
    Renders and writes the debug index for one template descriptor.

    Usage:
        path = DebugIndexBuilder(options).build(descriptor)
    """

    def __init__(self, options: BuildOptions) -> None:
        self.options = options

    def render(self, descriptor: TemplateDescriptor) -> str:
        """Return the debug HTML for descriptor without writing it."""
        opts = self.options
        template_path = resolve_template(opts, descriptor)
        logger.info("Creating debug index from %s...", template_path)

        template = template_path.read_text(encoding="utf-8")
        template = replace_debug_versions(template)
        markers = find_markers(template)

        template = add_vendor_css(template, opts.manifest_path("css", "debug", descriptor.id))
        template = fill_marker(template, APP_CSS, [create_link_tag(opts.debug_css)])

        if VENDOR_JS in markers:
            vendor_scripts = read_manifest(opts.manifest_path("js", "debug", descriptor.id))
            template = fill_marker(template, VENDOR_JS, map(create_script_tag, vendor_scripts))

        if APP_JS in markers:
            template = fill_marker(
                template, APP_JS, map(create_script_tag, bootstrap_scripts(opts))
            )

        return template

    def build(self, descriptor: TemplateDescriptor) -> Path:
        """Write <basePath>/<id>.html and return its path."""
        return self.write(descriptor, self.render(descriptor))

    def write(self, descriptor: TemplateDescriptor, html: str) -> Path:
        index_path = self.options.base_path / f"{descriptor.id}.html"
        logger.info("Writing debug index to %s", index_path)
        index_path.write_text(html, encoding="utf-8")
        return index_path
