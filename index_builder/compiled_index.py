"""
CompiledIndexBuilder — writes <distPath>/<id>.html for production.

Differs from the debug index in three ways: version tokens get real values
(@version@ becomes a "<version>/" path prefix), vendor resources come from
the dist manifests, and the app markers receive the single compiled CSS and
JS artifacts. Vendor markers are always filled, with no presence check.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .debug_index import resolve_template
from .manifest import add_vendor_css, add_vendor_scripts
from .options import BuildOptions, TemplateDescriptor
from .tags import (
    APP_CSS, APP_JS,
    create_link_tag, create_script_tag, fill_marker, replace_compiled_versions,
)

logger = logging.getLogger("index_builder.compiled_index")


class CompiledIndexBuilder:
    """Renders and writes the compiled index for one template descriptor."""

    def __init__(self, options: BuildOptions) -> None:
        self.options = options

    def render(self, descriptor: TemplateDescriptor) -> str:
        opts = self.options
        template_path = resolve_template(opts, descriptor)
        logger.info("Creating compiled index from %s...", template_path)

        template = template_path.read_text(encoding="utf-8")
        template = replace_compiled_versions(
            template, opts.app_version, opts.effective_package_version
        )

        template = add_vendor_css(template, opts.manifest_path("css", "dist", descriptor.id))
        template = add_vendor_scripts(template, opts.manifest_path("js", "dist", descriptor.id))

        template = fill_marker(template, APP_CSS, [create_link_tag(opts.compiled_css)])
        return fill_marker(template, APP_JS, [create_script_tag(opts.compiled_js)])

    def build(self, descriptor: TemplateDescriptor) -> Path:
        return self.write(descriptor, self.render(descriptor))

    def write(self, descriptor: TemplateDescriptor, html: str) -> Path:
        """Write <distPath>/<id>.html, creating distPath if needed."""
        dist_path = self.options.dist_path
        dist_path.mkdir(parents=True, exist_ok=True)
        index_path = dist_path / f"{descriptor.id}.html"
        logger.info("Writing compiled index to %s", index_path)
        index_path.write_text(html, encoding="utf-8")
        return index_path
