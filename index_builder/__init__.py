"""
Index Builder
=============
Generates HTML entry points for a web application's debug and compiled
builds by filling placeholder tokens in HTML templates with version strings
and <link>/<script> tags for vendor and application resources.

Usage:
    from index_builder import build_index, load_options_file

    options = load_options_file("index.yaml")
    report = asyncio.run(build_index(options, debug_only=False))
"""

from .errors import (
    IndexBuildError, FatalBuildError, ManifestReadError,
    MissingTemplateError, DebugLoaderError, OptionsError,
)
from .options import BuildOptions, TemplateDescriptor, load_options_dict, load_options_file
from .debug_index import DebugIndexBuilder
from .compiled_index import CompiledIndexBuilder
from .loader import DebugLoaderWriter
from .orchestrator import IndexReport, TemplateRecord, TemplateState, build_index, build_index_from_file

__all__ = [
    "build_index", "build_index_from_file", "IndexReport", "TemplateRecord", "TemplateState",
    "BuildOptions", "TemplateDescriptor", "load_options_dict", "load_options_file",
    "DebugIndexBuilder", "CompiledIndexBuilder", "DebugLoaderWriter",
    "IndexBuildError", "FatalBuildError", "ManifestReadError",
    "MissingTemplateError", "DebugLoaderError", "OptionsError",
]
