"""
Error taxonomy for index generation.

  FatalBuildError      — a prior build stage is broken; the caller must stop
                         the whole process (the CLI maps it to exit status 1)
  MissingTemplateError — fails one template; sibling templates continue
  DebugLoaderError     — the one-time loader step failed; aborts the run
  OptionsError         — the options object/file is invalid
"""
from __future__ import annotations

from pathlib import Path


class IndexBuildError(Exception):
    """Base class for every error raised by index_builder."""


class FatalBuildError(IndexBuildError):
    """Raised when the run cannot continue in any form."""


class ManifestReadError(FatalBuildError):
    """Raised when a vendor resource manifest cannot be read."""

    def __init__(self, path: Path, reason: BaseException) -> None:
        super().__init__(f"failed reading vendor resources from {path}: {reason}")
        self.path = path
        self.reason = reason


class MissingTemplateError(IndexBuildError, FileNotFoundError):
    """Raised when a template descriptor points at a file that does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Missing template file {path}")
        self.path = path


class DebugLoaderError(IndexBuildError, RuntimeError):
    """Raised when the shared debug loader could not be written."""


class OptionsError(IndexBuildError, ValueError):
    """Raised when build options fail validation."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
