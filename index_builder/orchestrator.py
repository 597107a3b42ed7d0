"""
IndexOrchestrator — generate debug and compiled indexes for every template
==========================================================================
A run has two phases:

  1. render  — one asyncio task per template renders its debug HTML and,
               unless debug_only, its compiled HTML. Nothing is written yet.
  2. write   — rendered HTML is written; debug index before compiled index.

Per template (records are keyed by position, so repeated ids stay apart):

    pending → debug_built → (compiled_built | skipped_compiled) → done
    skip: true            → skipped
    any error             → failed

The first non-skipped descriptor whose id is "index" writes the shared debug
loader (.build/app-loader.js) before rendering its debug index. Only that
template waits; the others never block on it.

A FatalBuildError (unreadable manifest) or DebugLoaderError stops the run in
the render phase: pending renders are cancelled and the error is raised, so
no index file of that run reaches the disk. Any other error fails only its
own template and is recorded on its TemplateRecord.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from .compiled_index import CompiledIndexBuilder
from .debug_index import DebugIndexBuilder
from .errors import DebugLoaderError, FatalBuildError
from .loader import DebugLoaderWriter, load_gcc_args
from .options import RESERVED_INDEX_ID, BuildOptions, TemplateDescriptor, load_options_file

logger = logging.getLogger("index_builder.orchestrator")

LoaderWriter = Callable[[dict[str, Any], Path], Any]

# Timeline events that are not template states
LOADER_WRITTEN = "loader_written"
DEBUG_RENDERED = "debug_rendered"


class TemplateState(str, Enum):
    PENDING          = "pending"
    DEBUG_BUILT      = "debug_built"
    COMPILED_BUILT   = "compiled_built"
    SKIPPED_COMPILED = "skipped_compiled"
    DONE             = "done"
    SKIPPED          = "skipped"
    FAILED           = "failed"


@dataclass
class TemplateRecord:
    """Progress of one template descriptor through a run."""

    position: int
    template_id: str
    state: Optional[TemplateState] = None
    history: list[TemplateState] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class IndexReport:
    """What one build_index run wrote, skipped and failed on."""

    records: list[TemplateRecord] = field(default_factory=list)
    debug_written: list[str] = field(default_factory=list)
    compiled_written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    # (position, state value or LOADER_WRITTEN / DEBUG_RENDERED), in run order
    timeline: list[tuple[int, str]] = field(default_factory=list)
    loader_path: Optional[str] = None

    @property
    def failures(self) -> dict[int, str]:
        """Position -> error message for every failed template."""
        return {
            r.position: r.error or ""
            for r in self.records if r.state == TemplateState.FAILED
        }

    @property
    def ok(self) -> bool:
        return not self.failures

    def record_for(self, template_id: str) -> TemplateRecord:
        """First record with template_id."""
        return next(r for r in self.records if r.template_id == template_id)

    def enter(self, position: int, state: TemplateState) -> None:
        record = self.records[position]
        record.state = state
        record.history.append(state)
        self.timeline.append((position, state.value))

    def mark(self, position: int, event: str) -> None:
        self.timeline.append((position, event))

    def fail(self, position: int, error: BaseException) -> None:
        self.records[position].error = str(error)
        self.enter(position, TemplateState.FAILED)


def loader_owner(templates: tuple[TemplateDescriptor, ...]) -> Optional[int]:
    """Index of the descriptor that generates the debug loader, if any."""
    for i, descriptor in enumerate(templates):
        if descriptor.id == RESERVED_INDEX_ID and not descriptor.skip:
            return i
    return None


async def write_debug_loader(options: BuildOptions, writer: LoaderWriter) -> Path:
    """
    Generate the shared debug loader from the GCC args file.

    Raises
    ------
    DebugLoaderError  — reading the args or running the writer failed
    """
    output_path = options.app_loader_path
    try:
        gcc_args = await asyncio.to_thread(load_gcc_args, options.gcc_args_path)
        result = await asyncio.to_thread(writer, gcc_args, output_path)
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        raise DebugLoaderError(f"Failed writing debug loader: {exc}") from exc
    return output_path


async def _cancel(tasks: set[asyncio.Task]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def build_index(
    options: BuildOptions,
    debug_only: bool = False,
    *,
    loader_writer: Optional[LoaderWriter] = None,
) -> IndexReport:
    """
    Build the debug index, and unless debug_only the compiled index, for
    every template in options.templates (declaration order).

    Raises
    ------
    FatalBuildError   — a vendor manifest could not be read
    DebugLoaderError  — the one-time debug loader generation failed
    """
    templates = options.templates
    report = IndexReport(records=[TemplateRecord(i, t.id) for i, t in enumerate(templates)])
    if not templates:
        logger.info("No templates configured; nothing to build")
        return report

    writer = loader_writer or DebugLoaderWriter(options.closure_goog_dir)
    debug_builder = DebugIndexBuilder(options)
    compiled_builder = CompiledIndexBuilder(options)
    owner = loader_owner(templates)

    async def _render(position: int, descriptor: TemplateDescriptor) -> tuple[str, Optional[str]]:
        if position == owner:
            path = await write_debug_loader(options, writer)
            report.loader_path = str(path)
            report.mark(position, LOADER_WRITTEN)

        debug_html = await asyncio.to_thread(debug_builder.render, descriptor)
        report.mark(position, DEBUG_RENDERED)
        compiled_html = None
        if not debug_only:
            compiled_html = await asyncio.to_thread(compiled_builder.render, descriptor)
        return debug_html, compiled_html

    # ── Phase 1: render ───────────────────────────────────────────────────────
    tasks: dict[asyncio.Task, int] = {}
    for position, descriptor in enumerate(templates):
        if descriptor.skip:
            report.enter(position, TemplateState.SKIPPED)
            report.skipped.append(descriptor.id)
            logger.debug("Skipping template %s", descriptor.id)
            continue
        report.enter(position, TemplateState.PENDING)
        tasks[asyncio.create_task(_render(position, descriptor))] = position

    rendered: dict[int, tuple[str, Optional[str]]] = {}
    pending = set(tasks)
    while pending:
        done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)
        aborting: Optional[BaseException] = None
        for task in done:
            position = tasks[task]
            exc = task.exception()
            if exc is None:
                rendered[position] = task.result()
                continue
            report.fail(position, exc)
            if isinstance(exc, FatalBuildError):
                aborting = exc
            elif isinstance(exc, DebugLoaderError):
                aborting = aborting or exc
            elif isinstance(exc, Exception):
                logger.error("Failed building index %s: %s", templates[position].id, exc)
            else:
                raise exc
        if aborting is not None:
            await _cancel(pending)
            logger.error("Index generation aborted: %s", aborting)
            raise aborting

    # ── Phase 2: write ────────────────────────────────────────────────────────
    async def _write(position: int, debug_html: str, compiled_html: Optional[str]) -> None:
        descriptor = templates[position]
        path = await asyncio.to_thread(debug_builder.write, descriptor, debug_html)
        report.debug_written.append(str(path))
        report.enter(position, TemplateState.DEBUG_BUILT)

        if compiled_html is None:
            report.enter(position, TemplateState.SKIPPED_COMPILED)
        else:
            path = await asyncio.to_thread(compiled_builder.write, descriptor, compiled_html)
            report.compiled_written.append(str(path))
            report.enter(position, TemplateState.COMPILED_BUILT)
        report.enter(position, TemplateState.DONE)

    positions = sorted(rendered)
    results = await asyncio.gather(
        *(_write(p, *rendered[p]) for p in positions),
        return_exceptions=True,
    )
    for position, result in zip(positions, results):
        if isinstance(result, Exception):
            logger.error("Failed writing index %s: %s", templates[position].id, result)
            report.fail(position, result)
        elif isinstance(result, BaseException):
            raise result

    logger.info(
        "Index generation finished: %d debug, %d compiled, %d skipped, %d failed",
        len(report.debug_written), len(report.compiled_written),
        len(report.skipped), len(report.failures),
    )
    return report


async def build_index_from_file(
    path: str | Path,
    debug_only: bool = False,
    **kwargs: Any,
) -> IndexReport:
    """Load options from a JSON/YAML file and run build_index with them."""
    return await build_index(load_options_file(path), debug_only, **kwargs)
