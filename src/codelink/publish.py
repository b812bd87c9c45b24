"""Render a directory of Markdown documents into a static HTML tree."""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass, field
import logging
from pathlib import Path
import shutil

from .adapters.markdown import (
    MarkdownConversionError,
    render_markdown,
    resolve_markdown_extensions,
)
from .core.config import PublishConfig
from .core.diagnostics import DiagnosticEmitter, LoggingEmitter
from .core.exceptions import PublishError
from .core.filesystem import DirectoryAccessor, FileSystemDirectoryAccessor
from .core.resolver import FenceResolver
from .core.templates import PageRenderer
from .extensions.codelink import FenceDiagnostic


logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})


@dataclass(slots=True)
class PageResult:
    """One rendered Markdown document."""

    source: Path
    target: Path
    diagnostics: list[FenceDiagnostic] = field(default_factory=list)


@dataclass(slots=True)
class PublishReport:
    """Outcome of a :func:`publish_directory` run."""

    pages: list[PageResult] = field(default_factory=list)
    assets: list[Path] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[FenceDiagnostic]:
        return [entry for page in self.pages for entry in page.diagnostics]


def publish_directory(
    config: PublishConfig,
    *,
    emitter: DiagnosticEmitter | None = None,
    accessor: DirectoryAccessor | None = None,
) -> PublishReport:
    """Render every Markdown file under ``config.source_dir`` into ``config.output_dir``.

    Documents are rendered concurrently. They share one resolver, which only
    reads through ``accessor``, while each worker builds its own Markdown
    processor.
    """
    emitter = emitter or LoggingEmitter()
    source_dir = config.source_dir.resolve()
    output_dir = config.output_dir.resolve()
    if not source_dir.is_dir():
        raise PublishError(f"Source directory '{config.source_dir}' does not exist.")

    resolver = FenceResolver(accessor or FileSystemDirectoryAccessor(source_dir), config.codelink)
    renderer = PageRenderer(config.template_dir)
    extensions = resolve_markdown_extensions(config.markdown_extensions, None)
    documents, assets = _collect_inputs(source_dir, output_dir)

    report = PublishReport()
    if config.copy_assets:
        report.assets = [_copy_asset(path, source_dir, output_dir) for path in assets]

    with concurrent.futures.ThreadPoolExecutor(max_workers=config.jobs) as executor:
        future_to_path = {
            executor.submit(
                _publish_page,
                path,
                source_dir=source_dir,
                output_dir=output_dir,
                resolver=resolver,
                extensions=extensions,
                renderer=renderer,
                emitter=emitter,
            ): path
            for path in documents
        }
        for future in concurrent.futures.as_completed(future_to_path):
            path = future_to_path[future]
            try:
                page = future.result()
            except (OSError, UnicodeDecodeError, MarkdownConversionError) as exc:
                raise PublishError(
                    f"Failed to publish '{path.relative_to(source_dir)}'."
                ) from exc
            report.pages.append(page)
            emitter.event(
                "page_written",
                {
                    "source": str(page.source),
                    "target": str(page.target),
                    "diagnostics": len(page.diagnostics),
                },
            )

    report.pages.sort(key=lambda page: page.source)
    logger.debug(
        "Published %d page(s) and %d asset(s) to %s.",
        len(report.pages),
        len(report.assets),
        output_dir,
    )
    return report


def _collect_inputs(source_dir: Path, output_dir: Path) -> tuple[list[Path], list[Path]]:
    documents: list[Path] = []
    assets: list[Path] = []
    for path in sorted(source_dir.rglob("*")):
        if not path.is_file() or path.is_relative_to(output_dir):
            continue
        if path.suffix.lower() in MARKDOWN_SUFFIXES:
            documents.append(path)
        else:
            assets.append(path)
    return documents, assets


def _copy_asset(path: Path, source_dir: Path, output_dir: Path) -> Path:
    target = output_dir / path.relative_to(source_dir)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, target)
    except OSError as exc:
        raise PublishError(f"Unable to copy '{path}' to '{target}'.") from exc
    return target


def _publish_page(
    path: Path,
    *,
    source_dir: Path,
    output_dir: Path,
    resolver: FenceResolver,
    extensions: list[str],
    renderer: PageRenderer,
    emitter: DiagnosticEmitter,
) -> PageResult:
    relative = path.relative_to(source_dir)
    document = render_markdown(
        path.read_text(encoding="utf-8"),
        resolver=resolver,
        current_directory=relative.parent.as_posix(),
        extensions=extensions,
        emitter=emitter,
        document=relative.as_posix(),
    )

    title = str(document.front_matter.get("title") or path.stem)
    target = (output_dir / relative).with_suffix(".html")
    target.parent.mkdir(parents=True, exist_ok=True)
    page = renderer.render(title, document.html, document.front_matter)
    target.write_text(page, encoding="utf-8")
    return PageResult(source=path, target=target, diagnostics=document.diagnostics)


__all__ = ["MARKDOWN_SUFFIXES", "PageResult", "PublishReport", "publish_directory"]
