"""Turn parsed fence directives into a resolved code link or a diagnostic."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import PurePath

from .arguments import FenceInfo, parse_fence_info
from .config import CodeLinkConfig
from .diagnostics import Diagnostic
from .filesystem import DirectoryAccessor
from .regions import AmbiguousRegion, RegionNotFound, extract_region


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedCodeLink:
    """Everything the renderer needs to emit a linked code block."""

    contents: str
    session: str
    file_path: PurePath | None = None
    region: str | None = None
    region_text: str | None = None
    project_path: PurePath | None = None
    package: str | None = None

    @property
    def rendered_text(self) -> str:
        """Return the region text when a region was extracted, else the file contents."""
        if self.region_text is not None:
            return self.region_text
        return self.contents

    @property
    def build_identity(self) -> str | None:
        """Return the project path or package identity passed to the viewer."""
        if self.project_path is not None:
            return str(self.project_path)
        return self.package

    @property
    def is_file_backed(self) -> bool:
        return self.file_path is not None


ResolutionResult = ResolvedCodeLink | Diagnostic


class FenceResolver:
    """Resolve code link fences against a :class:`DirectoryAccessor`.

    The resolver holds no per-document state, so a single instance can serve
    every document of a batch, including from several threads.
    """

    def __init__(
        self,
        accessor: DirectoryAccessor,
        config: CodeLinkConfig | None = None,
    ) -> None:
        self.accessor = accessor
        self.config = config or CodeLinkConfig()

    def parse(self, info: str) -> FenceInfo | None:
        """Parse a fence info string using the configured language aliases."""
        return parse_fence_info(info, self.config.languages)

    def resolve(
        self,
        info: FenceInfo,
        current_directory: str | PurePath | None = None,
    ) -> ResolutionResult:
        """Resolve ``info`` relative to ``current_directory`` (relative to the accessor root)."""
        directives = info.directives

        if directives.project and directives.package:
            return Diagnostic.conflicting_options()

        file_path: PurePath | None = None
        contents = ""
        if directives.path is not None:
            file_path = self.accessor.resolve_path(directives.path, current_directory)
            if not self.accessor.exists(file_path):
                return Diagnostic.file_not_found(display_path(directives.path))
            try:
                contents = self.accessor.read_text(file_path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Unable to read linked file '%s'.", file_path, exc_info=exc)
                return Diagnostic.file_not_found(display_path(directives.path))

        project_path: PurePath | None = None
        package: str | None = None
        if directives.project:
            project_path = self.accessor.resolve_path(directives.project, current_directory)
            if not self.accessor.exists(project_path):
                return Diagnostic.project_not_found(display_path(directives.project))
        elif directives.package:
            package = directives.package
        else:
            search_directory = (
                file_path.parent
                if file_path is not None
                else self.accessor.resolve_path(".", current_directory)
            )
            project_path = self.discover_project(search_directory)
            if project_path is None:
                return Diagnostic.no_project_specified()

        region_text: str | None = None
        if directives.region and file_path is not None:
            match = extract_region(
                contents,
                directives.region,
                start_marker=self.config.region_start,
                end_marker=self.config.region_end,
            )
            if isinstance(match, RegionNotFound):
                return Diagnostic.region_not_found(directives.region, str(file_path))
            if isinstance(match, AmbiguousRegion):
                return Diagnostic.multiple_regions_found(directives.region)
            region_text = match.text

        link = ResolvedCodeLink(
            contents=contents,
            session=directives.session or self.config.default_session,
            file_path=file_path,
            region=directives.region,
            region_text=region_text,
            project_path=project_path,
            package=package,
        )
        logger.debug(
            "Resolved code link %s (build=%s, region=%s, session=%s).",
            file_path or "<inline>",
            link.build_identity,
            link.region,
            link.session,
        )
        return link

    def discover_project(self, directory: PurePath) -> PurePath | None:
        """Return the single build descriptor found in ``directory``, if exactly one exists."""
        suffixes = tuple(suffix.lower() for suffix in self.config.project_suffixes)
        candidates = [
            path for path in self.accessor.list_files(directory) if path.suffix.lower() in suffixes
        ]
        if len(candidates) == 1:
            return candidates[0]
        if candidates:
            logger.debug(
                "Several build descriptors in '%s' (%s); none selected.",
                directory,
                ", ".join(path.name for path in candidates),
            )
        return None


def display_path(path: str) -> str:
    """Return ``path`` as shown in diagnostics: bare relative paths gain a ``./`` prefix."""
    if path.startswith((".", "/", "\\")) or os.path.isabs(path):
        return path
    return f"./{path}"


__all__ = ["FenceResolver", "ResolutionResult", "ResolvedCodeLink", "display_path"]
