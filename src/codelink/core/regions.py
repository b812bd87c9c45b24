"""Locate named ``#region`` blocks inside linked source files."""

from __future__ import annotations

from dataclasses import dataclass
import io


@dataclass(frozen=True, slots=True)
class RegionSpan:
    """Lines found between a region's start and end markers.

    ``start_line`` and ``end_line`` are 1-based and inclusive; an empty region
    has ``end_line == start_line - 1``.
    """

    name: str
    start_line: int
    end_line: int
    text: str


@dataclass(frozen=True, slots=True)
class RegionNotFound:
    name: str


@dataclass(frozen=True, slots=True)
class AmbiguousRegion:
    name: str
    count: int


RegionResult = RegionSpan | RegionNotFound | AmbiguousRegion


def extract_region(
    text: str,
    name: str,
    *,
    start_marker: str = "#region",
    end_marker: str = "#endregion",
) -> RegionResult:
    """Return the unique region called ``name`` in ``text``.

    Regions nest, each end marker closing the innermost open region. Names are
    compared exactly. Start markers that are never closed are ignored. Only LF,
    CRLF and CR end a line.
    """
    lines = list(io.StringIO(text, newline=""))
    open_regions: list[tuple[str, int]] = []
    matches: list[tuple[int, int]] = []

    for index, line in enumerate(lines):
        stripped = line.strip()
        label = _marker_label(stripped, start_marker)
        if label is not None:
            open_regions.append((label, index))
            continue
        if _marker_label(stripped, end_marker) is not None and open_regions:
            label, opened_at = open_regions.pop()
            if label == name:
                matches.append((opened_at, index))

    if not matches:
        return RegionNotFound(name)
    if len(matches) > 1:
        return AmbiguousRegion(name, len(matches))

    opened_at, closed_at = matches[0]
    return RegionSpan(
        name=name,
        start_line=opened_at + 2,
        end_line=closed_at,
        text="".join(lines[opened_at + 1 : closed_at]),
    )


def _marker_label(stripped: str, marker: str) -> str | None:
    if not stripped.startswith(marker):
        return None
    rest = stripped[len(marker) :]
    if rest and not rest[0].isspace():
        return None
    return rest.strip()


__all__ = ["AmbiguousRegion", "RegionNotFound", "RegionResult", "RegionSpan", "extract_region"]
