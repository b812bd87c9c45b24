"""Line-driven state machine delimiting a code link fence."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
import re
from typing import NamedTuple

from ...core.arguments import FenceInfo
from ...core.resolver import ResolutionResult, ResolvedCodeLink


_FENCE_OPEN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_FENCE_LIKE = re.compile(r"^[ >]*(?:`{3}|~{3})")
_QUOTE_PREFIX = re.compile(r"^(?:[ ]{0,3}>[ ]?)+")
_LIST_ITEM = re.compile(r"^[ ]*(?:[-*+]|\d+[.)])[ ]+\S")
_LANGUAGE = re.compile(r"^[\w#.+-]+$")
_HOST_OPTIONS = re.compile(
    r"""^(?:\s*(?:\{[^}]*\}|[A-Za-z_][\w-]*=(?:"[^"]*"|'[^']*')))*\s*$"""
)


class FenceState(Enum):
    OPEN = "open"
    ACCUMULATING = "accumulating"
    CLOSED = "closed"


class LineAction(Enum):
    """Outcome of feeding one line to a :class:`FenceBlock`."""

    CONTINUE = "continue"
    DISCARD = "discard"
    STOP = "stop"


class FenceMarker(NamedTuple):
    indent: int
    char: str
    length: int
    info: str


def opening_fence(line: str) -> FenceMarker | None:
    """Return the fence opened by ``line``, if any."""
    match = _FENCE_OPEN.match(line)
    if match is None:
        return None
    fence = match.group("fence")
    info = match.group("info")
    # Backtick fences cannot carry backticks in their info string.
    if fence[0] == "`" and "`" in info:
        return None
    return FenceMarker(len(match.group("indent")), fence[0], len(fence), info)


def closes_fence(line: str, char: str, length: int) -> bool:
    """Return whether ``line`` closes a fence of ``length`` ``char`` characters."""
    indent = len(line) - len(line.lstrip(" "))
    if indent >= 4:
        return False
    rest = line[indent:]
    run = len(rest) - len(rest.lstrip(char))
    if run < length:
        return False
    return not rest[run:].strip()


def plain_fence_line(marker: FenceMarker) -> str:
    """Rebuild an opening fence the default fenced code processors accept.

    Info strings made of a language and attribute options are kept. Anything
    else keeps only its first word as the language so the body still renders
    as code.
    """
    fence = " " * marker.indent + marker.char * marker.length
    words = marker.info.split(maxsplit=1)
    language = words[0] if words else ""
    rest = words[1] if len(words) > 1 else ""
    if language.startswith("{") or _HOST_OPTIONS.match(rest):
        return fence + marker.info
    if not _LANGUAGE.match(language):
        return fence
    return fence + language


def container_prefix(lines: Sequence[str], index: int, *, tab_length: int = 4) -> str:
    """Return the blockquote markers or list item indentation wrapping ``lines[index]``.

    Only lines that look like a fence are inspected. List item content is
    recognised from the nearest shallower line above, which must be a list
    item; anything else leaves the line at the top level.
    """
    line = lines[index]
    if not _FENCE_LIKE.match(line):
        return ""
    quote = _QUOTE_PREFIX.match(line)
    if quote is not None:
        return quote.group(0)
    leading = len(line) - len(line.lstrip(" "))
    level = leading - leading % tab_length
    if not level:
        return ""
    for previous in reversed(lines[:index]):
        if not previous.strip():
            continue
        indent = len(previous) - len(previous.lstrip(" "))
        if indent >= level:
            continue
        if _LIST_ITEM.match(previous) is None:
            return ""
        return " " * (indent - indent % tab_length + tab_length)
    return ""


def strip_container(line: str, prefix: str) -> str | None:
    """Remove ``prefix`` from ``line``, or return ``None`` when the line leaves the container."""
    if line.startswith(prefix):
        return line[len(prefix) :]
    if prefix.strip():
        bare = prefix.rstrip()
        return line[len(bare) :] if line.startswith(bare) else None
    return "" if not line.strip() else None


@dataclass(slots=True)
class FenceBlock:
    """A code link fence being read from a document.

    The block starts ``OPEN`` once its info string parsed, moves to
    ``ACCUMULATING`` when the resolution result is attached and ends
    ``CLOSED`` on the matching closing fence (or the end of the document).
    """

    marker: FenceMarker
    info: FenceInfo
    line_number: int = 0
    state: FenceState = FenceState.OPEN
    result: ResolutionResult | None = None
    body: list[str] = field(default_factory=list)

    @classmethod
    def open(
        cls,
        line: str,
        parse: Callable[[str], FenceInfo | None],
        *,
        line_number: int = 0,
    ) -> FenceBlock | None:
        """Start a block from an opening fence line, or return ``None`` to decline it."""
        marker = opening_fence(line)
        if marker is None:
            return None
        info = parse(marker.info)
        if info is None:
            return None
        return cls(marker=marker, info=info, line_number=line_number)

    def attach(self, result: ResolutionResult) -> None:
        self.result = result
        self.state = FenceState.ACCUMULATING

    def feed(self, line: str) -> LineAction:
        """Consume the next document line."""
        if self.state is FenceState.CLOSED:
            return LineAction.STOP
        if closes_fence(line, self.marker.char, self.marker.length):
            self.state = FenceState.CLOSED
            return LineAction.STOP
        if self.holds_file_content:
            return LineAction.DISCARD
        self.body.append(self._strip_indent(line))
        return LineAction.CONTINUE

    def close(self) -> None:
        self.state = FenceState.CLOSED

    @property
    def holds_file_content(self) -> bool:
        """Whether the resolved file already provides the text of the block."""
        result = self.result
        return (
            isinstance(result, ResolvedCodeLink)
            and result.is_file_backed
            and bool(result.rendered_text.strip())
        )

    @property
    def body_text(self) -> str:
        return "".join(f"{line}\n" for line in self.body)

    @property
    def content(self) -> str:
        """Return the text displayed inside the rendered block."""
        if self.holds_file_content or not self.body:
            result = self.result
            if isinstance(result, ResolvedCodeLink):
                return result.rendered_text
        return self.body_text

    def _strip_indent(self, line: str) -> str:
        indent = self.marker.indent
        if not indent:
            return line
        leading = len(line) - len(line.lstrip(" "))
        return line[min(indent, leading) :]


__all__ = [
    "FenceBlock",
    "FenceMarker",
    "FenceState",
    "LineAction",
    "closes_fence",
    "container_prefix",
    "opening_fence",
    "plain_fence_line",
    "strip_container",
]
