from pathlib import PurePosixPath

import pytest

from codelink.core.arguments import parse_fence_info
from codelink.core.diagnostics import Diagnostic
from codelink.core.resolver import ResolvedCodeLink
from codelink.extensions.codelink.blocks import (
    FenceBlock,
    FenceMarker,
    FenceState,
    LineAction,
    closes_fence,
    container_prefix,
    opening_fence,
    plain_fence_line,
    strip_container,
)


def _file_link(contents: str) -> ResolvedCodeLink:
    return ResolvedCodeLink(
        contents=contents,
        session="Run",
        file_path=PurePosixPath("/repo/Program.cs"),
        package="pkg",
    )


def test_opening_fence_variants() -> None:
    assert opening_fence("```cs Program.cs") == FenceMarker(0, "`", 3, "cs Program.cs")
    assert opening_fence("  ~~~~ csharp") == FenceMarker(2, "~", 4, " csharp")
    assert opening_fence("    ```cs") is None
    assert opening_fence("``cs") is None
    assert opening_fence("```cs `weird`") is None
    assert opening_fence("~~~cs `allowed`") is not None


@pytest.mark.parametrize(
    ("line", "expected"),
    [("```", True), ("`````", True), ("   ```  ", True), ("``", False), ("```cs", False), ("    ```", False), ("~~~", False)],
)
def test_closing_fence(line: str, expected: bool) -> None:
    assert closes_fence(line, "`", 3) is expected


def test_open_declines_other_languages() -> None:
    assert FenceBlock.open("```js Program.cs", parse_fence_info) is None
    assert FenceBlock.open("plain text", parse_fence_info) is None


def test_file_backed_block_discards_its_body() -> None:
    block = FenceBlock.open("```cs Program.cs", parse_fence_info, line_number=4)
    assert block is not None
    assert block.state is FenceState.OPEN
    assert block.line_number == 4

    block.attach(_file_link("class P {}\n"))
    assert block.state is FenceState.ACCUMULATING
    assert block.feed("ignored") is LineAction.DISCARD
    assert block.feed("```") is LineAction.STOP
    assert block.state is FenceState.CLOSED
    assert block.feed("after") is LineAction.STOP
    assert block.content == "class P {}\n"


def test_inline_block_accumulates_its_body() -> None:
    block = FenceBlock.open("  ```cs --package pkg", parse_fence_info)
    assert block is not None
    block.attach(ResolvedCodeLink(contents="", session="Run", package="pkg"))

    assert block.feed("  Console.WriteLine(1);") is LineAction.CONTINUE
    assert block.feed("      nested();") is LineAction.CONTINUE
    assert block.feed(" short();") is LineAction.CONTINUE
    assert block.feed("  ```") is LineAction.STOP
    assert block.content == "Console.WriteLine(1);\n    nested();\nshort();\n"


def test_empty_file_falls_back_to_the_body() -> None:
    block = FenceBlock.open("```cs Program.cs", parse_fence_info)
    assert block is not None
    block.attach(_file_link("   \n"))

    assert block.feed("fallback();") is LineAction.CONTINUE
    block.close()

    assert block.state is FenceState.CLOSED
    assert block.content == "fallback();\n"


def test_empty_file_without_body_renders_the_file() -> None:
    block = FenceBlock.open("```cs Program.cs", parse_fence_info)
    assert block is not None
    block.attach(_file_link(""))
    block.feed("```")

    assert block.content == ""


def test_diagnostic_block_keeps_reading_to_the_closing_fence() -> None:
    block = FenceBlock.open("````cs Missing.cs", parse_fence_info)
    assert block is not None
    block.attach(Diagnostic.file_not_found("./Missing.cs"))

    assert block.feed("```") is LineAction.CONTINUE
    assert block.feed("````") is LineAction.STOP
    assert not block.holds_file_content


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("```js Program.cs", "```js"),
        ("  ~~~~py one two", "  ~~~~py"),
        ("```js", "```js"),
        ("```", "```"),
        ('```python title="demo.py"', '```python title="demo.py"'),
        ("``` { .js #demo }", "``` { .js #demo }"),
        ("```js:run Program.cs", "```"),
    ],
)
def test_plain_fence_line(line: str, expected: str) -> None:
    marker = opening_fence(line)

    assert marker is not None
    assert plain_fence_line(marker) == expected


def test_container_prefix_for_blockquotes() -> None:
    lines = ["> intro", "> > ```cs", "plain"]

    assert container_prefix(lines, 0) == ""
    assert container_prefix(lines, 1) == "> > "
    assert container_prefix(lines, 2) == ""


def test_container_prefix_for_list_items() -> None:
    lines = [
        "- item",
        "",
        "    ```cs",
        "    - nested",
        "",
        "        ```cs",
        "Para",
        "",
        "    ```cs",
        "1. first",
        "    ```cs",
    ]

    assert container_prefix(lines, 2) == "    "
    assert container_prefix(lines, 5) == "        "
    assert container_prefix(lines, 8) == ""
    assert container_prefix(lines, 10) == "    "


def test_strip_container() -> None:
    assert strip_container("> code", "> ") == "code"
    assert strip_container(">", "> ") == ""
    assert strip_container(">     indented", "> ") == "    indented"
    assert strip_container("outside", "> ") is None
    assert strip_container("        body", "    ") == "    body"
    assert strip_container("", "    ") == ""
    assert strip_container("next", "    ") is None
    assert strip_container("anything", "") == "anything"
