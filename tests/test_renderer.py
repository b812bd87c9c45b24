from pathlib import PurePosixPath

from bs4 import BeautifulSoup
import pytest

from codelink.core.arguments import parse_fence_info
from codelink.core.config import CodeLinkConfig
from codelink.core.diagnostics import Diagnostic
from codelink.core.resolver import ResolvedCodeLink
from codelink.extensions.codelink import FenceBlock, render_block, render_diagnostic, render_link


def test_render_link_attributes() -> None:
    link = ResolvedCodeLink(
        contents="a < b",
        session="Run",
        file_path=PurePosixPath("/repo/Program.cs"),
        region="main",
        region_text="x && y\n",
        project_path=PurePosixPath("/repo/app.csproj"),
    )

    html = render_link(link)

    assert html == (
        '<pre><code class="language-csharp" data-trydotnet-mode="editor" '
        'data-trydotnet-file-name="/repo/Program.cs" '
        'data-trydotnet-package="/repo/app.csproj" '
        'data-trydotnet-region="main" '
        'data-trydotnet-session-id="Run">x &amp;&amp; y\n</code></pre>'
    )


def test_render_link_without_file_or_region() -> None:
    link = ResolvedCodeLink(contents="", session="S", package="pkg")

    html = render_link(link, text="")

    assert html == (
        '<pre><code class="language-csharp" data-trydotnet-mode="editor" '
        'data-trydotnet-package="pkg" data-trydotnet-session-id="S"></code></pre>'
    )


def test_render_link_uses_configured_names() -> None:
    config = CodeLinkConfig(attribute_prefix="data-runner", code_class="")
    link = ResolvedCodeLink(contents="code", session="Run", package="pkg")

    code = BeautifulSoup(render_link(link, config), "html.parser").code

    assert code is not None
    assert not code.has_attr("class")
    assert code["data-runner-package"] == "pkg"
    assert code["data-runner-mode"] == "editor"
    assert code.get_text() == "code"


def test_render_diagnostic_escapes_the_message() -> None:
    diagnostic = Diagnostic.file_not_found("./<odd>.cs")

    html = render_diagnostic(diagnostic)

    assert html == '<div class="notification is-danger">File not found: ./&lt;odd&gt;.cs</div>'


def test_render_block_requires_a_resolution() -> None:
    block = FenceBlock.open("```cs", parse_fence_info)
    assert block is not None

    with pytest.raises(ValueError):
        render_block(block)
