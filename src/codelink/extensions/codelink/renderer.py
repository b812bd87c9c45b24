"""HTML fragments emitted for resolved code links and fence diagnostics."""

from __future__ import annotations

from xml.etree import ElementTree

from ...core.config import CodeLinkConfig
from ...core.diagnostics import Diagnostic
from ...core.resolver import ResolvedCodeLink
from .blocks import FenceBlock


def render_link(
    link: ResolvedCodeLink,
    config: CodeLinkConfig | None = None,
    *,
    text: str | None = None,
) -> str:
    """Render ``link`` as a ``<pre><code>`` fragment carrying the viewer attributes.

    ``text`` overrides the displayed content, which defaults to the region
    text or the full file contents.
    """
    config = config or CodeLinkConfig()
    prefix = config.attribute_prefix

    pre = ElementTree.Element("pre")
    code = ElementTree.SubElement(pre, "code")
    if config.code_class:
        code.set("class", config.code_class)
    code.set(f"{prefix}-mode", "editor")
    if link.file_path is not None:
        code.set(f"{prefix}-file-name", str(link.file_path))
    identity = link.build_identity
    if identity:
        code.set(f"{prefix}-package", identity)
    if link.region:
        code.set(f"{prefix}-region", link.region)
    code.set(f"{prefix}-session-id", link.session)
    code.text = link.rendered_text if text is None else text

    return ElementTree.tostring(pre, encoding="unicode", method="html")


def render_diagnostic(diagnostic: Diagnostic, config: CodeLinkConfig | None = None) -> str:
    """Render ``diagnostic`` as a danger notification."""
    config = config or CodeLinkConfig()
    node = ElementTree.Element("div")
    node.set("class", config.diagnostic_class)
    node.text = diagnostic.message
    return ElementTree.tostring(node, encoding="unicode", method="html")


def render_block(block: FenceBlock, config: CodeLinkConfig | None = None) -> str:
    """Render a closed fence block from its resolution result."""
    result = block.result
    if isinstance(result, Diagnostic):
        return render_diagnostic(result, config)
    if isinstance(result, ResolvedCodeLink):
        return render_link(result, config, text=block.content)
    raise ValueError("Fence block rendered before being resolved.")


__all__ = ["render_block", "render_diagnostic", "render_link"]
