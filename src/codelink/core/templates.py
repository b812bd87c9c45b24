"""Jinja2 page templates wrapping rendered documents."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from .exceptions import PublishError


PAGE_TEMPLATE = "page.html"


def _build_environment(template_dir: Path | None = None) -> Environment:
    loaders: list[Any] = []
    if template_dir is not None:
        loaders.append(FileSystemLoader(str(template_dir)))
    loaders.append(PackageLoader("codelink", "templates"))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class PageRenderer:
    """Wrap document bodies in the page template.

    Templates found in ``template_dir`` take precedence over the bundled
    ``page.html``. The template receives ``title``, ``body`` (already rendered
    HTML), ``front_matter`` and the ``language`` and ``stylesheets`` front
    matter entries.
    """

    def __init__(self, template_dir: Path | None = None, name: str = PAGE_TEMPLATE) -> None:
        if template_dir is not None and not template_dir.is_dir():
            raise PublishError(f"Template directory does not exist: {template_dir}")
        self.environment = _build_environment(template_dir)
        try:
            self.template = self.environment.get_template(name)
        except TemplateNotFound as exc:
            raise PublishError(f"Page template '{name}' is missing.") from exc
        except TemplateError as exc:
            raise PublishError(f"Invalid page template '{name}': {exc}") from exc

    def render(self, title: str, body: str, front_matter: Mapping[str, Any] | None = None) -> str:
        metadata = dict(front_matter or {})
        stylesheets = metadata.get("stylesheets") or []
        if isinstance(stylesheets, str):
            stylesheets = [stylesheets]
        try:
            return self.template.render(
                title=title,
                body=body,
                front_matter=metadata,
                language=metadata.get("language"),
                stylesheets=stylesheets,
            )
        except TemplateError as exc:
            raise PublishError(f"Failed to render page '{title}': {exc}") from exc


__all__ = ["PAGE_TEMPLATE", "PageRenderer"]
