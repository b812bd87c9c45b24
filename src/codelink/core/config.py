"""Configuration models for code link resolution and batch publishing.

CodeLinkConfig

`languages` (`list[str]`)
: Fence language tags recognised as code links, matched case-insensitively.
  Any other tag leaves the fence to the default Markdown handling.

`project_suffixes` (`list[str]`)
: File suffixes identifying build descriptors when no `--project` or
  `--package` directive is given.

`default_session` (`str`)
: Session identifier attached to blocks that do not pass `--session`.

`attribute_prefix` (`str`)
: Prefix of the data attributes written on the `<code>` element.

`code_class` (`str`)
: CSS class of the `<code>` element of linked blocks.

`diagnostic_class` (`str`)
: CSS classes of the notification rendered in place of broken fences.

`region_start` / `region_end` (`str`)
: Markers delimiting named regions inside linked files.

PublishConfig

`source_dir` (`Path`)
: Directory tree holding the Markdown documents and their linked sources.

`output_dir` (`Path`)
: Destination of the rendered pages and copied assets.

`jobs` (`int`)
: Number of documents rendered concurrently.

`copy_assets` (`bool`)
: Copy every non-Markdown file next to the rendered pages.

`markdown_extensions` (`list[str]`)
: Extra Python-Markdown extensions enabled on top of the defaults.

`template_dir` (`Path | None`)
: Directory searched for a `page.html` Jinja2 template before the bundled one.

`codelink` (`CodeLinkConfig`)
: Fence resolution settings shared by every document of the batch.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError


DEFAULT_LANGUAGES = ["cs", "csharp", "c#"]
DEFAULT_PROJECT_SUFFIXES = [".csproj"]
DEFAULT_SESSION = "Run"
DEFAULT_ATTRIBUTE_PREFIX = "data-trydotnet"
DEFAULT_DIAGNOSTIC_CLASS = "notification is-danger"


class CodeLinkConfig(BaseModel):
    """Settings controlling how fences are recognised, resolved and rendered."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    languages: list[str] = Field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    project_suffixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PROJECT_SUFFIXES)
    )
    default_session: str = DEFAULT_SESSION
    attribute_prefix: str = DEFAULT_ATTRIBUTE_PREFIX
    code_class: str = "language-csharp"
    diagnostic_class: str = DEFAULT_DIAGNOSTIC_CLASS
    region_start: str = "#region"
    region_end: str = "#endregion"

    @field_validator("languages")
    @classmethod
    def _lowercase_languages(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip().lower() for item in value if item.strip()]
        if not cleaned:
            raise ValueError("at least one language alias is required")
        return cleaned

    @field_validator("project_suffixes")
    @classmethod
    def _dotted_suffixes(cls, value: list[str]) -> list[str]:
        return [item if item.startswith(".") else f".{item}" for item in value if item]

    @field_validator("default_session", "attribute_prefix")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value must not be blank")
        return value.strip()


class PublishConfig(BaseModel):
    """Settings of a batch publication run."""

    model_config = ConfigDict(extra="forbid")

    source_dir: Path = Path(".")
    output_dir: Path = Path("_site")
    jobs: int = Field(default=4, ge=1)
    copy_assets: bool = True
    markdown_extensions: list[str] = Field(default_factory=list)
    template_dir: Path | None = None
    codelink: CodeLinkConfig = Field(default_factory=CodeLinkConfig)


def load_config(path: Path | str) -> PublishConfig:
    """Load a YAML configuration file into a :class:`PublishConfig`."""
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file '{config_path}'.") from exc

    try:
        payload = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in configuration file '{config_path}'.") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping at the top level."
        )

    return build_config(payload, base_dir=config_path.parent)


def build_config(payload: dict[str, Any], *, base_dir: Path | None = None) -> PublishConfig:
    """Validate a configuration mapping, resolving directories against ``base_dir``."""
    try:
        config = PublishConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    if base_dir is not None:
        updates: dict[str, Path] = {}
        for key in ("source_dir", "output_dir", "template_dir"):
            value: Path | None = getattr(config, key)
            if value is not None and not value.is_absolute():
                updates[key] = base_dir / value
        if updates:
            config = config.model_copy(update=updates)
    return config


__all__ = [
    "DEFAULT_ATTRIBUTE_PREFIX",
    "DEFAULT_DIAGNOSTIC_CLASS",
    "DEFAULT_LANGUAGES",
    "DEFAULT_PROJECT_SUFFIXES",
    "DEFAULT_SESSION",
    "CodeLinkConfig",
    "PublishConfig",
    "build_config",
    "load_config",
]
