"""Parse the info string of a code link fence into a language tag and directives."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import shlex

from .config import DEFAULT_LANGUAGES


logger = logging.getLogger(__name__)

RECOGNISED_OPTIONS = frozenset({"project", "package", "region", "session"})


@dataclass(frozen=True, slots=True)
class Directives:
    """Values collected from the ``--option value`` pairs of a fence."""

    path: str | None = None
    project: str | None = None
    package: str | None = None
    region: str | None = None
    session: str | None = None


@dataclass(frozen=True, slots=True)
class FenceInfo:
    """Parsed info string of a recognised code link fence."""

    language: str
    raw_args: str
    directives: Directives


def parse_fence_info(
    info: str,
    languages: Iterable[str] = DEFAULT_LANGUAGES,
) -> FenceInfo | None:
    """Parse ``info`` into a :class:`FenceInfo`.

    Returns ``None`` whenever the fence is not a code link: unknown language
    tag, a recognised option without a value, several positional paths or a
    string ``shlex`` cannot split. Callers then fall back to the default fenced
    code handling.
    """
    stripped = info.strip()
    if not stripped:
        return None

    parts = stripped.split(None, 1)
    language = parts[0]
    raw_args = parts[1] if len(parts) > 1 else ""

    aliases = {alias.lower() for alias in languages}
    if language.lower() not in aliases:
        return None

    tokens = _tokenize(raw_args)
    if tokens is None:
        return None

    values: dict[str, str] = {}
    positional: list[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1

        if not _is_option(token):
            positional.append(token)
            continue

        name, separator, value = token[2:].partition("=")
        # Unknown options only carry a value in the --name=value form.
        if not separator and name in RECOGNISED_OPTIONS:
            if index < len(tokens) and not _is_option(tokens[index]):
                value = tokens[index]
                index += 1
            else:
                value = ""

        if name not in RECOGNISED_OPTIONS:
            logger.debug("Ignoring unknown code link option '--%s'.", name)
            continue
        if not value:
            logger.warning("Code link option '--%s' requires a value: %r", name, info)
            return None
        values[name] = value

    if len(positional) > 1:
        logger.warning(
            "Code link fence declares several files (%s); only one is supported.",
            ", ".join(positional),
        )
        return None

    directives = Directives(path=positional[0] if positional else None, **values)
    return FenceInfo(language=language, raw_args=raw_args, directives=directives)


def _tokenize(raw_args: str) -> list[str] | None:
    lexer = shlex.shlex(raw_args, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    # Backslashes stay literal so Windows-style paths survive.
    lexer.escape = ""
    try:
        return list(lexer)
    except ValueError as exc:
        logger.warning("Unable to split code link arguments %r: %s", raw_args, exc)
        return None


def _is_option(token: str) -> bool:
    return token.startswith("--") and len(token) > 2


__all__ = ["RECOGNISED_OPTIONS", "Directives", "FenceInfo", "parse_fence_info"]
