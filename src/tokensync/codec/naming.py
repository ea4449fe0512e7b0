"""Naming-convention transforms for exported names."""

from __future__ import annotations

import re

from tokensync.contracts.sync import NamingConvention

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATORS = re.compile(r"[\s/\-_]+")


def _words(name: str) -> list[str]:
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", name)
    return [word.lower() for word in _SEPARATORS.split(spaced) if word]


def convert(name: str, convention: NamingConvention) -> str:
    if convention is NamingConvention.ORIGINAL:
        return name
    words = _words(name)
    if not words:
        return name
    if convention is NamingConvention.CAMEL_CASE:
        return words[0] + "".join(word[:1].upper() + word[1:] for word in words[1:])
    if convention is NamingConvention.KEBAB_CASE:
        return "-".join(words)
    return "_".join(words)


def convert_parts(path: str, convention: NamingConvention) -> list[str]:
    """Convert each ``/`` segment of a variable path independently."""
    return [convert(part, convention) for part in path.split("/")]


def convert_path(path: str, convention: NamingConvention) -> str:
    return "/".join(convert_parts(path, convention))


def converted_with_original(name: str, convention: NamingConvention) -> tuple[str, str | None]:
    """Return the converted name and, when the conversion changed it, the original."""
    converted = convert(name, convention)
    if converted == name:
        return name, None
    return converted, name
