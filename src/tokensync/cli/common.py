"""Shared CLI formatting helpers."""

from __future__ import annotations


def format_comma_or_none(values: list[str]) -> str:
    if not values:
        return "none"
    return ", ".join(values)


def plural(count: int, noun: str, plural_noun: str | None = None) -> str:
    word = noun if count == 1 else (plural_noun or f"{noun}s")
    return f"{count} {word}"
