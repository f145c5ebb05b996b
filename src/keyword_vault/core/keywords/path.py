"""Parsing of slash-delimited keyword paths."""

from collections.abc import Iterable

SEPARATOR = "/"


def normalize(raw: str | None) -> tuple[str, ...]:
    """Split a raw keyword into trimmed, non-empty segments.

    "  a / b /c  " -> ("a", "b", "c"); "///" -> ().
    """
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(SEPARATOR) if part.strip())


def join(segments: Iterable[str]) -> str:
    """Join segments back into a canonical keyword path."""
    return SEPARATOR.join(segments)


def canonical(raw: str | None) -> str:
    return join(normalize(raw))


def ancestors(path: str) -> list[str]:
    """Return the proper ancestor paths of a canonical path, shallowest first."""
    segments = normalize(path)
    return [join(segments[:i]) for i in range(1, len(segments))]


def is_prefix(prefix: tuple[str, ...], segments: tuple[str, ...]) -> bool:
    return segments[: len(prefix)] == prefix
