"""Parsing of the ``WIDTHxHEIGHT`` and ``RE,IM`` command line arguments."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

T = TypeVar("T")


def parse_pair(s: str, separator: str, kind: Callable[[str], T]) -> Optional[tuple[T, T]]:
    """Parse ``s`` as a coordinate pair, like ``"400x600"`` or ``"1.0,0.5"``.

    ``s`` should have the form ``<left><sep><right>``, where ``<sep>`` is the
    character given by ``separator`` and both halves can be converted by
    ``kind``. Returns ``None`` if ``s`` doesn't parse correctly.
    """

    index = s.find(separator)
    if index == -1:
        return None
    try:
        return kind(s[:index]), kind(s[index + 1:])
    except ValueError:
        return None


def parse_complex(s: str) -> Optional[complex]:
    """Parse a pair of floating-point numbers separated by a comma as a complex number."""

    pair = parse_pair(s, ",", float)
    if pair is None:
        return None
    re, im = pair
    return complex(re, im)
