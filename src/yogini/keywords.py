"""
yogini.keywords - Keyword List Formatting
=========================================

Prompt answers arrive as flat strings. Manifests want keyword arrays laid
out one entry per line, so this module turns ``"cli, scaffold,,templates"``
into::

    [
        "cli",
        "scaffold",
        "templates"
      ]

The closing bracket is indented to sit under the key it belongs to, e.g.
inside a ``[project]`` table of pyproject.toml. The output is valid JSON and
valid TOML.
"""

from __future__ import annotations

import json


def split_keywords(keywords: str) -> list[str]:
    """
    Split a comma-separated string into trimmed, non-empty terms.

    Order is preserved.

    Examples
    --------
    >>> split_keywords(" cli, ,templates ")
    ['cli', 'templates']
    """
    return [term.strip() for term in keywords.split(",") if term.strip()]


def format_keywords(keywords: str, indent: int = 4, closing_indent: int = 2) -> str:
    """
    Pretty-print a comma-separated keyword string as an array.

    Parameters
    ----------
    keywords : str
        Raw answer, e.g. ``"cli, scaffold"``.

    indent : int, default=4
        Spaces before each entry.

    closing_indent : int, default=2
        Spaces before the closing bracket.

    Returns
    -------
    str
        The formatted array, or ``"[]"`` when no terms remain.

    Examples
    --------
    >>> print(format_keywords("a, b"))
    [
        "a",
        "b"
      ]
    >>> format_keywords(" , ")
    '[]'
    """
    terms = split_keywords(keywords)
    if not terms:
        return "[]"

    pad = " " * indent
    body = ",\n".join(f"{pad}{json.dumps(term, ensure_ascii=False)}" for term in terms)
    return f"[\n{body}\n{' ' * closing_indent}]"
