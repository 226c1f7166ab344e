"""
yogini.transforms - Per-Type Content Transforms
===============================================

Before a rendered file's contents are substituted, they pass through a chain
of transforms chosen by the file's type. Each transform is a plain
``str -> str`` function; the output of one feeds the next.

File Type Signatures
--------------------
- ``.py``, ``.toml``, ... : the lower-cased file suffix
- ``script``              : extension-less file starting with ``#!``
- ``""``                  : anything else

Signatures with nothing registered pass through untouched.

Usage Example
-------------
>>> registry = TransformRegistry()
>>> registry.register(".txt", str.upper)
>>> registry.apply(Path("notes.txt"), "hi")
'HI'
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path


Transform = Callable[[str], str]

SCRIPT_SIGNATURE = "script"


# =============================================================================
# Built-in Transforms
# =============================================================================

def normalize_newlines(content: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return content.replace("\r\n", "\n").replace("\r", "\n")


def ensure_trailing_newline(content: str) -> str:
    """Terminate non-empty content with exactly one newline."""
    if not content:
        return content
    return content.rstrip("\n") + "\n"


def strip_trailing_whitespace(content: str) -> str:
    """Remove spaces and tabs at the end of every line."""
    return re.sub(r"[ \t]+$", "", content, flags=re.MULTILINE)


# =============================================================================
# Registry
# =============================================================================

def file_signature(path: Path, content: str = "") -> str:
    """
    Derive the type signature used to look up transforms.

    The suffix wins when there is one; otherwise the content is sniffed for
    a shebang line.
    """
    suffix = path.suffix.lower()
    if suffix:
        return suffix
    if content.startswith("#!"):
        return SCRIPT_SIGNATURE
    return ""


class TransformRegistry:
    """Ordered transforms keyed by file type signature."""

    def __init__(self) -> None:
        self._transforms: dict[str, list[Transform]] = {}

    def register(self, signature: str, *transforms: Transform) -> None:
        """Append transforms to the chain for ``signature``."""
        self._transforms.setdefault(signature.lower(), []).extend(transforms)

    def transforms_for(self, signature: str) -> tuple[Transform, ...]:
        return tuple(self._transforms.get(signature.lower(), ()))

    def apply(self, path: Path, content: str) -> str:
        """Run ``content`` through every transform registered for ``path``."""
        for transform in self.transforms_for(file_signature(path, content)):
            content = transform(content)
        return content

    def __contains__(self, signature: object) -> bool:
        return isinstance(signature, str) and signature.lower() in self._transforms


TEXT_SIGNATURES: tuple[str, ...] = (
    ".py", ".pyi", ".toml", ".cfg", ".ini", ".yml", ".yaml", ".json",
    ".md", ".rst", ".txt", ".html", ".css", ".js", ".sh", SCRIPT_SIGNATURE,
)

NEWLINE_TERMINATED: tuple[str, ...] = (".py", ".toml", ".cfg", ".ini", ".yml", ".yaml")

WHITESPACE_STRIPPED: tuple[str, ...] = (".py", ".toml", ".cfg", ".ini")


def default_registry() -> TransformRegistry:
    """
    Build the registry installed by the Materializer by default.

    Every text type gets newline normalisation; source and config files are
    additionally stripped of trailing whitespace and newline-terminated.
    """
    registry = TransformRegistry()

    for signature in TEXT_SIGNATURES:
        registry.register(signature, normalize_newlines)
    for signature in WHITESPACE_STRIPPED:
        registry.register(signature, strip_trailing_whitespace)
    for signature in NEWLINE_TERMINATED:
        registry.register(signature, ensure_trailing_newline)

    return registry
