"""
yogini.directives - Filename Directive Parser
=============================================

Template files carry their processing instructions in their names. A path
segment may start with one or more brace-delimited prefixes:

``{}``
    The segment is itself a template: the prefix is stripped and the rest is
    rendered against the view data. When the file name carries it, the
    file's contents are rendered too; otherwise they are copied byte for
    byte.

``{+key}`` / ``{-key}``
    Conditional inclusion. The entry is kept only when ``key`` is truthy
    (``+``) or falsy (``-``) in the view data. A directory whose condition
    fails is pruned with everything below it.

    templates/
    ├── {}README.md                  -> README.md (contents rendered)
    ├── {}{{package_name}}/          -> my_tool/
    │   └── {}__init__.py            -> my_tool/__init__.py (rendered)
    ├── {+tests}tests/               -> tests/ (only if "tests" was answered yes)
    │   └── {+tests}{}conftest.py    -> tests/conftest.py (rendered)
    ├── {-typed}setup.cfg            -> setup.cfg (only if "typed" is false)
    ├── {}.gitignore                 -> .gitignore (rendered, not hidden)
    └── logo.png                     -> logo.png (copied)

This module works on paths only. It never opens a template file.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NamedTuple

from jinja2 import Environment, TemplateError

from yogini.errors import DirectiveParseError
from yogini.models import ProcessingDirective, TemplateFileRecord
from yogini.rendering import create_jinja_env, render_string


DIRECTIVE_MARKER = "{}"

CONDITION_PATTERN = re.compile(r"\{([+-])([A-Za-z_]\w*)\}")


@dataclass(frozen=True)
class Condition:
    """A ``{+key}`` or ``{-key}`` prefix."""

    key: str
    expected: bool

    def __str__(self) -> str:
        return f"{{{'+' if self.expected else '-'}{self.key}}}"

    def holds(self, context: Mapping[str, Any], path: Path | None = None) -> bool:
        """
        Whether the view data satisfies this condition.

        Raises
        ------
        DirectiveParseError
            If ``key`` is not in the view data.
        """
        if self.key not in context:
            raise DirectiveParseError(
                f"condition '{self}' refers to undefined variable '{self.key}'", path
            )
        return bool(context[self.key]) is self.expected


class Segment(NamedTuple):
    """One parsed path segment."""

    name: str
    marked: bool
    conditions: tuple[Condition, ...] = ()

    def included(self, context: Mapping[str, Any], path: Path | None = None) -> bool:
        return all(condition.holds(context, path) for condition in self.conditions)


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def parse_segment(segment: str, path: Path | None = None) -> Segment:
    """
    Split a single path segment into its name and prefixes.

    Parameters
    ----------
    segment : str
        One file or directory name.

    path : Path | None
        Full path, used only in error messages.

    Returns
    -------
    Segment
        The name with all prefixes stripped, whether the ``{}`` marker was
        present, and any inclusion conditions in the order written.

    Raises
    ------
    DirectiveParseError
        If a prefix is unterminated, unsupported, repeated (``{}``), or
        followed by nothing.

    Examples
    --------
    >>> parse_segment("{}README.md")
    Segment(name='README.md', marked=True, conditions=())
    >>> parse_segment("{{name}}.txt")
    Segment(name='{{name}}.txt', marked=False, conditions=())
    >>> parse_segment("{+tests}conftest.py").conditions
    (Condition(key='tests', expected=True),)
    """
    marked = False
    conditions: list[Condition] = []
    rest = segment

    # A leading "{{" is a plain Jinja token in the name
    while rest.startswith("{") and not rest.startswith("{{"):
        close = rest.find("}")
        if close == -1:
            raise DirectiveParseError(
                f"unterminated directive marker in '{segment}'", path
            )

        prefix = rest[:close + 1]
        if prefix == DIRECTIVE_MARKER:
            if marked:
                raise DirectiveParseError(
                    f"repeated '{DIRECTIVE_MARKER}' marker in '{segment}'", path
                )
            marked = True
        else:
            match = CONDITION_PATTERN.fullmatch(prefix)
            if match is None:
                raise DirectiveParseError(
                    f"unsupported directive '{prefix}' "
                    f"(expected '{DIRECTIVE_MARKER}', '{{+key}}' or '{{-key}}')",
                    path,
                )
            conditions.append(Condition(match.group(2), match.group(1) == "+"))

        rest = rest[close + 1:]

    if not rest and (marked or conditions):
        raise DirectiveParseError("directive marker is not followed by a name", path)

    return Segment(rest, marked, tuple(conditions))


def _render_segment(
    name: str,
    context: Mapping[str, Any],
    env: Environment,
    path: Path,
) -> str:
    try:
        rendered = render_string(name, context, env)
    except TemplateError as e:
        raise DirectiveParseError(f"cannot render name '{name}': {e}", path) from e

    if not rendered or rendered in {".", ".."} or "/" in rendered or os.sep in rendered:
        raise DirectiveParseError(
            f"name '{name}' rendered to invalid path segment {rendered!r}", path
        )
    return rendered


def resolve_record(
    root: Path,
    source: Path,
    context: Mapping[str, Any],
    env: Environment | None = None,
) -> TemplateFileRecord | None:
    """
    Build the record for one template file under ``root``.

    Every segment of the path relative to ``root`` is parsed; marked segments
    are rendered. The processing directive comes from the file name alone.

    Returns
    -------
    TemplateFileRecord | None
        None when a ``{+key}``/``{-key}`` condition on any segment excludes
        the file.
    """
    if env is None:
        env = create_jinja_env()

    relative = source.relative_to(root)
    parsed = [parse_segment(segment, source) for segment in relative.parts]

    if not all(segment.included(context, source) for segment in parsed):
        return None

    parts = [
        _render_segment(segment.name, context, env, source) if segment.marked else segment.name
        for segment in parsed
    ]

    directive = ProcessingDirective.RENDER if parsed[-1].marked else ProcessingDirective.COPY
    return TemplateFileRecord(source=source, target=Path(*parts), directive=directive)


def iter_template_files(
    root: Path,
    context: Mapping[str, Any],
    *,
    include_hidden: bool = False,
    env: Environment | None = None,
) -> Iterator[TemplateFileRecord]:
    """
    Lazily yield one record per regular file under ``root``.

    Directories whose ``{+key}``/``{-key}`` conditions fail are not entered;
    files whose conditions fail are skipped.

    Parameters
    ----------
    root : Path
        Template directory.

    context : Mapping[str, Any]
        Finalized view data used to render marked names.

    include_hidden : bool, default=False
        Descend into and yield entries whose names start with ``.``.

    env : Environment | None
        Jinja2 environment to reuse.

    Yields
    ------
    TemplateFileRecord
        Records in sorted walk order.

    Raises
    ------
    DirectiveParseError
        On a malformed marker, a render failure, or two files resolving to
        the same destination.
    """
    if env is None:
        env = create_jinja_env()

    seen: dict[Path, Path] = {}

    for dirpath, dirnames, filenames in os.walk(root):
        if not include_hidden:
            dirnames[:] = [d for d in dirnames if not is_hidden(d)]
        dirnames[:] = sorted(
            d for d in dirnames
            if parse_segment(d, Path(dirpath) / d).included(context, Path(dirpath) / d)
        )

        for filename in sorted(filenames):
            if not include_hidden and is_hidden(filename):
                continue

            source = Path(dirpath) / filename
            if not source.is_file():
                continue

            record = resolve_record(root, source, context, env)
            if record is None:
                continue

            previous = seen.get(record.target)
            if previous is not None:
                raise DirectiveParseError(
                    f"resolves to '{record.target}', already produced by '{previous}'",
                    source,
                )
            seen[record.target] = source

            yield record
