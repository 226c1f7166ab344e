"""
yogini.viewdata - View Data Assembly
====================================

The view data is the mapping every template render sees, file names and file
contents alike. It is assembled in three fixed phases:

    1. Built-in helpers (``camelize``, ``snake_case``, ``year``, ...)
    2. Prompt answers (a prompt named like a helper replaces it)
    3. Derived fields computed from the answers

Once :meth:`ViewDataBuilder.finalize` has run the result is a read-only
snapshot. The Materializer and the directive parser both read from it and
nothing writes to it again.

Usage Example
-------------
>>> builder = ViewDataBuilder()
>>> builder.add_answers({"name": "my-tool", "keywords": "cli, docs"})
>>> context = builder.finalize()
>>> context["package_name"]
'my_tool'
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from yogini import __version__
from yogini.keywords import format_keywords
from yogini.rendering import camelize, snake_case


# Answer keys treated as "the project name", in lookup order
PROJECT_NAME_KEYS: tuple[str, ...] = ("name", "projectName")


def default_helpers() -> dict[str, Any]:
    """Helpers available to every template before any answers are added."""
    return {
        "camelize": camelize,
        "snake_case": snake_case,
        "year": datetime.now(UTC).year,
        "yogini_version": __version__,
    }


def project_name(data: Mapping[str, Any]) -> str | None:
    """Return the answered project name, if any."""
    for key in PROJECT_NAME_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def derive_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Compute fields derived from raw answers.

    Returns
    -------
    dict[str, Any]
        ``keywords_formatted`` (``None`` when no keywords were answered) and,
        when a project name was answered, ``package_name``.
    """
    derived: dict[str, Any] = {}

    keywords = data.get("keywords")
    derived["keywords_formatted"] = (
        format_keywords(keywords) if isinstance(keywords, str) and keywords else None
    )

    name = project_name(data)
    if name is not None:
        derived["package_name"] = snake_case(name)

    return derived


class ViewDataBuilder:
    """
    Single-writer builder for the view data snapshot.

    Parameters
    ----------
    helpers : Mapping[str, Any] | None
        Phase one contents. Defaults to :func:`default_helpers`.
    """

    def __init__(self, helpers: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(default_helpers() if helpers is None else helpers)
        self._snapshot: Mapping[str, Any] | None = None

    @property
    def finalized(self) -> bool:
        return self._snapshot is not None

    def add_answers(self, answers: Mapping[str, Any]) -> None:
        """
        Merge prompt answers over the helpers.

        Raises
        ------
        RuntimeError
            If called after :meth:`finalize`.
        """
        if self._snapshot is not None:
            msg = "View data is already finalized; answers can no longer be added."
            raise RuntimeError(msg)
        self._data.update(answers)

    def finalize(self) -> Mapping[str, Any]:
        """
        Compute derived fields and freeze the result.

        Calling this more than once returns the same snapshot.
        """
        if self._snapshot is None:
            data = dict(self._data)
            data.update(derive_fields(data))
            self._snapshot = MappingProxyType(data)
        return self._snapshot


def build_view_data(answers: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
    """Assemble and finalize view data in one call."""
    builder = ViewDataBuilder()
    if answers:
        builder.add_answers(answers)
    return builder.finalize()
