"""
yogini.rendering - Jinja2 Environment
=====================================

All variable substitution, in file names as well as file contents, goes
through the environment built here. Undefined variables raise instead of
rendering as empty strings so that a typo in a template surfaces as an error
rather than a silently wrong project.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from jinja2 import Environment, StrictUndefined


def camelize(value: str) -> str:
    """
    Convert ``kebab-case``, ``snake_case`` or ``dot.case`` to camelCase.

    Examples
    --------
    >>> camelize("my-cool_project")
    'myCoolProject'
    """
    return re.sub(r"[_.-](\w|$)", lambda m: m.group(1).upper(), value)


def snake_case(value: str) -> str:
    """
    Convert a project name to a Python package name.

    Examples
    --------
    >>> snake_case("My-Project")
    'my_project'
    """
    return value.replace("-", "_").lower()


def create_jinja_env() -> Environment:
    """
    Create and configure the Jinja2 environment.

    The environment is configured with:
    - Autoescaping disabled (we're generating code, not HTML)
    - StrictUndefined so missing variables raise
    - Trim blocks and lstrip_blocks for cleaner output
    - ``camelize`` and ``snake_case`` filters

    Returns
    -------
    Environment
        Environment for rendering strings with ``from_string``.
    """
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )

    env.filters["camelize"] = camelize
    env.filters["snake_case"] = snake_case

    return env


def render_string(
    text: str,
    context: Mapping[str, Any],
    env: Environment | None = None,
) -> str:
    """
    Render ``text`` as a template against ``context``.

    Raises
    ------
    jinja2.TemplateError
        On syntax errors or undefined variables. Callers wrap this in the
        error type appropriate to what they were rendering.
    """
    if env is None:
        env = create_jinja_env()
    return env.from_string(text).render(dict(context))
