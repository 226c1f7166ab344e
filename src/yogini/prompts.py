"""
yogini.prompts - Interactive Answer Collection
==============================================

Turns the prompt specifications of a yogini.json into questionary questions
and returns a flat ``{name: answer}`` mapping. With ``assume_defaults`` no
question is shown and each prompt's default is used instead (still subject
to its ``validate`` pattern), which is what ``--yes`` and the test-suite use.

In Create Mode the collected project name is checked against the tool's
reserved name before anything is returned.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

import questionary

from yogini.config import RESERVED_NAME
from yogini.errors import PromptAbortedError, PromptValidationError, ReservedNameError
from yogini.models import ExecutionMode, PromptSpec, PromptType
from yogini.viewdata import project_name


def ensure_name_allowed(mode: ExecutionMode, answers: Mapping[str, Any]) -> None:
    """
    Reject a Create Mode project name equal to the reserved name.

    Generate Mode never rejects.

    Raises
    ------
    ReservedNameError
        If a created generator would carry the tool's own name and so would
        itself start in Create Mode.
    """
    if mode is ExecutionMode.CREATE and project_name(answers) == RESERVED_NAME:
        msg = f'You may not name your generator "{RESERVED_NAME}".'
        raise ReservedNameError(msg)


def _validator(spec: PromptSpec) -> Callable[[str], bool | str] | None:
    if spec.pattern is None:
        return None

    def validate(text: str) -> bool | str:
        if spec.matches(text):
            return True
        return f"Answer must match {spec.pattern}"

    return validate


def build_question(spec: PromptSpec) -> questionary.Question:
    """Create the questionary question for one prompt."""
    if spec.type is PromptType.CONFIRM:
        return questionary.confirm(spec.message, default=bool(spec.default))

    if spec.type is PromptType.LIST:
        default = spec.default if spec.default in spec.choices else None
        return questionary.select(spec.message, choices=spec.choices, default=default)

    if spec.type is PromptType.CHECKBOX:
        checked = set(spec.default or ())
        choices = [
            questionary.Choice(title=choice, value=choice, checked=choice in checked)
            for choice in spec.choices
        ]
        return questionary.checkbox(spec.message, choices=choices)

    default = "" if spec.default is None else str(spec.default)
    validate = _validator(spec)
    if spec.type is PromptType.PASSWORD:
        return questionary.password(spec.message, default=default, validate=validate)
    return questionary.text(spec.message, default=default, validate=validate)


def default_answer(spec: PromptSpec) -> Any:
    """
    The answer used when prompting is skipped.

    Raises
    ------
    PromptValidationError
        If the default does not satisfy the prompt's pattern.
    """
    if spec.type is PromptType.CONFIRM:
        return bool(spec.default)

    if spec.type is PromptType.LIST:
        return spec.default if spec.default in spec.choices else spec.choices[0]

    if spec.type is PromptType.CHECKBOX:
        return [choice for choice in spec.choices if choice in set(spec.default or ())]

    answer = "" if spec.default is None else str(spec.default)
    if not spec.matches(answer):
        raise PromptValidationError(
            f"Default for '{spec.name}' ({answer!r}) does not match {spec.pattern}"
        )
    return answer


def collect_answers(
    prompts: Sequence[PromptSpec],
    mode: ExecutionMode,
    *,
    assume_defaults: bool = False,
) -> dict[str, Any]:
    """
    Ask every prompt in order and return the answers.

    Parameters
    ----------
    prompts : Sequence[PromptSpec]
        Prompts from the descriptor.

    mode : ExecutionMode
        Used for the reserved-name check.

    assume_defaults : bool, default=False
        Skip the questions and use defaults.

    Raises
    ------
    PromptAbortedError
        If the user cancels a question.
    PromptValidationError
        If a default fails validation with ``assume_defaults``.
    ReservedNameError
        If Create Mode is given the reserved project name.
    """
    answers: dict[str, Any] = {}

    for spec in prompts:
        if assume_defaults:
            answers[spec.name] = default_answer(spec)
            continue

        result = build_question(spec).ask()
        if result is None:
            raise PromptAbortedError(f"Prompt '{spec.name}' was cancelled.")
        answers[spec.name] = result

    ensure_name_allowed(mode, answers)
    return answers
