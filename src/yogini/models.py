"""
yogini.models - Data Models for Configuration and Materialization
=================================================================

This module defines the data models shared by the rest of yogini. Pydantic is
used for everything read from disk (the ``yogini.json`` descriptor) so that
authoring mistakes surface as clear validation errors. Plain dataclasses are
used for the per-file records that only ever flow between our own modules.

Architecture Notes
------------------
The models are organized as:

    ConfigDescriptor (yogini.json)
    ├── prompts: list[PromptSpec]
    │   └── type: PromptType (enum)
    ├── include_hidden: bool
    └── ...passthrough metadata

    ExecutionMode (enum)      - create vs. generate
    ProcessingDirective (enum) - render vs. copy
    TemplateFileRecord        - one discovered template file

Usage Example
-------------
>>> from yogini.models import ConfigDescriptor
>>> descriptor = ConfigDescriptor.model_validate(
...     {"prompts": [{"name": "projectName", "message": "Name?"}]}
... )
>>> descriptor.prompt_names
['projectName']
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Enumerations
# =============================================================================

class ExecutionMode(str, Enum):
    """
    Which tree the tool materializes.

    Attributes
    ----------
    CREATE : str
        The tool is regenerating an instance of itself. The source tree is
        the tool's own codebase and a single manifest template is rendered.

    GENERATE : str
        The tool materializes a user project from its template directory.
    """

    CREATE = "create"
    GENERATE = "generate"


class ProcessingDirective(str, Enum):
    """How the Materializer handles a template file's contents."""

    RENDER = "render"
    COPY = "copy"


class PromptType(str, Enum):
    """
    Supported prompt kinds.

    Names follow the inquirer vocabulary used by yogini.json files; each one
    maps onto a questionary question type.
    """

    INPUT = "input"
    CONFIRM = "confirm"
    LIST = "list"
    CHECKBOX = "checkbox"
    PASSWORD = "password"

    @property
    def is_textual(self) -> bool:
        """Whether answers are free text (and can therefore be validated)."""
        return self in {PromptType.INPUT, PromptType.PASSWORD}


# =============================================================================
# Configuration Models
# =============================================================================

class PromptSpec(BaseModel):
    """
    A single question declared in yogini.json.

    Attributes
    ----------
    name : str
        Key under which the answer is stored in the view data.

    message : str
        Question text. Defaults to the name.

    type : PromptType
        Question kind. Default is free text input.

    default : Any
        Default answer, used as-is with ``--yes``.

    validate : str | None
        Regular expression the full answer must match (text prompts only).

    choices : list[str]
        Options for ``list`` and ``checkbox`` prompts.

    Examples
    --------
    >>> spec = PromptSpec(name="keywords")
    >>> spec.message
    'keywords'
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(
        description="Answer key in the view data",
        min_length=1,
    )
    message: str = Field(
        default="",
        description="Question text shown to the user",
    )
    type: PromptType = Field(
        default=PromptType.INPUT,
        description="Question kind",
    )
    default: Any = Field(
        default=None,
        description="Default answer",
    )
    # ``validate`` shadows a BaseModel attribute, hence the alias.
    pattern: str | None = Field(
        default=None,
        alias="validate",
        description="Regular expression the answer must match",
    )
    choices: list[str] = Field(
        default_factory=list,
        description="Options for list/checkbox prompts",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip surrounding whitespace from the answer key."""
        v = v.strip()
        if not v:
            msg = "Prompt name must not be blank."
            raise ValueError(msg)
        return v

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str | None) -> str | None:
        """Reject patterns that do not compile."""
        if v is None:
            return None
        try:
            re.compile(v)
        except re.error as e:
            msg = f"Invalid validate pattern {v!r}: {e}"
            raise ValueError(msg) from e
        return v

    @model_validator(mode="after")
    def validate_prompt_consistency(self) -> PromptSpec:
        """Fill the message and check choice-based prompts have choices."""
        if not self.message:
            self.message = self.name
        if self.type in {PromptType.LIST, PromptType.CHECKBOX} and not self.choices:
            msg = f"Prompt '{self.name}' of type '{self.type.value}' needs choices."
            raise ValueError(msg)
        if self.pattern is not None and not self.type.is_textual:
            msg = f"Prompt '{self.name}': validate only applies to text prompts."
            raise ValueError(msg)
        return self

    def matches(self, answer: str) -> bool:
        """Whether a text answer satisfies the validation pattern."""
        if self.pattern is None:
            return True
        return re.fullmatch(self.pattern, answer) is not None


class ConfigDescriptor(BaseModel):
    """
    Parsed contents of a yogini.json file.

    Only ``prompts`` and ``include_hidden`` are interpreted; any other keys
    are kept as passthrough metadata.

    Attributes
    ----------
    prompts : list[PromptSpec]
        Ordered questions to ask before materializing.

    include_hidden : bool
        Whether dotfiles in the template directory are discovered.
    """

    model_config = ConfigDict(extra="allow")

    prompts: list[PromptSpec] = Field(
        default_factory=list,
        description="Ordered prompt specifications",
    )
    include_hidden: bool = Field(
        default=False,
        description="Include hidden files during template discovery",
    )

    @model_validator(mode="after")
    def validate_unique_names(self) -> ConfigDescriptor:
        """Answer keys must be unique across prompts."""
        seen: set[str] = set()
        for prompt in self.prompts:
            if prompt.name in seen:
                msg = f"Duplicate prompt name '{prompt.name}'."
                raise ValueError(msg)
            seen.add(prompt.name)
        return self

    @property
    def prompt_names(self) -> list[str]:
        """Answer keys in declaration order."""
        return [prompt.name for prompt in self.prompts]

    @property
    def metadata(self) -> dict[str, Any]:
        """Passthrough keys not interpreted by yogini."""
        return dict(self.model_extra or {})


# =============================================================================
# Materialization Records
# =============================================================================

@dataclass(frozen=True)
class TemplateFileRecord:
    """
    One discovered template file.

    Attributes
    ----------
    source : Path
        Absolute path of the template file.

    target : Path
        Destination path relative to the output root, with directive markers
        stripped and variables substituted.

    directive : ProcessingDirective
        Whether the contents are rendered or copied verbatim.
    """

    source: Path
    target: Path
    directive: ProcessingDirective

    @property
    def renders(self) -> bool:
        return self.directive is ProcessingDirective.RENDER
