"""
yogini.errors - Exception Taxonomy
==================================

Every failure yogini reports derives from :class:`YoginiError` so the CLI can
turn any of them into a diagnostic and a non-zero exit code.

Hierarchy
---------

    YoginiError
    ├── ConfigError
    │   ├── ConfigMissingError     (warning, degrade to raw copy)
    │   ├── ConfigInvalidError     (fatal)
    │   └── EmptyPromptSetError    (warning, degrade to raw copy)
    ├── PromptError
    │   ├── PromptAbortedError
    │   ├── PromptValidationError
    │   └── ReservedNameError
    └── MaterializeError
        ├── DirectiveParseError
        ├── TransformError
        └── WriteError
"""

from __future__ import annotations

from pathlib import Path


class YoginiError(Exception):
    """Base exception for all yogini errors."""


# =============================================================================
# Configuration
# =============================================================================

class ConfigError(YoginiError):
    """Problem with a yogini.json configuration file."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigMissingError(ConfigError):
    """Raised when no yogini.json exists at the expected location."""


class ConfigInvalidError(ConfigError):
    """Raised when yogini.json exists but cannot be parsed or validated."""


class EmptyPromptSetError(ConfigError):
    """Raised when yogini.json declares no prompts."""


# =============================================================================
# Prompting
# =============================================================================

class PromptError(YoginiError):
    """Raised when answers cannot be collected."""


class PromptAbortedError(PromptError):
    """The user cancelled a prompt (Ctrl-C / Ctrl-D)."""


class PromptValidationError(PromptError):
    """An answer did not satisfy its prompt's validation pattern."""


class ReservedNameError(PromptError):
    """The project name collides with the tool's own reserved name."""


# =============================================================================
# Materialization
# =============================================================================

class MaterializeError(YoginiError):
    """
    Failure while materializing a single template path.

    Attributes
    ----------
    path : Path | None
        The source path being processed when the error occurred.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class DirectiveParseError(MaterializeError):
    """A filename directive is malformed or cannot be resolved."""


class TransformError(MaterializeError):
    """A content transform or template render failed."""


class WriteError(MaterializeError):
    """The filesystem refused a write or copy."""
