"""
yogini.config - Configuration Loading and Mode Detection
========================================================

Two questions are answered here before anything else happens:

1. **Which mode are we in?** If the tool's own ``pyproject.toml`` names the
   project ``yogini``, this checkout *is* the generator and running it
   creates a new generator (Create Mode). Any other name means the checkout
   is a generator created earlier, and running it generates projects from
   its templates (Generate Mode).

2. **What should we ask?** The ``yogini.json`` descriptor for that mode
   lists the prompts. A missing file or an empty prompt list are valid and
   make the run a plain copy; a malformed file is an error.

File Layout
-----------

    <tool root>/
    ├── pyproject.toml              identity ([project].name)
    ├── create/
    │   ├── yogini.json             Create Mode prompts
    │   └── {}pyproject.toml        manifest rendered for new generators
    └── src/yogini/
        ├── yogini.json             Generate Mode prompts
        └── templates/              Generate Mode template tree
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

from pydantic import ValidationError

from yogini.errors import ConfigInvalidError, ConfigMissingError, EmptyPromptSetError
from yogini.models import ConfigDescriptor, ExecutionMode


# =============================================================================
# Module-Level Configuration
# =============================================================================

RESERVED_NAME = "yogini"
CONFIG_FILENAME = "yogini.json"

PACKAGE_DIR = Path(__file__).resolve().parent
TOOL_ROOT = PACKAGE_DIR.parent.parent


def create_dir(tool_root: Path) -> Path:
    return tool_root / "create"


def config_path(mode: ExecutionMode, tool_root: Path, package_dir: Path) -> Path:
    """Location of the yogini.json read in ``mode``."""
    if mode is ExecutionMode.CREATE:
        return create_dir(tool_root) / CONFIG_FILENAME
    return package_dir / CONFIG_FILENAME


# =============================================================================
# Mode Detection
# =============================================================================

def read_tool_name(tool_root: Path) -> str | None:
    """
    Read ``[project].name`` from the tool root's pyproject.toml.

    Returns
    -------
    str | None
        The project name, or None when the file is absent (e.g. the tool was
        installed from a wheel), unreadable, or has no name.
    """
    pyproject_path = tool_root / "pyproject.toml"
    if not pyproject_path.is_file():
        return None

    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    name = data.get("project", {}).get("name")
    return name if isinstance(name, str) else None


def detect_mode(tool_root: Path = TOOL_ROOT) -> ExecutionMode:
    """
    Determine the execution mode from the tool's own identity.

    Called once at startup; the result is passed explicitly to everything
    that depends on it.
    """
    if read_tool_name(tool_root) == RESERVED_NAME:
        return ExecutionMode.CREATE
    return ExecutionMode.GENERATE


# =============================================================================
# Descriptor Loading
# =============================================================================

def load_config(path: Path) -> ConfigDescriptor:
    """
    Load and validate a yogini.json file.

    Parameters
    ----------
    path : Path
        Path to the descriptor.

    Returns
    -------
    ConfigDescriptor
        Validated descriptor. May have zero prompts.

    Raises
    ------
    ConfigMissingError
        If the file does not exist.
    ConfigInvalidError
        If the file is not valid JSON or does not match the schema.
    """
    if not path.is_file():
        raise ConfigMissingError(f"No {CONFIG_FILENAME} found at {path}", path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigInvalidError(f"Invalid {CONFIG_FILENAME}: {e}", path) from e

    if not isinstance(data, dict):
        raise ConfigInvalidError(
            f"Invalid {CONFIG_FILENAME}: expected an object, got {type(data).__name__}",
            path,
        )

    try:
        return ConfigDescriptor.model_validate(data)
    except ValidationError as e:
        raise ConfigInvalidError(f"Invalid {CONFIG_FILENAME}: {e}", path) from e


def require_prompts(descriptor: ConfigDescriptor, path: Path | None = None) -> ConfigDescriptor:
    """
    Raise EmptyPromptSetError when the descriptor declares no prompts.
    """
    if not descriptor.prompts:
        raise EmptyPromptSetError(f"No prompts in {CONFIG_FILENAME}", path)
    return descriptor
