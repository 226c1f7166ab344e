"""
yogini - Self-Replicating Project Scaffolding
=============================================

A CLI tool that materializes new projects from a template directory, and
that can copy itself to bootstrap new, independently customizable
generators.

Features
--------
- **Filename Directives**: ``{}`` marks names (and contents) as templates
- **Jinja2 Substitution**: answers from prompts fill ``{{ variables }}``
- **Per-Type Transforms**: line endings and whitespace normalised by file type
- **Create Mode**: running the ``yogini`` checkout creates a new generator
- **Generate Mode**: running a created generator creates projects

Quick Start
-----------
```bash
# In a yogini checkout: create a new generator
yogini ../my-generator

# In the created generator: edit src/yogini/templates and yogini.json,
# then generate a project
yogini ../my-project
```

Example
-------
>>> from yogini import Materializer, ExecutionMode, build_view_data
>>> context = build_view_data({"projectName": "widget"})
>>> Materializer(
...     ExecutionMode.GENERATE, Path("out"), context, template_dir=Path("tpl")
... ).run()

Architecture
------------
The package is organized into these main modules:

- ``cli``: Typer-based command line interface
- ``config``: yogini.json loading and execution mode detection
- ``prompts``: questionary-based answer collection
- ``viewdata``: View data assembly (helpers, answers, derived fields)
- ``keywords``: Keyword list formatting
- ``directives``: Filename directive parsing
- ``transforms``: Per-file-type content transforms
- ``rendering``: Jinja2 environment
- ``generator``: The Materializer and the install hook
- ``writer``: File-write backend
- ``models``: Pydantic models and records
- ``errors``: Exception taxonomy

License
-------
MIT License - see LICENSE file for details.
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from yogini.generator import MaterializeResult, Materializer, RunState
from yogini.keywords import format_keywords
from yogini.models import ConfigDescriptor, ExecutionMode, PromptSpec
from yogini.viewdata import ViewDataBuilder, build_view_data


__all__ = [
    "ConfigDescriptor",
    "ExecutionMode",
    "MaterializeResult",
    "Materializer",
    "PromptSpec",
    "RunState",
    "ViewDataBuilder",
    # Version info
    "__version__",
    "build_view_data",
    "format_keywords",
]
