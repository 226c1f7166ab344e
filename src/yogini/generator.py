"""
yogini.generator - Template Materialization
===========================================

This module turns a template tree plus finalized view data into a project on
disk. Both execution modes share one implementation:

    Idle ──▶ ModeSelected ──┬──▶ CreateRun ───┬──▶ Complete
                            └──▶ GenerateRun ─┴──▶ Failed

Create Mode
    Copies the tool's own source tree verbatim (minus version control,
    dependency caches and the ``create/`` fragment), then materializes the
    ``create/{}pyproject.toml`` manifest on top of it.

Generate Mode
    Pulls records from the directive parser one at a time. Each record is
    resolved, transformed, rendered and written before the next is pulled.

Raw mode (no prompts configured) skips directive handling altogether and
copies the source tree verbatim. A raw Create Mode clone still gets its
``[project].name`` rewritten, after the destination directory, so that it
runs in Generate Mode.

Writes are eager and never rolled back: if a record fails, everything
written before it stays on disk and the run ends in ``Failed``.

Usage Example
-------------
>>> from yogini.generator import Materializer
>>> from yogini.models import ExecutionMode
>>> from yogini.viewdata import build_view_data
>>>
>>> materializer = Materializer(
...     ExecutionMode.GENERATE,
...     destination=Path("out"),
...     context=build_view_data({"projectName": "widget"}),
...     template_dir=Path("templates"),
... )
>>> result = materializer.run()
>>> result.success
True
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import tomlkit
from jinja2 import TemplateError
from rich.console import Console
from rich.markup import escape
from tomlkit.exceptions import TOMLKitError

from yogini.config import TOOL_ROOT, create_dir
from yogini.directives import DIRECTIVE_MARKER, iter_template_files, resolve_record
from yogini.errors import TransformError, WriteError, YoginiError
from yogini.models import ExecutionMode, TemplateFileRecord
from yogini.prompts import ensure_name_allowed
from yogini.rendering import create_jinja_env, render_string
from yogini.transforms import TransformRegistry, default_registry
from yogini.viewdata import project_name
from yogini.writer import FileWriter


# =============================================================================
# Module-Level Configuration
# =============================================================================

# Console for rich output
console = Console()

# Excluded at any depth when the tool copies itself
CREATE_EXCLUDES: tuple[str, ...] = (
    ".git",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    "*.egg-info",
)

MANIFEST_TEMPLATE = f"{DIRECTIVE_MARKER}pyproject.toml"


class RunState(str, Enum):
    """Lifecycle of a single Materializer run."""

    IDLE = "idle"
    MODE_SELECTED = "mode_selected"
    CREATE_RUN = "create_run"
    GENERATE_RUN = "generate_run"
    COMPLETE = "complete"
    FAILED = "failed"


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class MaterializeResult:
    """
    Outcome of a materialization run.

    Attributes
    ----------
    success : bool
        Whether the run reached ``Complete``.

    destination : Path
        Output root.

    mode : ExecutionMode
        Mode the run executed in.

    files : list[tuple[Path, Path]]
        (source, destination) pairs written, in write order.

    warnings : list[str]
        Non-fatal issues.

    errors : list[str]
        The error that ended the run, if any.
    """

    success: bool
    destination: Path
    mode: ExecutionMode
    files: list[tuple[Path, Path]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


# =============================================================================
# Materializer
# =============================================================================


class Materializer:
    """
    Materialize one template tree into ``destination``.

    Parameters
    ----------
    mode : ExecutionMode
        Decided once at startup by the caller.

    destination : Path
        Output root. Created if missing.

    context : Mapping[str, Any]
        Finalized view data.

    template_dir : Path | None
        Template tree for Generate Mode.

    tool_root : Path
        The tool's own source tree for Create Mode.

    raw : bool, default=False
        Copy verbatim without directive handling or rendering.

    include_hidden : bool, default=False
        Discover dotfiles in the template tree.

    registry : TransformRegistry | None
        Content transforms. Defaults to :func:`default_registry`.

    writer : FileWriter | None
        File-write backend.

    verbose : bool, default=True
        Print each (source, destination) pair.
    """

    def __init__(
        self,
        mode: ExecutionMode,
        destination: Path,
        context: Mapping[str, Any],
        *,
        template_dir: Path | None = None,
        tool_root: Path = TOOL_ROOT,
        raw: bool = False,
        include_hidden: bool = False,
        registry: TransformRegistry | None = None,
        writer: FileWriter | None = None,
        verbose: bool = True,
    ) -> None:
        if mode is ExecutionMode.GENERATE and template_dir is None:
            msg = "Generate Mode needs a template directory."
            raise ValueError(msg)

        self.mode = mode
        self.destination = Path(destination)
        self.context = context
        self.template_dir = template_dir
        self.tool_root = Path(tool_root)
        self.raw = raw
        self.include_hidden = include_hidden
        self.registry = registry if registry is not None else default_registry()
        self.writer = writer if writer is not None else FileWriter()
        self.verbose = verbose
        self.env = create_jinja_env()
        self.state = RunState.IDLE
        self.result = MaterializeResult(
            success=False,
            destination=self.destination,
            mode=mode,
        )

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def run(self) -> MaterializeResult:
        """
        Execute the run to ``Complete``.

        Raises
        ------
        YoginiError
            Any fatal error. The state is ``Failed`` and the message is in
            ``result.errors``; files already written are left in place.
        """
        if self.state is not RunState.IDLE:
            msg = f"Materializer already ran (state: {self.state.value})."
            raise RuntimeError(msg)

        self.state = RunState.MODE_SELECTED

        try:
            if self.mode is ExecutionMode.CREATE:
                self.state = RunState.CREATE_RUN
                self._create_run()
            else:
                self.state = RunState.GENERATE_RUN
                self._generate_run()
        except YoginiError as e:
            self.state = RunState.FAILED
            self.result.errors.append(str(e))
            raise

        self.state = RunState.COMPLETE
        self.result.success = True
        return self.result

    def _create_run(self) -> None:
        # Everything that can reject the run happens before the first write
        ensure_name_allowed(self.mode, self.context)

        if self.destination.resolve().is_relative_to(self.tool_root.resolve()):
            raise WriteError(
                "destination is inside the tool's own source tree", self.destination
            )

        manifest = self.tool_root / "pyproject.toml"
        renamed = self.clone_manifest() if self.raw and manifest.is_file() else None

        pairs = self.writer.copy_tree(
            self.tool_root,
            self.destination,
            exclude=CREATE_EXCLUDES,
            root_exclude=(create_dir(self.tool_root).name, manifest.name),
        )
        for source, target in pairs:
            self._report(source, target)

        if self.raw:
            if renamed is not None:
                target = self.destination / manifest.name
                self.writer.write(target, renamed)
                self._report(manifest, target)
            return

        fragment = create_dir(self.tool_root)
        record = resolve_record(fragment, fragment / MANIFEST_TEMPLATE, self.context, self.env)
        if record is not None:
            self.materialize(record)

    def clone_manifest(self) -> str:
        """
        The tool's own pyproject.toml, renamed for a raw Create Mode clone.

        Without prompts nothing names the new generator, so it is named after
        its destination directory. Keeping ``yogini`` would make the clone
        start in Create Mode itself.

        Raises
        ------
        ReservedNameError
            If the destination directory carries the reserved name.
        TransformError
            If the manifest cannot be parsed.
        """
        name = project_name(self.context) or self.destination.resolve().name
        ensure_name_allowed(self.mode, {"name": name})

        source = self.tool_root / "pyproject.toml"
        try:
            doc = tomlkit.parse(source.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, TOMLKitError) as e:
            raise TransformError(f"cannot read manifest: {e}", source) from e

        if "project" not in doc:
            doc.add("project", tomlkit.table())
        doc["project"]["name"] = name  # type: ignore[index]

        return tomlkit.dumps(doc)

    def _generate_run(self) -> None:
        if self.template_dir is None:
            msg = "Generate Mode needs a template directory."
            raise ValueError(msg)

        if self.raw:
            for source, target in self.writer.copy_tree(self.template_dir, self.destination):
                self._report(source, target)
            return

        records = iter_template_files(
            self.template_dir,
            self.context,
            include_hidden=self.include_hidden,
            env=self.env,
        )
        for record in records:
            self.materialize(record)

    # -------------------------------------------------------------------------
    # Per-Record Stages
    # -------------------------------------------------------------------------

    def render_content(self, record: TemplateFileRecord) -> str:
        """
        Read, transform and render one template file.

        Raises
        ------
        TransformError
            If the file is not UTF-8 text, a transform fails, or the
            template does not render.
        """
        try:
            content = record.source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TransformError(f"cannot read template: {e}", record.source) from e

        try:
            content = self.registry.apply(record.target, content)
        except Exception as e:
            raise TransformError(f"content transform failed: {e}", record.source) from e

        try:
            return render_string(content, self.context, self.env)
        except TemplateError as e:
            raise TransformError(f"cannot render template: {e}", record.source) from e

    def materialize(self, record: TemplateFileRecord) -> Path:
        """Write one record under the destination root."""
        target = self.destination / record.target

        if record.renders:
            self.writer.write(target, self.render_content(record))
        else:
            self.writer.copy(record.source, target)

        self._report(record.source, target)
        return target

    def _report(self, source: Path, target: Path) -> None:
        self.result.files.append((source, target))
        if self.verbose:
            console.print(f"  [dim]{escape(str(source))}[/] -> [green]{escape(str(target))}[/]", highlight=False)


# =============================================================================
# Post-Materialization Hook
# =============================================================================


def install_dependencies(project_dir: Path) -> bool:
    """
    Install the generated project's dependencies.

    Uses ``uv sync`` when uv is on PATH, otherwise ``pip install -e .``
    with the running interpreter.

    Returns
    -------
    bool
        True if installation succeeded, False otherwise.

    Notes
    -----
    Failure never fails the run; the project is usable without installed
    dependencies.
    """
    if not (project_dir / "pyproject.toml").is_file():
        return False

    if shutil.which("uv"):
        command = ["uv", "sync"]
    else:
        command = [sys.executable, "-m", "pip", "install", "-e", "."]

    try:
        subprocess.run(
            command,
            cwd=project_dir,
            capture_output=True,
            check=True,
        )
        return True

    except (subprocess.CalledProcessError, FileNotFoundError):
        return False
