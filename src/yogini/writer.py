"""
yogini.writer - File-Write Backend
==================================

The only module that touches the destination tree. It writes rendered
content, copies files verbatim, and bulk-copies whole trees with exclusions.
Every ``OSError`` is re-raised as :class:`~yogini.errors.WriteError` carrying
the offending path.
"""

from __future__ import annotations

import fnmatch
import shutil
from collections.abc import Iterable
from pathlib import Path

from yogini.errors import WriteError


class FileWriter:
    """
    Eager writer: every call hits the disk before returning.

    Attributes
    ----------
    written : list[Path]
        Destination paths written so far, in write order.
    """

    def __init__(self) -> None:
        self.written: list[Path] = []

    def write(self, destination: Path, content: str) -> Path:
        """Write text content, creating parent directories."""
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(content, encoding="utf-8")
        except OSError as e:
            raise WriteError(f"cannot write file: {e}", destination) from e

        self.written.append(destination)
        return destination

    def copy(self, source: Path, destination: Path) -> Path:
        """Copy a file byte for byte, preserving metadata."""
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
        except OSError as e:
            raise WriteError(f"cannot copy to {destination}: {e}", source) from e

        self.written.append(destination)
        return destination

    def copy_tree(
        self,
        source_root: Path,
        destination_root: Path,
        exclude: Iterable[str] = (),
        root_exclude: Iterable[str] = (),
    ) -> list[tuple[Path, Path]]:
        """
        Copy a directory tree verbatim.

        Parameters
        ----------
        source_root : Path
            Tree to copy.

        destination_root : Path
            Where the copy goes. May already exist.

        exclude : Iterable[str]
            Glob patterns matched against names at any depth.

        root_exclude : Iterable[str]
            Names excluded only directly under ``source_root``.

        Returns
        -------
        list[tuple[Path, Path]]
            (source, destination) pairs for every file copied.
        """
        patterns = tuple(exclude)
        top_level = set(root_exclude)
        source_root = Path(source_root)
        pairs: list[tuple[Path, Path]] = []

        def ignore(directory: str, names: list[str]) -> set[str]:
            ignored = {
                name for name in names
                if any(fnmatch.fnmatch(name, pattern) for pattern in patterns)
            }
            if Path(directory) == source_root:
                ignored.update(name for name in names if name in top_level)
            return ignored

        def copy_file(src: str, dst: str) -> str:
            pairs.append((Path(src), Path(dst)))
            self.written.append(Path(dst))
            return shutil.copy2(src, dst)

        try:
            shutil.copytree(
                source_root,
                destination_root,
                ignore=ignore,
                copy_function=copy_file,
                dirs_exist_ok=True,
            )
        except (OSError, shutil.Error) as e:
            raise WriteError(f"cannot copy tree to {destination_root}: {e}", source_root) from e

        return pairs
