"""Workspace writers — nested packages over a PathScope, finalized on close.

Two top-level sessions are available:
  - Workspace: a brand-new temp directory in create mode. Existing files are
    an error, and closing writes the WORKSPACE marker if none was written.
  - ModifiedWorkspace: an existing directory in replace mode. Files are
    overwritten in place and the WORKSPACE marker may not be touched.

Every nested Package writes a default BUILD.bazel on close when its
contents did not provide one. Sessions are context managers; close runs
when the ``with`` block exits normally and is skipped when it raises.

Key classes: Package, Workspace, ModifiedWorkspace.
"""

from __future__ import annotations

import logging
import re
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..errors import WriterClosed
from ..settings import WriterSettings, get_settings
from ..text import Contents, render
from .scope import CreateScope, PathScope, ReplaceScope

logger = logging.getLogger(__name__)


class Package:
    """Writer for one package directory and everything nested below it."""

    def __init__(
        self, scope: PathScope, settings: WriterSettings | None = None
    ) -> None:
        self._scope = scope
        self.settings = settings or get_settings()
        self._closed = False

    def __enter__(self) -> Package:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()

    @property
    def root(self) -> Path:
        return self._scope.root

    @property
    def workspace_root(self) -> Path:
        return self._scope.workspace

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise WriterClosed(f"writer for {self.root} is closed")

    def resolve(self, path: str) -> Path:
        self._check_open()
        return self._scope.resolve(path)

    def new(self, path: str, contents: Contents) -> Path:
        """Write ``contents`` to ``path`` under this package.

        Returns:
            The absolute path written.
        """
        self._check_open()
        return self._scope.write(path, render(contents), self.settings.fixed_mtime)

    def build(self, contents: Contents) -> Path:
        """Write this package's build marker file."""
        return self.new(self.settings.build_marker, contents)

    def package(self, name: str) -> Package:
        """Open a nested package at ``name``; use it as a context manager."""
        self._check_open()
        logger.debug("Opening package %s under %s", name, self.root)
        return Package(self._scope.child(name), self.settings)

    def pkg(self, name: str, contents: Callable[[Package], None]) -> Package:
        """Open ``name``, apply ``contents`` to it, close it, and return the handle."""
        with self.package(name) as child:
            contents(child)
        return child

    def target(self, name: str) -> str:
        """Return the quoted label of target ``name``, e.g. ``"//a/b:name"``.

        The quotes are included so the label can be embedded in BUILD files as is.
        """
        return f'"//{self._scope.relative_root()}:{name}"'

    def close(self) -> None:
        """Finalize marker files and end the session. Safe to call twice."""
        if self._closed:
            return
        self._finalize()
        self._closed = True

    def _finalize(self) -> None:
        if not self.resolve(self.settings.build_marker).exists():
            self.build(self.settings.build_marker_content)
            logger.info("Synthesized %s in %s", self.settings.build_marker, self.root)


class Workspace(Package):
    """Create-mode session over a fresh workspace root."""

    def __init__(
        self, root: Path | str, settings: WriterSettings | None = None
    ) -> None:
        super().__init__(CreateScope(root), settings)

    @classmethod
    def create(
        cls, prefix: str | None = None, *, settings: WriterSettings | None = None
    ) -> Workspace:
        """Make a fresh temp directory and open a create-mode session on it."""
        settings = settings or get_settings()
        if settings.temp_dir is not None:
            settings.temp_dir.mkdir(parents=True, exist_ok=True)
        root = tempfile.mkdtemp(
            prefix=prefix or settings.temp_prefix, dir=settings.temp_dir
        )
        logger.info("Created workspace at %s", root)
        return cls(root, settings)

    def workspace(self, contents: Contents) -> Path:
        """Write the workspace marker file."""
        return self.new(self.settings.workspace_marker, contents)

    def _finalize(self) -> None:
        if not self.resolve(self.settings.workspace_marker).exists():
            self.workspace(self.settings.workspace_marker_content)
            logger.info(
                "Synthesized %s in %s", self.settings.workspace_marker, self.root
            )


class ModifiedWorkspace(Package):
    """Replace-mode session over an existing workspace root.

    The workspace marker is forbidden for every package in the session.
    """

    def __init__(
        self, root: Path | str, settings: WriterSettings | None = None
    ) -> None:
        settings = settings or get_settings()
        marker = Path(root) / settings.workspace_marker
        super().__init__(ReplaceScope(root, forbidden=frozenset({marker})), settings)

    @classmethod
    def open(
        cls, root: Path | str, *, settings: WriterSettings | None = None
    ) -> ModifiedWorkspace:
        """Open a modification session on the existing directory ``root``.

        Raises:
            FileNotFoundError: If ``root`` is not an existing directory.
        """
        if not Path(root).is_dir():
            raise FileNotFoundError(f"Workspace not found: {root}")
        logger.info("Opened workspace at %s", root)
        return cls(root, settings)

    def _finalize(self) -> None:
        # Marker already present.
        pass


def using(
    contents: Callable[[Workspace], None],
    prefix: str | None = None,
    *,
    settings: WriterSettings | None = None,
) -> Path:
    """Create a fresh workspace, apply ``contents``, and return its root."""
    with Workspace.create(prefix, settings=settings) as ws:
        contents(ws)
    return ws.root


def using_for(
    owner: object,
    contents: Callable[[Workspace], None],
    *,
    settings: WriterSettings | None = None,
) -> Path:
    """Like using(), with the temp dir prefix named after ``owner``'s class."""
    cls = owner if isinstance(owner, type) else type(owner)
    prefix = re.sub(r"[^\w\-.]", "_", f"{cls.__module__}.{cls.__qualname__}")
    return using(contents, f"{prefix}-", settings=settings)


def open_workspace(
    root: Path | str,
    contents: Callable[[ModifiedWorkspace], None],
    *,
    settings: WriterSettings | None = None,
) -> None:
    """Apply ``contents`` to the existing workspace at ``root``."""
    with ModifiedWorkspace.open(root, settings=settings) as ws:
        contents(ws)
