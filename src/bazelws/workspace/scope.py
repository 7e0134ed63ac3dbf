"""Path containment for workspace writers.

A PathScope resolves relative paths against a root directory, refuses any
path that escapes it, and creates missing parent directories on the way.
Two variants share that logic and differ only in how they treat a file
that already exists:

  - CreateScope: exclusive create, an existing file is an AlreadyExists error.
  - ReplaceScope: the existing file is deleted and rewritten.

Key classes: PathScope, CreateScope, ReplaceScope.
"""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path

from ..errors import AlreadyExists, ContainmentViolation, InvalidOperation

logger = logging.getLogger(__name__)


def _absolute(path: Path | str) -> Path:
    """Absolute, lexically normalised path (symlinks are not followed)."""
    return Path(os.path.abspath(path))


class PathScope:
    """Resolves paths under ``root``; ``workspace`` is the enclosing workspace root.

    ``forbidden`` holds absolute paths that may not be resolved at all; it is
    shared by every child scope.
    """

    def __init__(
        self,
        workspace: Path | str,
        root: Path | str | None = None,
        forbidden: frozenset[Path] = frozenset(),
    ) -> None:
        self.workspace = _absolute(workspace)
        self.root = _absolute(root) if root is not None else self.workspace
        self.forbidden = frozenset(_absolute(p) for p in forbidden)

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(workspace={self.workspace}, root={self.root})"

    def resolve(self, path: str) -> Path:
        """Return the absolute target of ``path``, creating its parent directories.

        Raises:
            ContainmentViolation: If the target is not ``root`` or beneath it.
            InvalidOperation: If the target is one of the forbidden paths.
        """
        target = _absolute(self.root / path)
        if target != self.root and self.root not in target.parents:
            raise ContainmentViolation(path, self.root)
        if target in self.forbidden:
            raise InvalidOperation(f"cannot modify {target.name}: {target}")
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def child(self, path: str) -> PathScope:
        """Return a scope of the same kind rooted at ``path``."""
        return type(self)(self.workspace, self.resolve(path), self.forbidden)

    def relative_root(self) -> str:
        """Posix path of ``root`` relative to the workspace ("" at the top)."""
        rel = self.root.relative_to(self.workspace).as_posix()
        return "" if rel == "." else rel

    def write(self, path: str, data: bytes, mtime: float) -> Path:
        """Write ``data`` to ``path`` and stamp it with ``mtime``."""
        target = self.resolve(path)
        self._write_bytes(target, data)
        os.utime(target, (mtime, mtime))
        logger.debug("Wrote %s (%d bytes)", target, len(data))
        return target

    def _write_bytes(self, target: Path, data: bytes) -> None:
        raise NotImplementedError


class CreateScope(PathScope):
    """Scope for fresh workspaces: never overwrites."""

    def _write_bytes(self, target: Path, data: bytes) -> None:
        try:
            with open(target, "xb") as f:
                f.write(data)
        except FileExistsError as exc:
            raise AlreadyExists(
                errno.EEXIST, f"{target} already exists", str(target)
            ) from exc


class ReplaceScope(PathScope):
    """Scope for existing workspaces: overwrites in place."""

    def _write_bytes(self, target: Path, data: bytes) -> None:
        target.unlink(missing_ok=True)
        target.write_bytes(data)
