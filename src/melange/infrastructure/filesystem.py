"""Confined file access for the ``melange://`` scheme.

INVARIANT: Only files whose canonical path lies under the canonical base
directory are ever read.  The textual prefix match that routes a request
here is a classification step, not a security check; containment is
verified after ``..`` and symlinks are resolved.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from urllib.parse import unquote


class PathForbiddenError(ValueError):
    """A requested path resolves outside the confinement root."""

    def __init__(self, requested: str, resolved: Path, root: Path) -> None:
        super().__init__(f"Path escapes base directory: {requested}")
        self.requested = requested
        self.resolved = resolved
        self.root = root


def is_under_base(token: str, base_directory: Path) -> bool:
    """Textual classification: does *token* name something in *base_directory*?"""
    return token.startswith(str(base_directory))


def resolve_confined_path(base_directory: Path, requested: str) -> Path:
    """Canonicalise *requested* and verify it stays inside *base_directory*.

    The request is percent-decoded first (webviews encode spaces and
    non-ASCII characters).  Missing files are not an error here; only
    escaping the root is.

    Raises:
        PathForbiddenError: The canonical path is outside the canonical root.
    """
    root = base_directory.resolve()
    resolved = Path(unquote(requested)).resolve()
    if not resolved.is_relative_to(root):
        raise PathForbiddenError(requested, resolved, root)
    return resolved


def guess_mime_type(path: Path) -> str:
    """Best-effort MIME type from the file extension; ``""`` when unknown."""
    mime, _encoding = mimetypes.guess_type(path.name, strict=False)
    return mime or ""


def read_file_bytes(path: Path) -> bytes:
    """Read a confined file.  ``OSError`` subclasses propagate to the caller."""
    return path.read_bytes()
