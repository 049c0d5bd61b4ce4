from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config import RESOURCE_DIR


def resource_root(root: Optional[str | Path] = None) -> Path:
    """Return the directory holding downloaded datasets (``~/resources`` by default)."""
    path = Path(root if root is not None else RESOURCE_DIR).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path


def ensure_resource_subdir(name: str, root: Optional[str | Path] = None) -> Path:
    """Ensure and return the subdirectory under the resource root for one dataset."""
    subdir = resource_root(root) / name
    subdir.mkdir(parents=True, exist_ok=True)
    return subdir
