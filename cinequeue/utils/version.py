"""Version helpers."""

from importlib import metadata
from pathlib import Path

import tomlkit

__all__ = ["get_git_hash", "get_pyproject_version"]

ROOT_DIR = Path(__file__).resolve().parent.parent.parent


def get_pyproject_version() -> str:
    """Get CineQueue's version.

    Reads ``pyproject.toml`` next to the package (source checkouts and editable
    installs), falling back to the installed distribution metadata.

    Returns:
        str: CineQueue's version, or "unknown"
    """
    toml_file = ROOT_DIR / "pyproject.toml"
    if toml_file.is_file():
        with toml_file.open(encoding="utf-8") as f:
            toml_data = tomlkit.load(f)
        project = toml_data.get("project", {})
        if "version" in project:
            return str(project["version"])

    try:
        return metadata.version("CineQueue")
    except metadata.PackageNotFoundError:
        return "unknown"


def get_git_hash() -> str:
    """Get the commit hash of the checked out branch.

    Returns:
        str: Current commit hash, or "unknown" outside a git checkout
    """
    git_dir = ROOT_DIR / ".git"
    try:
        head = (git_dir / "HEAD").read_text(encoding="utf-8").strip()
        if not head.startswith("ref: refs/heads/"):
            return "unknown"
        ref_path = git_dir / head.removeprefix("ref: ")
        return ref_path.read_text(encoding="utf-8").strip()
    except OSError:
        return "unknown"
