"""
AUR Package Builder

Fetches AUR package sources into the cache directory and builds them with
makepkg. ``Builder`` is the capability the package manager depends on.
"""

import re
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from ..config import aurorus_logger
from .errors import ToolingError

# Arch package names: no path separators, no leading dot or hyphen
_PACKAGE_NAME_RE = re.compile(r"^[A-Za-z0-9@_+][A-Za-z0-9@._+-]*$")


class Builder(ABC):
    """Prepares and builds AUR packages from source."""

    @abstractmethod
    def prepare(self, name: str) -> Path:
        """Fetch the build files for ``name``; returns the source directory."""

    @abstractmethod
    def build(self, package_dir: Path, no_confirm: bool = False) -> int:
        """Build and install the package in ``package_dir``; returns the exit status."""


class MakepkgBuilder(Builder):
    """``Builder`` that clones AUR git repositories and runs makepkg."""

    def __init__(self, cache_dir: Path, aur_base_url: str = "https://aur.archlinux.org"):
        self.cache_dir = Path(cache_dir)
        self.aur_base_url = aur_base_url.rstrip("/")

    def _checkout_dir(self, name: str) -> Path:
        """Cache subdirectory for ``name``; refuses names that leave the cache."""
        if not _PACKAGE_NAME_RE.match(name):
            raise ToolingError(f"Refusing to build invalid package name: {name!r}")

        dest = self.cache_dir / name
        if not dest.resolve().is_relative_to(self.cache_dir.resolve()):
            raise ToolingError(f"Package directory for {name!r} is outside the cache")
        return dest

    def prepare(self, name: str) -> Path:
        dest = self._checkout_dir(name)
        repo_url = f"{self.aur_base_url}/{name}.git"

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        if dest.is_symlink():
            dest.unlink()
        elif dest.exists():
            aurorus_logger.info(f"Directory {dest} already exists. Removing...")
            shutil.rmtree(dest)

        aurorus_logger.info(f"Cloning {repo_url} into {dest} ...")
        try:
            result = subprocess.run(["git", "clone", repo_url, str(dest)], check=False)
        except OSError as e:
            raise ToolingError(f"Failed to execute git: {e}") from e

        if result.returncode != 0:
            raise ToolingError(f"Failed to clone repository for {name}.")
        return dest

    def build(self, package_dir: Path, no_confirm: bool = False) -> int:
        command = ["makepkg", "-si"]
        if no_confirm:
            command.append("--noconfirm")

        try:
            result = subprocess.run(command, cwd=package_dir, check=False)
        except OSError as e:
            raise ToolingError(f"Failed to execute makepkg: {e}") from e
        return result.returncode
