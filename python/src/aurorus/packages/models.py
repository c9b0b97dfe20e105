"""
Package Models

This module defines the data models used by the package management system.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PackageSource(Enum):
    """Where a package record came from."""
    REMOTE = "aur"
    LOCAL = "repo"


@dataclass(frozen=True)
class PackageRecord:
    """A package as reported by the AUR or by the local repository search."""
    name: str
    version: str
    source: PackageSource
    popularity: int | None = None
    description: str | None = None
    homepage: str | None = None
    repository: str | None = None

    @property
    def is_remote(self) -> bool:
        return self.source is PackageSource.REMOTE

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "source": self.source.value,
            "popularity": self.popularity,
            "description": self.description,
            "homepage": self.homepage,
            "repository": self.repository,
        }


@dataclass(frozen=True)
class InstalledPackage:
    """A foreign package installed on the local system."""
    name: str
    installed_version: str


@dataclass(frozen=True)
class UpdateCandidate:
    """An installed package with a newer version available in the AUR."""
    name: str
    installed_version: str
    remote_version: str

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "installed_version": self.installed_version,
            "remote_version": self.remote_version,
        }


@dataclass(frozen=True)
class UpdateReport:
    """Result of one update check across all installed foreign packages."""
    candidates: tuple[UpdateCandidate, ...]
    checked: int
    chunk_count: int
    failed_chunks: int = 0

    @property
    def has_updates(self) -> bool:
        return bool(self.candidates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidates": [candidate.to_dict() for candidate in self.candidates],
            "checked": self.checked,
            "chunk_count": self.chunk_count,
            "failed_chunks": self.failed_chunks,
        }


@dataclass(frozen=True)
class DependencyReport:
    """Declared dependencies of a package, split by local install state."""
    package: str
    dependencies: tuple[str, ...]
    installed: frozenset[str]
    missing: tuple[str, ...]

    @property
    def satisfied(self) -> bool:
        return not self.missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package,
            "dependencies": list(self.dependencies),
            "installed": sorted(self.installed),
            "missing": list(self.missing),
        }


@dataclass
class OperationResult:
    """Outcome of an install, removal or update operation."""
    success: bool
    message: str
    packages: list[str] = field(default_factory=list)
    data: dict[str, Any] | None = None
