"""
Package Management Module

Provides package discovery, dependency checks and update detection for AUR and
repository packages.

This module supports:
- Merged AUR and repository search results with stable selection indices
- .SRCINFO dependency extraction and install-state classification
- Batched, bounded-concurrency AUR update checks
- Install, uninstall and upgrade flows over pacman and makepkg

Components:
- manager: Main package management class
- aur_client: AUR RPC and manifest client
- catalog: Search result merging and selection
- updates: Update detection engine
"""

from .catalog import Catalog, CatalogEntry, merge
from .config import AurorusConfig
from .errors import (
    AurorusError,
    NetworkError,
    NotFoundError,
    ProtocolError,
    SelectionError,
    ToolingError,
)
from .manager import PackageManager, get_package_manager
from .models import (
    DependencyReport,
    InstalledPackage,
    OperationResult,
    PackageRecord,
    PackageSource,
    UpdateCandidate,
    UpdateReport,
)
from .version import VersionOrder, compare_versions

__all__ = [
    "AurorusConfig",
    "AurorusError",
    "Catalog",
    "CatalogEntry",
    "DependencyReport",
    "InstalledPackage",
    "NetworkError",
    "NotFoundError",
    "OperationResult",
    "PackageManager",
    "PackageRecord",
    "PackageSource",
    "ProtocolError",
    "SelectionError",
    "ToolingError",
    "UpdateCandidate",
    "UpdateReport",
    "VersionOrder",
    "compare_versions",
    "get_package_manager",
    "merge",
]
