"""
Local Package Store

This module provides the local package manager capability. The abstract
``LocalPackageStore`` is what the rest of aurorus depends on; ``PacmanStore``
backs it with the pacman command line tool.
"""

import subprocess
from abc import ABC, abstractmethod

from ..config import aurorus_logger
from .errors import ToolingError
from .models import InstalledPackage


class LocalPackageStore(ABC):
    """Queries and changes the locally installed package set."""

    @abstractmethod
    def search(self, query: str) -> list[str]:
        """Return raw repository search output, one entry per line."""

    @abstractmethod
    def is_installed(self, name: str) -> bool:
        """Check whether a package is installed."""

    @abstractmethod
    def list_foreign_installed(self) -> list[InstalledPackage]:
        """List installed packages that do not come from a sync repository."""

    @abstractmethod
    def install_packages(self, names: list[str]) -> int:
        """Install repository packages; returns the exit status."""

    @abstractmethod
    def remove_packages(self, names: list[str]) -> int:
        """Remove packages with their unneeded dependencies; returns the exit status."""

    @abstractmethod
    def run_full_upgrade(self) -> int:
        """Upgrade every repository package; returns the exit status."""


class PacmanStore(LocalPackageStore):
    """``LocalPackageStore`` backed by pacman subprocess calls."""

    def __init__(self, pacman_command: str = "pacman", use_sudo: bool = True):
        self.pacman_command = pacman_command
        self.use_sudo = use_sudo

    def _privileged(self, *args: str) -> list[str]:
        command = [self.pacman_command, *args]
        return ["sudo", *command] if self.use_sudo else command

    def _run(self, command: list[str], *, capture: bool = False) -> subprocess.CompletedProcess:
        aurorus_logger.debug(f"Running: {' '.join(command)}")
        try:
            if capture:
                return subprocess.run(command, capture_output=True, text=True, check=False)
            return subprocess.run(command, check=False)
        except OSError as e:
            raise ToolingError(f"Failed to execute {command[0]}: {e}") from e

    def search(self, query: str) -> list[str]:
        result = self._run([self.pacman_command, "-Ss", query], capture=True)
        return result.stdout.splitlines()

    def is_installed(self, name: str) -> bool:
        try:
            result = subprocess.run(
                [self.pacman_command, "-Q", name],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as e:
            raise ToolingError(f"Failed to execute {self.pacman_command}: {e}") from e

        installed = result.returncode == 0
        aurorus_logger.debug(f"Checking {name} - installed: {installed}")
        return installed

    def list_foreign_installed(self) -> list[InstalledPackage]:
        result = self._run([self.pacman_command, "-Qm"], capture=True)

        packages = []
        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) >= 2:
                packages.append(InstalledPackage(name=parts[0], installed_version=parts[1]))
        return packages

    def install_packages(self, names: list[str]) -> int:
        return self._run(self._privileged("-S", *names)).returncode

    def remove_packages(self, names: list[str]) -> int:
        return self._run(self._privileged("-Rns", *names)).returncode

    def run_full_upgrade(self) -> int:
        return self._run(self._privileged("-Syu")).returncode
