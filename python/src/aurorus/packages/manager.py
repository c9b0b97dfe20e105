"""
Package Manager

This module ties the AUR client, the local package store and the builder
together into the search, install, uninstall and update flows.
"""

import asyncio

from ..config import aurorus_logger
from .aur_client import MetadataSourceClient
from .builder import Builder, MakepkgBuilder
from .catalog import Catalog, merge
from .config import AurorusConfig
from .dependencies import classify, extract_dependencies
from .local_store import LocalPackageStore, PacmanStore
from .models import DependencyReport, OperationResult, PackageRecord, UpdateReport
from .updates import UpdateDiffEngine


def parse_update_selection(raw: str, count: int) -> list[int]:
    """Turn ``"1 3"`` into 1-based candidate numbers.

    Blank input or ``all`` selects every candidate; tokens that are not
    numbers in ``1..count`` are ignored.
    """
    text = raw.strip()
    if not text or text.lower() == "all":
        return list(range(1, count + 1))

    selected = []
    for token in text.split():
        if token.isascii() and token.isdigit() and 1 <= int(token) <= count:
            selected.append(int(token))
    return selected


class PackageManager:
    """Manager for AUR and repository package operations."""

    def __init__(
        self,
        config: AurorusConfig | None = None,
        store: LocalPackageStore | None = None,
        builder: Builder | None = None,
        client: MetadataSourceClient | None = None,
    ):
        if config is None:
            config = AurorusConfig()

        self.config = config
        self.store = store or PacmanStore(config.pacman_command, config.use_sudo)
        self.builder = builder or MakepkgBuilder(config.cache_dir, config.aur_base_url)
        self.client = client or MetadataSourceClient(config, self.store)
        self.update_engine = UpdateDiffEngine(
            batch_size=config.info_batch_size,
            max_in_flight=config.max_concurrent_requests,
            chunk_timeout=config.chunk_timeout,
        )

    async def close(self):
        await self.client.close()

    async def search(self, query: str) -> Catalog:
        """Search the AUR and the repositories and merge the results."""
        remote = await self.client.search_remote(query)
        local_lines = await asyncio.to_thread(self.client.search_local, query)
        catalog = merge(remote, local_lines)
        aurorus_logger.info(
            f"Search '{query}': {catalog.remote_count} AUR and "
            f"{len(catalog) - catalog.remote_count} repository package(s)"
        )
        return catalog

    async def installed_names(self, names: list[str]) -> set[str]:
        """The subset of ``names`` the local store reports as installed."""
        def query():
            return {name for name in dict.fromkeys(names) if self.store.is_installed(name)}

        return await asyncio.to_thread(query)

    async def check_dependencies(self, name: str) -> DependencyReport:
        """Fetch the .SRCINFO of ``name`` and check which dependencies are installed."""
        aurorus_logger.info(f"Fetching .SRCINFO for {name}...")
        manifest = await self.client.fetch_dependency_manifest(name)
        dependencies = extract_dependencies(manifest)
        installed, missing = await asyncio.to_thread(classify, dependencies, self.store.is_installed)

        if missing:
            aurorus_logger.info(f"Missing dependencies for {name}: {', '.join(missing)}")
        else:
            aurorus_logger.info(f"All dependencies for {name} are satisfied.")

        return DependencyReport(
            package=name,
            dependencies=tuple(dependencies),
            installed=installed,
            missing=missing,
        )

    def _build_from_aur(self, name: str, no_confirm: bool) -> bool:
        package_dir = self.builder.prepare(name)
        status = self.builder.build(package_dir, no_confirm=no_confirm)
        if status == 0:
            aurorus_logger.info(f"Package {name} built and installed successfully.")
            return True
        aurorus_logger.error(f"Build of {name} failed with exit status {status}.")
        return False

    async def install_selection(
        self, catalog: Catalog, raw_selection: str, install_missing: bool = False
    ) -> OperationResult:
        """Install the catalog entry chosen by ``raw_selection``."""
        record = catalog.select(raw_selection)
        return await self.install_record(record, install_missing=install_missing)

    async def install_record(self, record: PackageRecord, install_missing: bool = False) -> OperationResult:
        """Install a package from the AUR or from the repositories."""
        aurorus_logger.info(f"Installing {record.name}...")

        if not record.is_remote:
            status = await asyncio.to_thread(self.store.install_packages, [record.name])
            if status != 0:
                return OperationResult(False, f"Installation of {record.name} failed.", [record.name])
            return OperationResult(True, f"Package {record.name} installed successfully.", [record.name])

        report = await self.check_dependencies(record.name)
        installed_deps = []
        failed_deps = []
        if report.missing and install_missing:
            for dependency in dict.fromkeys(report.missing):
                aurorus_logger.info(f"Installing dependency {dependency}...")
                if await asyncio.to_thread(self._build_from_aur, dependency, True):
                    installed_deps.append(dependency)
                else:
                    failed_deps.append(dependency)
        elif report.missing:
            aurorus_logger.info("Proceeding without installing missing dependencies.")

        data = {
            "dependencies": report.to_dict(),
            "installed_dependencies": installed_deps,
            "failed_dependencies": failed_deps,
        }
        if not await asyncio.to_thread(self._build_from_aur, record.name, False):
            return OperationResult(False, f"Installation of {record.name} failed.", [record.name], data)
        return OperationResult(True, f"Package {record.name} installed successfully.", [record.name], data)

    async def uninstall(self, name: str) -> OperationResult:
        """Remove ``name`` and its ``-debug`` companion, whichever are installed."""
        installed = await self.installed_names([name, f"{name}-debug"])
        packages = [package for package in (name, f"{name}-debug") if package in installed]
        if not packages:
            return OperationResult(False, "No packages found to uninstall.")

        if await asyncio.to_thread(self.store.remove_packages, packages) != 0:
            return OperationResult(False, "Failed to remove packages", packages)
        return OperationResult(True, "Packages and dependencies removed successfully.", packages)

    async def check_updates(self) -> UpdateReport:
        """Check every installed foreign package for a newer AUR version."""
        installed = await asyncio.to_thread(self.store.list_foreign_installed)
        if not installed:
            aurorus_logger.info("No AUR packages installed.")
        return await self.update_engine.diff(installed, self.client)

    async def apply_updates(self, report: UpdateReport, raw_selection: str = "") -> OperationResult:
        """Rebuild the candidates of ``report`` picked by ``raw_selection``."""
        numbers = parse_update_selection(raw_selection, len(report.candidates))
        selected = [report.candidates[number - 1] for number in numbers]
        if not selected:
            return OperationResult(True, "No packages selected for update.")

        updated = []
        failed = []
        for candidate in selected:
            aurorus_logger.info(
                f"Updating {candidate.name} ({candidate.installed_version} -> {candidate.remote_version})"
            )
            if await asyncio.to_thread(self._build_from_aur, candidate.name, True):
                updated.append(candidate.name)
            else:
                failed.append(candidate.name)

        message = f"Updated {len(updated)} of {len(selected)} package(s)."
        return OperationResult(not failed, message, updated, {"failed": failed})

    async def upgrade_system(self) -> OperationResult:
        """Upgrade all repository packages."""
        aurorus_logger.info("Updating official packages via pacman...")
        if await asyncio.to_thread(self.store.run_full_upgrade) != 0:
            return OperationResult(False, "Failed to update official packages.")
        return OperationResult(True, "Official packages updated successfully.")


# Global package manager instance
_package_manager: PackageManager | None = None


def get_package_manager() -> PackageManager:
    """Get the global package manager instance."""
    global _package_manager
    if _package_manager is None:
        _package_manager = PackageManager(AurorusConfig.from_env())
    return _package_manager
