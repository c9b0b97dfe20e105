"""
Update Detection

Checks installed foreign packages against the AUR. Names are sent in chunks of
at most 50 (the AUR info limit) with a bounded number of requests in flight.
A failed chunk only loses its own candidates.
"""

import asyncio
from collections.abc import Sequence

from ..config import aurorus_logger
from .aur_client import MetadataSourceClient
from .config import AUR_MAX_INFO_BATCH
from .errors import NetworkError, ProtocolError
from .models import InstalledPackage, PackageRecord, UpdateCandidate, UpdateReport
from .version import is_newer


def chunked(items: Sequence, size: int) -> list[Sequence]:
    """Split ``items`` into consecutive chunks of at most ``size``."""
    return [items[start:start + size] for start in range(0, len(items), size)]


class UpdateDiffEngine:
    """Computes which installed packages have newer AUR versions."""

    def __init__(
        self,
        batch_size: int = AUR_MAX_INFO_BATCH,
        max_in_flight: int = 4,
        chunk_timeout: float | None = None,
    ):
        if not 1 <= batch_size <= AUR_MAX_INFO_BATCH:
            raise ValueError(f"batch_size must be between 1 and {AUR_MAX_INFO_BATCH}")
        if max_in_flight < 1:
            raise ValueError("max_in_flight must be at least 1")
        self.batch_size = batch_size
        self.max_in_flight = max_in_flight
        self.chunk_timeout = chunk_timeout

    async def diff(
        self, installed: Sequence[InstalledPackage], client: MetadataSourceClient
    ) -> UpdateReport:
        """Return the update candidates among ``installed``."""
        installed = list(installed)
        local_versions = {package.name: package.installed_version for package in installed}
        chunks = chunked([package.name for package in installed], self.batch_size)
        semaphore = asyncio.Semaphore(self.max_in_flight)

        async def fetch_chunk(number: int, names: Sequence[str]) -> list[PackageRecord] | None:
            async with semaphore:
                try:
                    request = client.fetch_info_batch(names, max_batch=self.batch_size)
                    if self.chunk_timeout is not None:
                        return await asyncio.wait_for(request, timeout=self.chunk_timeout)
                    return await request
                except (NetworkError, ProtocolError) as e:
                    aurorus_logger.warning(f"Update check for chunk {number} failed: {e}")
                except asyncio.TimeoutError:
                    aurorus_logger.warning(f"Update check for chunk {number} timed out")
                return None

        tasks = [asyncio.create_task(fetch_chunk(number, names)) for number, names in enumerate(chunks, start=1)]

        candidates: list[UpdateCandidate] = []
        failed_chunks = 0
        try:
            for finished in asyncio.as_completed(tasks):
                records = await finished
                if records is None:
                    failed_chunks += 1
                    continue

                for record in records:
                    local_version = local_versions.get(record.name)
                    if local_version is not None and is_newer(local_version, record.version):
                        candidates.append(
                            UpdateCandidate(
                                name=record.name,
                                installed_version=local_version,
                                remote_version=record.version,
                            )
                        )
        finally:
            # No chunk request outlives the diff
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        aurorus_logger.info(
            f"Checked {len(installed)} package(s) in {len(chunks)} chunk(s): "
            f"{len(candidates)} update(s), {failed_chunks} failed chunk(s)"
        )
        return UpdateReport(
            candidates=tuple(candidates),
            checked=len(installed),
            chunk_count=len(chunks),
            failed_chunks=failed_chunks,
        )
