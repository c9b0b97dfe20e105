"""
AUR Metadata Client

This module provides the metadata source for package discovery: the AUR RPC
interface for search and batched info lookups, the AUR cgit mirror for
.SRCINFO manifests, and the local repository search through a
``LocalPackageStore``.
"""

from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..config import aurorus_logger
from .config import AUR_MAX_INFO_BATCH, AurorusConfig
from .errors import NetworkError, NotFoundError, ProtocolError
from .local_store import LocalPackageStore
from .models import PackageRecord, PackageSource


class AurPackage(BaseModel):
    """One package entry of an AUR RPC response."""

    name: str = Field(alias="Name")
    version: str = Field(alias="Version")
    description: str | None = Field(default=None, alias="Description")
    url: str | None = Field(default=None, alias="URL")
    num_votes: int | None = Field(default=None, alias="NumVotes", ge=0)

    def to_record(self) -> PackageRecord:
        return PackageRecord(
            name=self.name,
            version=self.version,
            source=PackageSource.REMOTE,
            popularity=self.num_votes,
            description=self.description,
            homepage=self.url,
        )


class AurResponse(BaseModel):
    """Envelope of an AUR RPC response."""

    version: int | None = None
    type: str
    resultcount: int = 0
    results: list[AurPackage] | None = None
    error: str | None = None


class MetadataSourceClient:
    """Client for AUR metadata and local repository search."""

    def __init__(
        self,
        config: AurorusConfig,
        store: LocalPackageStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.store = store
        self.base_url = config.aur_base_url
        self.rpc_url = f"{self.base_url}/rpc/"
        self.srcinfo_url = f"{self.base_url}/cgit/aur.git/plain/.SRCINFO"
        self.timeout = config.request_timeout
        self._transport = transport
        self.session: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "MetadataSourceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_session(self) -> httpx.AsyncClient:
        """Get or create HTTP session."""
        if self.session is None:
            self.session = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self.session

    async def close(self):
        """Close the HTTP session."""
        if self.session:
            await self.session.aclose()
            self.session = None

    async def _get(self, url: str, params: Any) -> httpx.Response:
        session = await self._get_session()
        try:
            return await session.get(url, params=params)
        except httpx.RequestError as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

    async def _rpc(self, params: list[tuple[str, str]]) -> list[PackageRecord]:
        response = await self._get(self.rpc_url, params)
        if not response.is_success:
            raise ProtocolError(f"AUR RPC returned HTTP {response.status_code}")

        try:
            payload = AurResponse.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            raise ProtocolError(f"Unexpected AUR RPC payload: {e}") from e

        if payload.type == "error":
            raise ProtocolError(f"AUR RPC error: {payload.error or 'unknown error'}")

        return [package.to_record() for package in payload.results or []]

    async def search_remote(self, query: str) -> list[PackageRecord]:
        """Search the AUR by name and description."""
        params = [("v", str(self.config.rpc_version)), ("type", "search"), ("arg", query)]
        records = await self._rpc(params)
        aurorus_logger.debug(f"AUR search for '{query}' returned {len(records)} package(s)")
        return records

    def search_local(self, query: str) -> list[str]:
        """Search the sync repositories; returns raw output lines."""
        return self.store.search(query)

    async def fetch_info_batch(
        self, names: Sequence[str], max_batch: int = AUR_MAX_INFO_BATCH
    ) -> list[PackageRecord]:
        """Fetch AUR info for up to ``max_batch`` packages in one request."""
        if len(names) > max_batch:
            raise ValueError(f"At most {max_batch} names per info request, got {len(names)}")
        if not names:
            return []

        params = [("v", str(self.config.rpc_version)), ("type", "info")]
        params.extend(("arg[]", name) for name in names)
        return await self._rpc(params)

    async def fetch_dependency_manifest(self, name: str) -> str:
        """Fetch the raw .SRCINFO of an AUR package."""
        response = await self._get(self.srcinfo_url, {"h": name})
        if not response.is_success:
            raise NotFoundError(
                f"Failed to fetch .SRCINFO for package {name}: HTTP {response.status_code}"
            )
        return response.text
