"""
aurorus Package Configuration

This module handles configuration models and validation for the package services.
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

AUR_BASE_URL = "https://aur.archlinux.org"
AUR_MAX_INFO_BATCH = 50


def default_cache_dir() -> Path:
    """Return the directory AUR sources are cloned into."""
    xdg_cache = os.getenv("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / "aurorus"
    return Path.home() / ".cache" / "aurorus"


class AurorusConfig(BaseModel):
    """Configuration for the AUR client, update checks and local tooling."""

    aur_base_url: str = Field(default=AUR_BASE_URL, description="Base URL of the AUR web service")
    rpc_version: int = Field(default=5, description="AUR RPC interface version")
    request_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")
    info_batch_size: int = Field(default=AUR_MAX_INFO_BATCH, description="Package names per info request")
    max_concurrent_requests: int = Field(default=4, description="Maximum info requests in flight")
    chunk_timeout: float | None = Field(default=None, description="Per-chunk timeout for update checks")
    cache_dir: Path = Field(default_factory=default_cache_dir, description="Checkout directory for AUR builds")
    pacman_command: str = Field(default="pacman", description="Local package manager executable")
    use_sudo: bool = Field(default=True, description="Prefix privileged pacman calls with sudo")

    @field_validator("aur_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @field_validator("info_batch_size")
    @classmethod
    def validate_batch_size(cls, v):
        if not 1 <= v <= AUR_MAX_INFO_BATCH:
            raise ValueError(f"info_batch_size must be between 1 and {AUR_MAX_INFO_BATCH}")
        return v

    @field_validator("max_concurrent_requests")
    @classmethod
    def validate_concurrency(cls, v):
        if v < 1:
            raise ValueError("max_concurrent_requests must be at least 1")
        return v

    @classmethod
    def from_env(cls) -> "AurorusConfig":
        """Build a configuration from ``AURORUS_*`` environment variables."""
        overrides = {
            "aur_base_url": os.getenv("AURORUS_AUR_URL"),
            "request_timeout": os.getenv("AURORUS_REQUEST_TIMEOUT"),
            "info_batch_size": os.getenv("AURORUS_BATCH_SIZE"),
            "max_concurrent_requests": os.getenv("AURORUS_MAX_CONCURRENT"),
            "chunk_timeout": os.getenv("AURORUS_CHUNK_TIMEOUT"),
            "cache_dir": os.getenv("AURORUS_CACHE_DIR"),
            "pacman_command": os.getenv("AURORUS_PACMAN"),
        }
        use_sudo = os.getenv("AURORUS_USE_SUDO")
        if use_sudo is not None:
            overrides["use_sudo"] = use_sudo.lower() not in {"0", "false", "no"}

        return cls(**{key: value for key, value in overrides.items() if value is not None})
