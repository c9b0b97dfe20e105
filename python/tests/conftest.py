"""
Shared test fixtures and in-memory package tooling.
"""

import json
import threading
from pathlib import Path

import httpx
import pytest

from aurorus.packages.builder import Builder
from aurorus.packages.config import AurorusConfig
from aurorus.packages.local_store import LocalPackageStore
from aurorus.packages.models import InstalledPackage


class FakePackageStore(LocalPackageStore):
    """In-memory ``LocalPackageStore`` recording every change request."""

    def __init__(self, installed=None, foreign=None, search_output=None, exit_status=0):
        self.installed = set(installed or [])
        self.foreign = list(foreign or [])
        self.search_output = dict(search_output or {})
        self.exit_status = exit_status
        self.installed_calls: list[list[str]] = []
        self.removed_calls: list[list[str]] = []
        self.upgrades = 0
        self.queries: list[str] = []

    def search(self, query):
        self.queries.append(query)
        return list(self.search_output.get(query, []))

    def is_installed(self, name):
        return name in self.installed

    def list_foreign_installed(self):
        return [InstalledPackage(name, version) for name, version in self.foreign]

    def install_packages(self, names):
        self.installed_calls.append(list(names))
        return self.exit_status

    def remove_packages(self, names):
        self.removed_calls.append(list(names))
        return self.exit_status

    def run_full_upgrade(self):
        self.upgrades += 1
        return self.exit_status


class BlockingPackageStore(FakePackageStore):
    """``FakePackageStore`` whose ``search`` holds until ``release`` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.entered = threading.Event()
        self.release = threading.Event()
        self.released_in_time = None

    def search(self, query):
        self.entered.set()
        self.released_in_time = self.release.wait(timeout=5)
        return super().search(query)


class FakeBuilder(Builder):
    """``Builder`` that records builds instead of running makepkg."""

    def __init__(self, failing=None):
        self.failing = set(failing or [])
        self.built: list[tuple[str, bool]] = []

    def prepare(self, name):
        return Path("/tmp/aurorus-test") / name

    def build(self, package_dir, no_confirm=False):
        self.built.append((package_dir.name, no_confirm))
        return 1 if package_dir.name in self.failing else 0


def aur_package(name, version="1.0-1", votes=None, description=None, url=None):
    """Build one AUR RPC result entry."""
    return {
        "Name": name,
        "Version": version,
        "NumVotes": votes,
        "Description": description,
        "URL": url,
    }


def aur_response(results, rpc_type="search"):
    return {"version": 5, "type": rpc_type, "resultcount": len(results), "results": results}


class FakeAur:
    """Request handler standing in for the AUR web service."""

    def __init__(self, packages=None, srcinfo=None):
        self.packages = {package["Name"]: package for package in packages or []}
        self.srcinfo = dict(srcinfo or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params

        if request.url.path == "/cgit/aur.git/plain/.SRCINFO":
            name = params.get("h")
            if name not in self.srcinfo:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, text=self.srcinfo[name])

        if params.get("type") == "info":
            results = [self.packages[name] for name in params.get_list("arg[]") if name in self.packages]
            return httpx.Response(200, text=json.dumps(aur_response(results, "multiinfo")))

        query = params.get("arg", "")
        results = [package for name, package in self.packages.items() if query in name]
        return httpx.Response(200, text=json.dumps(aur_response(results)))


@pytest.fixture
def config(tmp_path: Path) -> AurorusConfig:
    """Configuration pointing at a fake AUR and a temporary cache."""
    return AurorusConfig(aur_base_url="https://aur.test", cache_dir=tmp_path / "cache", use_sudo=False)


@pytest.fixture
def store() -> FakePackageStore:
    return FakePackageStore()


@pytest.fixture
def builder() -> FakeBuilder:
    return FakeBuilder()
