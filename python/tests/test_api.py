"""
Tests for the HTTP routes.
"""

import threading

import httpx
import pytest
from fastapi.testclient import TestClient

import aurorus.main as main
from aurorus.packages.aur_client import MetadataSourceClient
from aurorus.packages.manager import PackageManager

from conftest import BlockingPackageStore, FakeAur, FakeBuilder, FakePackageStore, aur_package


@pytest.fixture
def aur():
    return FakeAur(
        [aur_package("yay", "12.1.0-1", votes=2500), aur_package("yay-bin", "12.1.0-1", votes=900)],
        srcinfo={"yay": "pkgbase = yay\n\tdepends = git\n"},
    )


@pytest.fixture
def fake_store():
    return FakePackageStore(
        installed={"git", "yay-bin"},
        foreign=[("yay-bin", "12.0.0-1")],
        search_output={"yay": ["extra/yaycli 0.1-1 [extra]", "    Not the helper"]},
    )


@pytest.fixture
def fake_builder():
    return FakeBuilder()


@pytest.fixture
def api(monkeypatch, config, aur, fake_store, fake_builder):
    client = MetadataSourceClient(config, fake_store, transport=httpx.MockTransport(aur))
    manager = PackageManager(config, store=fake_store, builder=fake_builder, client=client)
    monkeypatch.setattr(main, "package_manager", manager)
    return TestClient(main.app)


class TestRoutes:
    def test_health(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_search(self, api):
        response = api.get("/search", params={"q": "yay"})
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert [(p["index"], p["name"], p["source"]) for p in body["packages"]] == [
            (3, "yay", "aur"),
            (2, "yay-bin", "aur"),
            (1, "yaycli", "repo"),
        ]
        assert body["packages"][1]["installed"] is True
        assert body["packages"][2]["repository"] == "extra"

    def test_search_requires_query(self, api):
        assert api.get("/search").status_code == 422

    def test_dependencies(self, api):
        response = api.get("/packages/yay/dependencies")
        assert response.status_code == 200
        assert response.json() == {"package": "yay", "dependencies": ["git"], "installed": ["git"], "missing": []}

    def test_dependencies_unknown_package(self, api):
        assert api.get("/packages/nope/dependencies").status_code == 404

    def test_install(self, api, fake_builder):
        response = api.post("/install", json={"query": "yay", "selection": "3"})
        assert response.status_code == 200
        assert response.json()["packages"] == ["yay"]
        assert fake_builder.built == [("yay", False)]

    def test_install_bad_selection(self, api, fake_builder):
        response = api.post("/install", json={"query": "yay", "selection": "9"})
        assert response.status_code == 400
        assert fake_builder.built == []

    def test_install_nothing_found(self, api):
        response = api.post("/install", json={"query": "zzz", "selection": "1"})
        assert response.status_code == 404

    def test_uninstall(self, api, fake_store):
        response = api.delete("/packages/yay-bin")
        assert response.status_code == 200
        assert fake_store.removed_calls == [["yay-bin"]]

    def test_uninstall_not_installed(self, api):
        assert api.delete("/packages/yay").status_code == 404

    def test_updates(self, api):
        response = api.get("/updates")
        assert response.status_code == 200
        body = response.json()
        assert body["candidates"] == [
            {"name": "yay-bin", "installed_version": "12.0.0-1", "remote_version": "12.1.0-1"}
        ]
        assert body["failed_chunks"] == 0

    def test_apply_updates(self, api, fake_builder):
        response = api.post("/updates/apply", json={"selection": ""})
        assert response.status_code == 200
        assert response.json()["packages"] == ["yay-bin"]
        assert fake_builder.built == [("yay-bin", True)]

    def test_upgrade(self, api, fake_store):
        assert api.post("/upgrade").status_code == 200
        assert fake_store.upgrades == 1

    def test_remote_failure_maps_to_bad_gateway(self, monkeypatch, config, fake_store, fake_builder):
        client = MetadataSourceClient(
            config, fake_store, transport=httpx.MockTransport(lambda request: httpx.Response(500))
        )
        manager = PackageManager(config, store=fake_store, builder=fake_builder, client=client)
        monkeypatch.setattr(main, "package_manager", manager)

        response = TestClient(main.app).get("/search", params={"q": "yay"})
        assert response.status_code == 502

    def test_manager_not_initialized(self, monkeypatch):
        monkeypatch.setattr(main, "package_manager", None)
        assert TestClient(main.app).get("/updates").status_code == 503


class TestResponsiveness:
    def test_health_answers_during_slow_store_search(self, monkeypatch, config, aur, fake_builder):
        store = BlockingPackageStore(search_output={"yay": ["extra/yaycli 0.1-1 [extra]"]})
        client = MetadataSourceClient(config, store, transport=httpx.MockTransport(aur))
        manager = PackageManager(config, store=store, builder=fake_builder, client=client)
        monkeypatch.setattr(main, "package_manager", manager)

        responses = {}
        with TestClient(main.app) as api:
            worker = threading.Thread(
                target=lambda: responses.setdefault("search", api.get("/search", params={"q": "yay"}))
            )
            worker.start()
            assert store.entered.wait(timeout=5)

            health = api.get("/health")
            store.release.set()
            worker.join(timeout=10)

        assert health.status_code == 200
        assert store.released_in_time is True
        assert responses["search"].status_code == 200
        assert responses["search"].json()["total"] == 3
