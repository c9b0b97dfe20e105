"""
aurorus Service

A FastAPI service exposing package search, installation, removal and update
checks for AUR and repository packages.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from . import __version__
from .packages.errors import AurorusError
from .packages.manager import PackageManager, get_package_manager

logger = logging.getLogger(__name__)

# Global package manager instance
package_manager: PackageManager | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global package_manager

    if package_manager is None:
        package_manager = get_package_manager()
    logger.info(f"aurorus started, AUR endpoint: {package_manager.config.aur_base_url}")

    yield

    try:
        await package_manager.close()
        logger.info("aurorus shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


app = FastAPI(
    title="aurorus",
    description="AUR and repository package discovery and update service",
    version=__version__,
    lifespan=lifespan
)


class InstallRequest(BaseModel):
    """Request model for installing a package from a search."""
    query: str
    selection: str
    install_missing: bool = False


class ApplyUpdatesRequest(BaseModel):
    """Request model for applying updates."""
    selection: str = ""


def _manager() -> PackageManager:
    if not package_manager:
        raise HTTPException(status_code=503, detail="Package manager not initialized")
    return package_manager


def _http_error(action: str, error: AurorusError) -> HTTPException:
    logger.error(f"{action} failed: {error}")
    return HTTPException(status_code=error.status_code, detail=str(error))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/search")
async def search(q: str = Query(..., min_length=1)):
    """Search the AUR and the repositories."""
    manager = _manager()
    try:
        catalog = await manager.search(q)
        installed = await manager.installed_names([entry.record.name for entry in catalog])
        return {
            "query": q,
            "total": len(catalog),
            "packages": [
                {
                    "index": entry.index,
                    "installed": entry.record.name in installed,
                    **entry.record.to_dict(),
                }
                for entry in catalog
            ],
        }
    except AurorusError as e:
        raise _http_error("Search", e)


@app.get("/packages/{name}/dependencies")
async def get_dependencies(name: str):
    """Check the dependencies of an AUR package."""
    try:
        report = await _manager().check_dependencies(name)
        return report.to_dict()
    except AurorusError as e:
        raise _http_error("Dependency check", e)


@app.post("/install")
async def install(request: InstallRequest):
    """Install a package picked from the results of a fresh search."""
    manager = _manager()
    try:
        catalog = await manager.search(request.query)
        if catalog.is_empty:
            raise HTTPException(status_code=404, detail=f"No packages found for '{request.query}'")

        result = await manager.install_selection(
            catalog, request.selection, install_missing=request.install_missing
        )
    except AurorusError as e:
        raise _http_error("Install", e)

    if not result.success:
        raise HTTPException(status_code=500, detail=result.message)
    return {"success": True, "message": result.message, "packages": result.packages, "data": result.data}


@app.delete("/packages/{name}")
async def uninstall(name: str):
    """Uninstall a package and its debug companion."""
    try:
        result = await _manager().uninstall(name)
    except AurorusError as e:
        raise _http_error("Uninstall", e)

    if not result.success:
        status_code = 404 if not result.packages else 500
        raise HTTPException(status_code=status_code, detail=result.message)
    return {"success": True, "message": result.message, "packages": result.packages}


@app.get("/updates")
async def check_updates():
    """List installed AUR packages with newer versions available."""
    try:
        report = await _manager().check_updates()
        return report.to_dict()
    except AurorusError as e:
        raise _http_error("Update check", e)


@app.post("/updates/apply")
async def apply_updates(request: ApplyUpdatesRequest):
    """Check for updates and rebuild the selected packages."""
    manager = _manager()
    try:
        report = await manager.check_updates()
        result = await manager.apply_updates(report, request.selection)
    except AurorusError as e:
        raise _http_error("Update", e)

    return {
        "success": result.success,
        "message": result.message,
        "packages": result.packages,
        "data": result.data,
        "failed_chunks": report.failed_chunks,
    }


@app.post("/upgrade")
async def upgrade_system():
    """Upgrade all repository packages."""
    try:
        result = await _manager().upgrade_system()
    except AurorusError as e:
        raise _http_error("Upgrade", e)

    if not result.success:
        raise HTTPException(status_code=500, detail=result.message)
    return {"success": True, "message": result.message}


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("AURORUS_HOST", "127.0.0.1")
    port = int(os.getenv("AURORUS_PORT", "8060"))

    logger.info(f"Starting aurorus on {host}:{port}")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="info"
    )
