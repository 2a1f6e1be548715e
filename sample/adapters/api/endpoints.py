# sample/adapters/api/endpoints.py
import importlib
import pkgutil
from typing import List

import structlog
from fastapi import APIRouter, FastAPI

logger = structlog.get_logger(__name__)

ROUTERS_PACKAGE = "sample.adapters.api.routers"


def discover_routers(package: str = ROUTERS_PACKAGE) -> List[tuple]:
    """
    Imports every module of ``package`` and collects the ``router``
    attribute of those that define an APIRouter.

    Returns (module_name, router) pairs in module-name order.
    """
    pkg = importlib.import_module(package)
    found = []
    for module_info in sorted(pkgutil.iter_modules(pkg.__path__), key=lambda m: m.name):
        if module_info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{package}.{module_info.name}")
        router = getattr(module, "router", None)
        if isinstance(router, APIRouter):
            found.append((module.__name__, router))
    return found


def map_endpoints(app: FastAPI, prefix: str = "", package: str = ROUTERS_PACKAGE) -> List[str]:
    """
    Mounts every discovered router under ``prefix``.
    Returns the module names so the caller can wire them into the container.
    """
    mapped = []
    for module_name, router in discover_routers(package):
        app.include_router(router, prefix=prefix)
        mapped.append(module_name)

    logger.info("endpoints_mapped", modules=mapped, prefix=prefix)
    return mapped
