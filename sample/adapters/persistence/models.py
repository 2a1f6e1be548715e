# sample/adapters/persistence/models.py

from __future__ import annotations

import importlib
import pkgutil
from typing import List

import structlog
from sqlalchemy import MetaData
from sqlalchemy.orm import registry

logger = structlog.get_logger(__name__)

CONFIGURATIONS_PACKAGE = "sample.adapters.persistence.configurations"

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

# Domain entities are plain classes; every module in CONFIGURATIONS_PACKAGE
# declares a table and maps one entity imperatively onto this registry.
mapper_registry = registry()
metadata: MetaData = mapper_registry.metadata


def configure_mappings(package: str = CONFIGURATIONS_PACKAGE) -> List[str]:
    """
    Imports every entity configuration module found in ``package``.

    Safe to call repeatedly: a module maps its entity once, on first import.
    Returns the names of the configuration modules.
    """
    pkg = importlib.import_module(package)
    loaded: List[str] = []
    for module_info in pkgutil.iter_modules(pkg.__path__):
        if module_info.name.startswith("_"):
            continue
        importlib.import_module(f"{package}.{module_info.name}")
        loaded.append(module_info.name)

    logger.debug("entity_configurations_loaded", modules=loaded)
    return loaded
