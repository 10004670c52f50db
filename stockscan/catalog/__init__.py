"""
==============================================================================
Catalog Package - Product Snapshots
==============================================================================

Product catalog models and the catalog collaborator used by the scan
resolver.

Classes:
--------
- CatalogProduct: Pydantic model for catalog entries
- ProductCatalog: JSON-file backed catalog with lookups
- CatalogClient: Snapshot collaborator (local or HTTP)

==============================================================================
"""

from .models import CatalogProduct, Category
from .catalog import ProductCatalog, category_id, get_catalog, init_catalog
from .client import (
    CatalogClient,
    CatalogFetchError,
    HttpCatalogClient,
    LocalCatalogClient,
)

__all__ = [
    "CatalogProduct",
    "Category",
    "ProductCatalog",
    "category_id",
    "get_catalog",
    "init_catalog",
    "CatalogClient",
    "CatalogFetchError",
    "HttpCatalogClient",
    "LocalCatalogClient",
]
