"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency providers wiring settings into the pipeline components.

Providers:
----------
- get_product_catalog: Loaded local ProductCatalog (or CATALOG_NOT_LOADED)
- get_catalog_client: Catalog collaborator chosen by settings.catalog_source
- get_product_resolver: ProductResolver bound to the catalog client
- get_barcode_generator: Code128 generator configured from settings
- get_session_timings: Scan session display windows
- get_optical_decoder: Frame / image barcode decoder

Tests replace any of these through app.dependency_overrides.

==============================================================================
"""

from __future__ import annotations

from fastapi import Depends

from stockscan.catalog import (
    CatalogClient,
    HttpCatalogClient,
    LocalCatalogClient,
    ProductCatalog,
    get_catalog,
)
from stockscan.config import Settings, get_settings
from stockscan.labels import BarcodeGenerator
from stockscan.scanner import OpticalDecoder, ProductResolver
from stockscan.session import SessionTimings

from . import exceptions


def get_product_catalog() -> ProductCatalog:
    """Get the loaded local catalog."""
    catalog = get_catalog()
    if catalog is None:
        raise exceptions.catalog_not_loaded()
    return catalog


def get_catalog_client(settings: Settings = Depends(get_settings)) -> CatalogClient:
    """Get the catalog collaborator configured for this deployment."""
    if settings.uses_remote_catalog:
        return HttpCatalogClient(
            settings.catalog_base_url,
            timeout_seconds=settings.catalog_timeout_seconds,
            products_path=settings.catalog_products_path,
            product_path=settings.catalog_product_path,
        )
    return LocalCatalogClient(get_product_catalog())


def get_product_resolver(client: CatalogClient = Depends(get_catalog_client)) -> ProductResolver:
    """Get a resolver bound to the catalog collaborator."""
    return ProductResolver(client)


def get_barcode_generator(settings: Settings = Depends(get_settings)) -> BarcodeGenerator:
    """Get a barcode generator configured from settings."""
    return BarcodeGenerator(
        output_dir=settings.barcode_path,
        module_height=settings.barcode_module_height,
        quiet_zone=settings.barcode_quiet_zone,
    )


def get_session_timings(settings: Settings = Depends(get_settings)) -> SessionTimings:
    """Get scan session display windows."""
    return SessionTimings(
        success_display=settings.success_display_seconds,
        result_clear_delay=settings.result_clear_delay_seconds,
        failure_display=settings.failure_display_seconds,
    )


def get_optical_decoder() -> OpticalDecoder:
    """Get a frame / image barcode decoder."""
    return OpticalDecoder()
