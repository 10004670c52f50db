"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides catalog, resolver, feedback and client fixtures.

==============================================================================
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Generator, List

import pytest
from fastapi.testclient import TestClient

from stockscan.catalog import (
    CatalogClient,
    CatalogFetchError,
    CatalogProduct,
    LocalCatalogClient,
    ProductCatalog,
)
from stockscan.core.dependencies import (
    get_barcode_generator,
    get_catalog_client,
    get_product_catalog,
    get_session_timings,
)
from stockscan.labels import BarcodeGenerator
from stockscan.main import app
from stockscan.session import FeedbackPattern, FeedbackSink, SessionTimings


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

CATALOG_DATA = {
    "Beverages": [
        {"id": "p-1", "sku": "SR1001", "name": "Sparkling Water", "price": "2500", "quantity": 50},
        {"id": "p-2", "sku": "SR2002", "name": "Green Tea", "price": "1800", "quantity": 12},
    ],
    "Snacks": [
        {"id": "p-3", "sku": "sn-300", "name": "Salted Crackers", "price": "950.50", "quantity": 0},
        {"id": "p-4", "sku": "SN-300-XL", "name": "Crackers Family Pack", "price": "1500", "quantity": 4},
    ],
}


def make_product(product_id: str, sku: str, name: str = None) -> CatalogProduct:
    """Build a catalog product with default stock values."""
    return CatalogProduct(
        id=product_id,
        sku=sku,
        name=name or f"Product {sku}",
        price=Decimal("10"),
        quantity=1,
    )


class FakeCatalogClient(CatalogClient):
    """In-memory catalog collaborator that counts fetches."""
    
    def __init__(self, products: List[CatalogProduct]):
        self.products = list(products)
        self.fetches = 0
    
    async def fetch_all_products(self) -> List[CatalogProduct]:
        self.fetches += 1
        return list(self.products)
    
    async def fetch_product(self, product_id: str):
        return next((p for p in self.products if p.id == product_id), None)


class FailingCatalogClient(CatalogClient):
    """Catalog collaborator whose every call fails."""
    
    async def fetch_all_products(self):
        raise CatalogFetchError("connection refused")
    
    async def fetch_product(self, product_id: str):
        raise CatalogFetchError("connection refused")


class RecordingFeedback(FeedbackSink):
    """Feedback sink that keeps every emitted pattern in order."""
    
    def __init__(self):
        self.patterns: List[FeedbackPattern] = []
    
    def emit(self, pattern: FeedbackPattern) -> None:
        self.patterns.append(pattern)


@pytest.fixture
def products_file(tmp_path: Path) -> Path:
    """Write the test catalog to a temporary JSON file."""
    path = tmp_path / "products.json"
    path.write_text(json.dumps(CATALOG_DATA), encoding="utf-8")
    return path


@pytest.fixture
def catalog(products_file: Path) -> ProductCatalog:
    """Loaded test catalog."""
    return ProductCatalog(products_file)


@pytest.fixture
def catalog_client(catalog: ProductCatalog) -> LocalCatalogClient:
    """Local catalog collaborator over the test catalog."""
    return LocalCatalogClient(catalog)


@pytest.fixture
def feedback() -> RecordingFeedback:
    """Feedback sink recording emitted patterns."""
    return RecordingFeedback()


@pytest.fixture
def fast_timings() -> SessionTimings:
    """Short display windows for driver tests."""
    return SessionTimings(success_display=0.05, result_clear_delay=0.05, failure_display=0.05)


@pytest.fixture
def generator(tmp_path: Path) -> BarcodeGenerator:
    """Barcode generator writing into a temporary directory."""
    return BarcodeGenerator(output_dir=tmp_path / "barcodes")


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def client(
    catalog: ProductCatalog,
    generator: BarcodeGenerator,
) -> Generator[TestClient, None, None]:
    """Create test client with catalog and generator overrides."""
    app.dependency_overrides[get_product_catalog] = lambda: catalog
    app.dependency_overrides[get_catalog_client] = lambda: LocalCatalogClient(catalog)
    app.dependency_overrides[get_barcode_generator] = lambda: generator
    app.dependency_overrides[get_session_timings] = lambda: SessionTimings(
        success_display=5.0, result_clear_delay=1.0, failure_display=5.0
    )
    
    with TestClient(app) as test_client:
        yield test_client
    
    app.dependency_overrides.clear()


@pytest.fixture
def offline_client(generator: BarcodeGenerator) -> Generator[TestClient, None, None]:
    """Create test client whose catalog collaborator is unreachable."""
    app.dependency_overrides[get_catalog_client] = lambda: FailingCatalogClient()
    app.dependency_overrides[get_barcode_generator] = lambda: generator
    
    with TestClient(app) as test_client:
        yield test_client
    
    app.dependency_overrides.clear()
