"""
==============================================================================
Catalog Client Module
==============================================================================

Catalog collaborator used by the scan resolver.

The resolver only needs two calls: fetch a full snapshot, and fetch one
product by id. Both are async because the remote variant suspends on
network I/O, and the scan session must stay locked for the whole fetch.

Implementations:
----------------
- LocalCatalogClient: In-process ProductCatalog (JSON file)
- HttpCatalogClient: Remote inventory API over httpx

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .catalog import ProductCatalog
from .models import CatalogProduct


# Module logger
logger = logging.getLogger(__name__)


class CatalogFetchError(Exception):
    """Catalog could not be queried (network, HTTP or payload failure)."""


class CatalogClient:
    """Base class for catalog collaborators."""
    
    async def fetch_all_products(self) -> List[CatalogProduct]:
        """
        Fetch the full catalog snapshot in catalog order.
        
        Raises:
            CatalogFetchError: If the catalog cannot be queried
        """
        raise NotImplementedError
    
    async def fetch_product(self, product_id: str) -> Optional[CatalogProduct]:
        """
        Fetch a single product.
        
        Returns:
            The product, or None when the id is unknown
            
        Raises:
            CatalogFetchError: If the catalog cannot be queried
        """
        raise NotImplementedError


class LocalCatalogClient(CatalogClient):
    """Catalog collaborator backed by an in-process ProductCatalog."""
    
    def __init__(self, catalog: ProductCatalog) -> None:
        self._catalog = catalog
    
    async def fetch_all_products(self) -> List[CatalogProduct]:
        return self._catalog.products
    
    async def fetch_product(self, product_id: str) -> Optional[CatalogProduct]:
        return self._catalog.find_by_id(product_id)


class HttpCatalogClient(CatalogClient):
    """
    Catalog collaborator for the remote inventory API.
    
    Expects the inventory response envelope:
        {"success": true, "data": [...]}   (all products)
        {"success": true, "data": {...}}   (single product)
    
    Example:
        >>> client = HttpCatalogClient("http://inventory:3000")
        >>> products = await client.fetch_all_products()
    """
    
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        products_path: str = "/api/products/get-all",
        product_path: str = "/api/products/{product_id}",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the remote catalog client.
        
        Args:
            base_url: Inventory API base URL
            timeout_seconds: Per-request timeout
            products_path: Path returning every product
            product_path: Path template returning one product
            transport: Optional httpx transport (tests use MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._products_path = products_path
        self._product_path = product_path
        self._transport = transport
    
    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
    
    async def _get_data(self, path: str):
        try:
            async with self._client() as client:
                response = await client.get(path)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Catalog request failed: {path}: {e}")
            raise CatalogFetchError(f"Catalog request failed: {e}") from e
        except ValueError as e:
            raise CatalogFetchError(f"Catalog returned invalid JSON: {e}") from e
        
        if not isinstance(body, dict) or not body.get("success"):
            raise CatalogFetchError("Catalog reported failure")
        
        return body.get("data")
    
    async def fetch_all_products(self) -> List[CatalogProduct]:
        data = await self._get_data(self._products_path)
        if not isinstance(data, list):
            raise CatalogFetchError("Catalog snapshot is not a list")
        
        try:
            products = [CatalogProduct.model_validate(item) for item in data]
        except ValidationError as e:
            raise CatalogFetchError(f"Catalog snapshot is malformed: {e.error_count()} error(s)") from e
        
        logger.debug(f"Fetched {len(products)} products from {self._base_url}")
        return products
    
    async def fetch_product(self, product_id: str) -> Optional[CatalogProduct]:
        path = self._product_path.format(product_id=product_id)
        
        try:
            data = await self._get_data(path)
        except CatalogFetchError as e:
            cause = e.__cause__
            if isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 404:
                return None
            raise
        
        if data is None:
            return None
        
        try:
            return CatalogProduct.model_validate(data)
        except ValidationError as e:
            raise CatalogFetchError(f"Catalog product is malformed: {e.error_count()} error(s)") from e
