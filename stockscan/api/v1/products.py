"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Endpoints for browsing the catalog and looking up scanned SKUs.

The list endpoint uses the {"success", "data"} envelope that
HttpCatalogClient consumes, so one deployment can serve as the remote
catalog of another.

==============================================================================
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from stockscan.catalog import CatalogClient, CatalogFetchError, CatalogProduct, ProductCatalog, category_id
from stockscan.core import exceptions
from stockscan.core.dependencies import (
    get_catalog_client,
    get_product_catalog,
    get_product_resolver,
)
from stockscan.scanner import ProductResolver, ResolutionStatus, normalize


router = APIRouter(prefix="/products", tags=["Products"])


class ProductController:
    """Controller for product catalog operations."""
    
    def __init__(self, client: CatalogClient):
        self._client = client
    
    async def _snapshot(self) -> List[CatalogProduct]:
        try:
            return await self._client.fetch_all_products()
        except CatalogFetchError as e:
            raise exceptions.catalog_unavailable(str(e))
    
    async def list_products(self, category: Optional[str], limit: Optional[int]) -> dict:
        """List products with an optional category filter."""
        products = await self._snapshot()
        
        if category:
            products = [
                p for p in products
                if p.category
                and category in (p.category_name, p.category.id, category_id(p.category_name))
            ]
        
        if limit is not None:
            products = products[:limit]
        
        return {
            "success": True,
            "category": category,
            "total": len(products),
            "data": [p.to_response() for p in products]
        }
    
    async def get_by_id(self, product_id: str) -> dict:
        """Get product by catalog id."""
        try:
            product = await self._client.fetch_product(product_id)
        except CatalogFetchError as e:
            raise exceptions.catalog_unavailable(str(e))
        
        if not product:
            raise exceptions.product_not_found(product_id)
        
        return {"success": True, "data": product.to_response()}


@router.get("")
async def list_products(
    category: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=10000),
    client: CatalogClient = Depends(get_catalog_client)
):
    """List products in catalog order."""
    controller = ProductController(client)
    return await controller.list_products(category, limit)


@router.get("/categories")
async def get_categories(catalog: ProductCatalog = Depends(get_product_catalog)):
    """Get all categories with product counts."""
    return {"success": True, "categories": catalog.get_categories()}


@router.get("/stats")
async def get_catalog_stats(catalog: ProductCatalog = Depends(get_product_catalog)):
    """Get catalog statistics."""
    return {"success": True, "stats": catalog.get_stats()}


@router.get("/sku/{sku}")
async def get_product_by_sku(sku: str, resolver: ProductResolver = Depends(get_product_resolver)):
    """
    Look up a product by SKU or scanned payload.
    
    Uses the scan resolver, so exact and fuzzy SKU rules apply.
    """
    resolution = await resolver.resolve(normalize(sku))
    
    if resolution.status == ResolutionStatus.ERROR:
        raise exceptions.catalog_unavailable(resolution.detail or resolution.error.value)
    if resolution.status == ResolutionStatus.NOT_FOUND:
        raise exceptions.product_not_found(sku)
    
    return {
        "success": True,
        "match": resolution.match.value,
        "data": resolution.product.to_response()
    }


@router.get("/{product_id}")
async def get_product(product_id: str, client: CatalogClient = Depends(get_catalog_client)):
    """Get product by catalog id."""
    controller = ProductController(client)
    return await controller.get_by_id(product_id)
