"""
==============================================================================
Product Catalog Module
==============================================================================

JSON-file backed product catalog used as the local catalog collaborator.

Features:
---------
- JSON-based product storage grouped by category
- Catalog order preserved (the resolver's fuzzy tie-break depends on it)
- Fast id lookup index

JSON Structure:
--------------
{
  "Beverages": [
    {"id": "p-1", "sku": "SR1001", "name": "Sparkling Water",
     "price": "2500", "quantity": 50,
     "imageUrl": "...", "barcodeUrl": "..."},
    ...
  ],
  "Snacks": [...]
}

==============================================================================
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from .models import CatalogProduct, Category


# Module logger
logger = logging.getLogger(__name__)


def category_id(name: str) -> str:
    """Derive a stable category id from its display name."""
    return "-".join(name.lower().split())


class ProductCatalog:
    """
    Product catalog manager with category structure and lookups.
    
    Attributes:
        products: List of all products in file order
    
    Example:
        >>> catalog = ProductCatalog(Path("data/products.json"))
        >>> product = catalog.find_by_id("p-1")
    """
    
    def __init__(self, products_file: Path) -> None:
        """
        Initialize catalog from JSON file.
        
        Args:
            products_file: Path to products.json
        """
        self._products_file = products_file
        self._products: List[CatalogProduct] = []
        self._by_id: Dict[str, CatalogProduct] = {}
        self._categories: Dict[str, List[CatalogProduct]] = {}
        
        self._load()
    
    # =========================================================================
    # PROPERTIES
    # =========================================================================
    
    @property
    def products(self) -> List[CatalogProduct]:
        """Get all products."""
        return self._products.copy()
    
    # =========================================================================
    # LOADING
    # =========================================================================
    
    def _load(self) -> None:
        """Load products from JSON file."""
        try:
            with self._products_file.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.error(f"Products file not found: {self._products_file}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON: {e}")
            raise
        
        self._products.clear()
        self._categories.clear()
        
        for category_name, products_list in data.items():
            if not isinstance(products_list, list):
                logger.warning(f"Skipping invalid category: {category_name}")
                continue
            
            category = Category(id=category_id(category_name), name=category_name)
            category_products = []
            
            for item in products_list:
                if not isinstance(item, dict):
                    continue
                
                try:
                    product = CatalogProduct.model_validate({**item, "category": category})
                except ValidationError as e:
                    logger.warning(
                        f"Skipping invalid product in {category_name}: "
                        f"{e.error_count()} error(s)"
                    )
                    continue
                
                category_products.append(product)
                self._products.append(product)
            
            self._categories[category_name] = category_products
        
        self._build_indexes()
        
        logger.info(
            f"✅ Loaded {len(self._products)} products "
            f"from {len(self._categories)} categories"
        )
    
    def _build_indexes(self) -> None:
        """Build lookup indexes."""
        self._by_id.clear()
        
        for product in self._products:
            self._by_id[product.id] = product
    
    # =========================================================================
    # SEARCH METHODS
    # =========================================================================
    
    def find_by_id(self, product_id: str) -> Optional[CatalogProduct]:
        """Find product by catalog id."""
        return self._by_id.get(product_id)
    
    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    
    def get_categories(self) -> List[dict]:
        """Get all categories with product counts."""
        return [
            {"id": category_id(name), "name": name, "products": len(products)}
            for name, products in self._categories.items()
        ]
    
    def get_stats(self) -> Dict:
        """Get catalog statistics."""
        return {
            "total_products": len(self._products),
            "categories": len(self._categories),
            "total_units": sum(p.quantity for p in self._products),
            "out_of_stock": sum(1 for p in self._products if p.quantity == 0),
        }


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

_catalog_instance: Optional[ProductCatalog] = None


def get_catalog() -> Optional[ProductCatalog]:
    """Get the global catalog instance."""
    return _catalog_instance


def init_catalog(products_file: Path) -> ProductCatalog:
    """
    Initialize the global catalog instance.
    
    Args:
        products_file: Path to products.json
        
    Returns:
        ProductCatalog instance
    """
    global _catalog_instance
    _catalog_instance = ProductCatalog(products_file)
    return _catalog_instance
