"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for catalog products.

The field aliases (imageUrl, barcodeUrl) match the JSON shape served by
the inventory catalog, so remote snapshots validate without remapping.

==============================================================================
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    """Product category reference."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: str = Field(..., description="Category identifier")
    name: str = Field(..., min_length=1, description="Category name")


class CatalogProduct(BaseModel):
    """
    Product entry in a catalog snapshot.
    
    Read-only from the point of view of the scan pipeline: the resolver
    matches against sku and returns the entry untouched.
    
    Attributes:
        id: Catalog identifier
        sku: Stock keeping unit encoded in the barcode payload
        name: Product display name
        category: Owning category, if any
        price: Current unit price (authoritative over scanned payloads)
        quantity: Current stock level (authoritative over scanned payloads)
        image_ref: Product image location
        barcode_ref: Stored barcode image location
    """
    
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )
    
    id: str = Field(..., description="Catalog identifier")
    sku: str = Field(..., description="Stock keeping unit")
    name: str = Field(..., min_length=1, description="Product name")
    category: Optional[Category] = Field(default=None, description="Category")
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Unit price")
    quantity: int = Field(default=0, ge=0, description="Units in stock")
    image_ref: Optional[str] = Field(default=None, alias="imageUrl", description="Image location")
    barcode_ref: Optional[str] = Field(default=None, alias="barcodeUrl", description="Barcode image location")
    
    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None
    
    def to_response(self) -> dict:
        """Serialize using the catalog wire names."""
        return self.model_dump(mode="json", by_alias=True)
