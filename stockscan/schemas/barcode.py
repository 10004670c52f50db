"""
==============================================================================
Barcode Schemas Module
==============================================================================

Request and response schemas for barcode generation endpoints.

==============================================================================
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from stockscan.codec import ProductRef


class BarcodeRequest(BaseModel):
    """
    Values to embed in a barcode.
    
    Example:
        {"sku": "SR1001", "price": 2500, "quantity": 50}
    """
    
    sku: str = Field(..., min_length=1, max_length=64, description="Stock keeping unit")
    price: Decimal = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    quantity: int = Field(..., ge=0, description="Units in stock")
    
    @field_validator("sku")
    @classmethod
    def validate_sku(cls, value: str) -> str:
        """Reject blank SKUs."""
        value = value.strip()
        if not value:
            raise ValueError("SKU must not be blank")
        return value
    
    def to_ref(self) -> ProductRef:
        return ProductRef(sku=self.sku, price=self.price, quantity=self.quantity)


class BarcodePreviewData(BaseModel):
    """Generated barcode preview."""
    
    payload: str
    barcode_preview: str = Field(..., description="PNG data URI")


class BarcodePreviewResponse(BaseModel):
    success: bool = Field(default=True)
    data: BarcodePreviewData


class StoredBarcodeData(BaseModel):
    payload: str
    barcode_ref: str = Field(..., description="Location of the stored PNG")


class StoredBarcodeResponse(BaseModel):
    success: bool = Field(default=True)
    data: StoredBarcodeData
