"""
==============================================================================
Payload Codec Module
==============================================================================

Bidirectional mapping between a ProductRef and the text embedded in a
Code128 symbol.

Format:
-------
    {sku}|{price}|{quantity}

    SR1001|2500|50
    TEA-20|4.75|0

The format is positional with no escaping. SKUs are controlled catalog
data, so a SKU containing the delimiter is rejected at encode time
instead of being mangled.

==============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


DELIMITER = "|"

_PRICE_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?")
_QUANTITY_PATTERN = re.compile(r"[0-9]+")


class ProductRef(BaseModel):
    """
    Identity and stock attributes carried by a barcode.
    
    Attributes:
        sku: Stock keeping unit, must not contain the delimiter to be encodable
        price: Unit price, non-negative
        quantity: Units in stock, non-negative
    """
    
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)
    
    sku: str = Field(..., description="Stock keeping unit")
    price: Decimal = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    quantity: int = Field(..., ge=0, description="Units in stock")


class PayloadEncodeError(ValueError):
    """Raised when a ProductRef cannot be represented as a payload."""
    
    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__(f"SKU {sku!r} contains the payload delimiter {DELIMITER!r}")


class DecodeError(str, Enum):
    """Reasons a scanned text is not a structured payload."""
    
    WRONG_FIELD_COUNT = "wrong_field_count"
    INVALID_PRICE = "invalid_price"
    INVALID_QUANTITY = "invalid_quantity"


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decode(): exactly one of ref / error is set."""
    
    ref: Optional[ProductRef] = None
    error: Optional[DecodeError] = None
    
    @property
    def ok(self) -> bool:
        return self.ref is not None
    
    @classmethod
    def success(cls, ref: ProductRef) -> "DecodeResult":
        return cls(ref=ref)
    
    @classmethod
    def failure(cls, error: DecodeError) -> "DecodeResult":
        return cls(error=error)


def format_price(price: Decimal) -> str:
    """Render a price as a plain decimal string (no exponent, no separators)."""
    # abs() folds Decimal("-0") into "0"
    return format(abs(price), "f")


def encode(ref: ProductRef) -> str:
    """
    Encode a ProductRef into barcode text.
    
    Args:
        ref: Product identity and stock values
        
    Returns:
        Payload string "{sku}|{price}|{quantity}"
        
    Raises:
        PayloadEncodeError: If the SKU contains the delimiter
    """
    if DELIMITER in ref.sku:
        raise PayloadEncodeError(ref.sku)
    
    return DELIMITER.join([ref.sku, format_price(ref.price), str(ref.quantity)])


def decode(text: str) -> DecodeResult:
    """
    Parse barcode text back into a ProductRef.
    
    Never raises: scanned text is untrusted, so every malformed input maps
    to a DecodeError.
    
    Args:
        text: Normalized scan text
        
    Returns:
        DecodeResult carrying either the ProductRef or the failure reason
    """
    if not isinstance(text, str):
        return DecodeResult.failure(DecodeError.WRONG_FIELD_COUNT)
    
    fields = [field.strip() for field in text.split(DELIMITER)]
    if len(fields) != 3:
        return DecodeResult.failure(DecodeError.WRONG_FIELD_COUNT)
    
    sku, raw_price, raw_quantity = fields
    
    if not _PRICE_PATTERN.fullmatch(raw_price):
        return DecodeResult.failure(DecodeError.INVALID_PRICE)
    
    if not _QUANTITY_PATTERN.fullmatch(raw_quantity):
        return DecodeResult.failure(DecodeError.INVALID_QUANTITY)
    
    try:
        quantity = int(raw_quantity)
    except ValueError:
        # Digit strings past the interpreter's int conversion limit
        return DecodeResult.failure(DecodeError.INVALID_QUANTITY)
    
    return DecodeResult.success(
        ProductRef(sku=sku, price=Decimal(raw_price), quantity=quantity)
    )
