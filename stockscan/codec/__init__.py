"""
==============================================================================
Codec Package - Barcode Payload Contract
==============================================================================

Textual encoding shared by the barcode generator and the scan resolver.

Classes:
--------
- ProductRef: The (sku, price, quantity) triple embedded in a barcode
- DecodeError: Enumerated decode failures
- DecodeResult: Typed result of a decode attempt

==============================================================================
"""

from .payload import (
    DELIMITER,
    DecodeError,
    DecodeResult,
    PayloadEncodeError,
    ProductRef,
    decode,
    encode,
)

__all__ = [
    "DELIMITER",
    "DecodeError",
    "DecodeResult",
    "PayloadEncodeError",
    "ProductRef",
    "decode",
    "encode",
]
