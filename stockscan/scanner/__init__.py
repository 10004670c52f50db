"""
==============================================================================
Scanner Package - Scan Text to Catalog Product
==============================================================================

Consumer side of the barcode pipeline.

Modules:
--------
- normalizer: Clean raw decoder output
- resolver: Decode payload, then exact / fuzzy SKU matching
- optical: OpenCV + pyzbar frame decoding into scan events

==============================================================================
"""

from .normalizer import normalize
from .optical import ImageDecodeError, OpticalDecoder, ScanEvent
from .resolver import (
    MatchKind,
    ProductResolver,
    Resolution,
    ResolutionError,
    ResolutionStatus,
    SkuMatch,
    match_sku,
    resolve_scan,
)

__all__ = [
    "normalize",
    "ImageDecodeError",
    "OpticalDecoder",
    "ScanEvent",
    "MatchKind",
    "ProductResolver",
    "Resolution",
    "ResolutionError",
    "ResolutionStatus",
    "SkuMatch",
    "match_sku",
    "resolve_scan",
]
