"""
==============================================================================
Schemas Package
==============================================================================

Pydantic request/response schemas for the HTTP API.

==============================================================================
"""

from .common import SuccessResponse
from .barcode import (
    BarcodePreviewData,
    BarcodePreviewResponse,
    BarcodeRequest,
    StoredBarcodeData,
    StoredBarcodeResponse,
)
from .scan import ImageScanRequest, ScanRequest

__all__ = [
    "SuccessResponse",
    "BarcodePreviewData",
    "BarcodePreviewResponse",
    "BarcodeRequest",
    "StoredBarcodeData",
    "StoredBarcodeResponse",
    "ImageScanRequest",
    "ScanRequest",
]
