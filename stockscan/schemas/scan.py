"""
==============================================================================
Scan Schemas Module
==============================================================================

Request schemas for one-shot scan resolution endpoints.

==============================================================================
"""

from pydantic import BaseModel, Field


class ScanRequest(BaseModel):
    """Raw decoder output to resolve."""
    
    raw_text: str = Field(..., max_length=4096, description="Raw scanned text")
    symbology: str = Field(default="", description="Symbology reported by the scanner")


class ImageScanRequest(BaseModel):
    """Image containing a barcode, base64 encoded (data URIs accepted)."""
    
    image: str = Field(..., min_length=1, description="Base64 image data")
