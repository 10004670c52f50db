"""
==============================================================================
Labels Package - Barcode Generation
==============================================================================

Classes:
--------
- BarcodeGenerator: Code128 PNG rendering of encoded payloads
- GeneratedBarcode: Rendered image and payload

==============================================================================
"""

from .generator import PNG_MIME_TYPE, BarcodeGenerator, GeneratedBarcode, barcode_filename

__all__ = ["PNG_MIME_TYPE", "BarcodeGenerator", "GeneratedBarcode", "barcode_filename"]
