"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- products: Catalog lookups
- barcodes: Barcode generation (producer side)
- scan: One-shot scan resolution (consumer side)

==============================================================================
"""

from . import health, products, barcodes, scan

__all__ = ["health", "products", "barcodes", "scan"]
