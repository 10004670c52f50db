"""
==============================================================================
WebSocket Package
==============================================================================

Real-time WebSocket handlers for barcode scanning.

Handlers:
---------
- scanner: Interactive scan session (focus, scan, feedback, auto-reset)

==============================================================================
"""

from .scanner import router as scanner_router

__all__ = ["scanner_router"]
