"""
==============================================================================
Core Package
==============================================================================

Core infrastructure for the application.

This package provides:
- Custom exception handling with consistent error responses
- FastAPI dependencies wiring settings into pipeline components

Modules:
--------
- exceptions: AppException class and error factory functions
- dependencies: FastAPI dependency injection functions

Usage:
------
    from stockscan.core import exceptions
    raise exceptions.product_not_found("SR1001")

==============================================================================
"""

from .exceptions import (
    AppException,
    register_exception_handlers,
)
from .dependencies import (
    get_barcode_generator,
    get_catalog_client,
    get_optical_decoder,
    get_product_catalog,
    get_product_resolver,
    get_session_timings,
)

__all__ = [
    # Exceptions
    "AppException",
    "register_exception_handlers",
    # Dependencies
    "get_barcode_generator",
    "get_catalog_client",
    "get_optical_decoder",
    "get_product_catalog",
    "get_product_resolver",
    "get_session_timings",
]
