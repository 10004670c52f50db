"""
Application Exception Handling

Single AppException class for all HTTP-facing errors with FastAPI integration.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.
    
    Provides consistent error response format across the entire API.
    
    Usage:
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404)
        raise AppException("Invalid SKU", "INVALID_SKU", 400, {"sku": "A|B"})
    
    Error Codes:
        Catalog:
            - CATALOG_NOT_LOADED (500)
            - CATALOG_UNAVAILABLE (502)
            - PRODUCT_NOT_FOUND (404)
        
        Barcode:
            - INVALID_SKU (400)
            - INVALID_IMAGE (400)
            - NO_BARCODE_DETECTED (422)
        
        General:
            - VALIDATION_ERROR (422)
            - INTERNAL_ERROR (500)
    """
    
    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.
        
        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }
        
        if self.details:
            error_dict["error"]["details"] = self.details
        
        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.
    
    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.
    
    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def catalog_not_loaded() -> AppException:
    """Create catalog not loaded exception."""
    return AppException(
        "Product catalog not loaded",
        "CATALOG_NOT_LOADED",
        500
    )


def catalog_unavailable(reason: str) -> AppException:
    """Create catalog unavailable exception."""
    return AppException(
        "Product catalog is unavailable",
        "CATALOG_UNAVAILABLE",
        502,
        {"reason": reason}
    )


def product_not_found(key: Optional[str] = None) -> AppException:
    """Create product not found exception."""
    details = {"key": key} if key else {}
    return AppException("Product not found", "PRODUCT_NOT_FOUND", 404, details)


def invalid_sku(sku: str, reason: str) -> AppException:
    """Create invalid SKU exception."""
    return AppException(
        f"Invalid SKU: {reason}",
        "INVALID_SKU",
        400,
        {"sku": sku, "reason": reason}
    )


def invalid_image(reason: str) -> AppException:
    """Create invalid image exception."""
    return AppException(
        f"Invalid image: {reason}",
        "INVALID_IMAGE",
        400,
        {"reason": reason}
    )


def no_barcode_detected() -> AppException:
    """Create no barcode detected exception."""
    return AppException(
        "No barcode detected in image",
        "NO_BARCODE_DETECTED",
        422
    )


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, "INTERNAL_ERROR", 500)
