"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management for the barcode identity pipeline using
Pydantic Settings.

This module implements the Singleton pattern to ensure a single global
configuration instance throughout the application lifecycle.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Catalog source selection (local JSON file or remote HTTP catalog)
- Scan session display windows (success / failure / result clear)

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        catalog_source: Where product snapshots come from ("file" or "http")
        products_file: Path to product catalog JSON (file source)
        catalog_base_url: Base URL of the remote catalog (http source)
        catalog_products_path: Remote path returning all products
        catalog_product_path: Remote path template for a single product
        catalog_timeout_seconds: Remote catalog request timeout
        barcode_directory: Directory for stored barcode PNG files
        barcode_module_height: Code128 bar height in millimetres
        barcode_quiet_zone: Blank margin on each side of the symbol
        success_display_seconds: How long a resolved product stays on screen
        result_clear_delay_seconds: Extra delay before result data is cleared
        failure_display_seconds: How long a failure message stays on screen
        cors_origins: Allowed CORS origins (JSON array string)
    
    Example:
        >>> settings = Settings()
        >>> print(settings.app_name)
        'StockScan Barcode API'
        >>> print(settings.uses_remote_catalog)
        False
    """
    
    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        # Load from .env file if present
        env_file=".env",
        env_file_encoding="utf-8",
        # Environment variables are case-insensitive
        case_sensitive=False,
        # Ignore extra environment variables
        extra="ignore",
        # Validate default values
        validate_default=True,
    )
    
    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="StockScan Barcode API",
        description="Display name for the application"
    )
    
    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )
    
    debug: bool = Field(
        default=True,
        description="Enable debug mode for verbose logging"
    )
    
    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )
    
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port number"
    )
    
    # =========================================================================
    # CATALOG SETTINGS
    # =========================================================================
    catalog_source: str = Field(
        default="file",
        description="Catalog collaborator: file or http"
    )
    
    products_file: str = Field(
        default="data/products.json",
        description="Path to product catalog JSON"
    )
    
    catalog_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the remote catalog service"
    )
    
    catalog_products_path: str = Field(
        default="/api/products/get-all",
        description="Remote path returning every product"
    )
    
    catalog_product_path: str = Field(
        default="/api/products/{product_id}",
        description="Remote path template returning one product"
    )
    
    catalog_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Remote catalog request timeout in seconds"
    )
    
    # =========================================================================
    # BARCODE GENERATION SETTINGS
    # =========================================================================
    barcode_directory: str = Field(
        default="storage/barcodes",
        description="Directory for generated barcode images"
    )
    
    barcode_module_height: float = Field(
        default=15.0,
        gt=0,
        le=100,
        description="Bar height in millimetres"
    )
    
    barcode_quiet_zone: float = Field(
        default=2.0,
        ge=0,
        le=20,
        description="Blank space on the left/right of the symbol"
    )
    
    # =========================================================================
    # SCAN SESSION SETTINGS
    # =========================================================================
    success_display_seconds: float = Field(
        default=1.5,
        gt=0,
        le=30,
        description="Display window for a resolved product"
    )
    
    result_clear_delay_seconds: float = Field(
        default=0.5,
        ge=0,
        le=30,
        description="Delay after the success window before result data is cleared"
    )
    
    failure_display_seconds: float = Field(
        default=2.0,
        gt=0,
        le=30,
        description="Display window for a failure message"
    )
    
    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )
    
    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.
        
        Args:
            value: Raw environment value
            
        Returns:
            Lowercase normalized environment name
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()
        
        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"
        
        return normalized
    
    @field_validator("catalog_source")
    @classmethod
    def validate_catalog_source(cls, value: str) -> str:
        """
        Validate the catalog collaborator selection.
        
        Raises:
            ValueError: If the source is not recognized
        """
        normalized = value.lower().strip()
        
        if normalized not in {"file", "http"}:
            raise ValueError(
                f"Unsupported catalog source: {value}. Supported: file, http"
            )
        
        return normalized
    
    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def uses_remote_catalog(self) -> bool:
        """Check if product snapshots are fetched over HTTP."""
        return self.catalog_source == "http"
    
    @property
    def products_path(self) -> Path:
        """Get products file as Path object."""
        return Path(self.products_file)
    
    @property
    def barcode_path(self) -> Path:
        """
        Get barcode directory as Path object.
        
        Creates the directory if it doesn't exist.
        """
        path = Path(self.barcode_directory)
        path.mkdir(parents=True, exist_ok=True)
        return path
    
    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.
        
        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]
    
    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"catalog_source={self.catalog_source!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).
    
    Uses lru_cache to ensure only one Settings instance is created
    throughout the application lifecycle.
    
    Returns:
        Global Settings instance
    """
    settings = Settings()
    
    # Log configuration summary (only in debug mode)
    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")
    
    return settings
