"""
==============================================================================
Product Resolver Module
==============================================================================

Maps normalized scan text to exactly one catalog product.

Algorithm:
----------
1. Structured decode of the payload ("sku|price|quantity").
   Payload price/quantity are informational; the catalog stays
   authoritative because it may have changed since printing.
2. SKU matching on the decoded SKU, or on the whole text when the
   payload does not decode:
   a. Exact: trimmed, case-insensitive equality
   b. Fuzzy: catalog SKU inside the candidate, or candidate inside the
      catalog SKU. First match in catalog order wins.
   c. Otherwise NOT_FOUND
3. Catalog fetch failures are reported as ERROR, distinct from NOT_FOUND.

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from stockscan.catalog import CatalogClient, CatalogFetchError, CatalogProduct
from stockscan.codec import DecodeError, ProductRef, decode


# Module logger
logger = logging.getLogger(__name__)


class ResolutionStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class MatchKind(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"


class ResolutionError(str, Enum):
    NETWORK_FAILURE = "network_failure"
    INTERNAL = "internal"


@dataclass(frozen=True)
class SkuMatch:
    product: CatalogProduct
    kind: MatchKind


@dataclass(frozen=True)
class Resolution:
    """
    Result of resolving one scan.
    
    Attributes:
        status: FOUND, NOT_FOUND or ERROR
        candidate: SKU string that was matched against the catalog
        product: Resolved catalog product (FOUND only)
        match: Exact or fuzzy (FOUND only)
        payload: Decoded payload, when the scan was a structured payload
        decode_error: Why structured decode failed, when it did
        error: Failure class (ERROR only)
        detail: Human-readable failure detail
    """
    
    status: ResolutionStatus
    candidate: str = ""
    product: Optional[CatalogProduct] = None
    match: Optional[MatchKind] = None
    payload: Optional[ProductRef] = None
    decode_error: Optional[DecodeError] = None
    error: Optional[ResolutionError] = None
    detail: Optional[str] = None
    
    @property
    def found(self) -> bool:
        return self.status == ResolutionStatus.FOUND
    
    @classmethod
    def failed(cls, error: ResolutionError, detail: str = "") -> "Resolution":
        return cls(status=ResolutionStatus.ERROR, error=error, detail=detail)
    
    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "candidate": self.candidate,
            "match": self.match.value if self.match else None,
            "product": self.product.to_response() if self.product else None,
            "payload": self.payload.model_dump(mode="json") if self.payload else None,
            "decode_error": self.decode_error.value if self.decode_error else None,
            "error": self.error.value if self.error else None,
            "detail": self.detail,
        }


def _key(sku: str) -> str:
    return sku.strip().upper()


def match_sku(candidate: str, products: Iterable[CatalogProduct]) -> Optional[SkuMatch]:
    """
    Find the catalog product for a candidate SKU.
    
    Args:
        candidate: SKU-like string from the scan
        products: Catalog snapshot in catalog order
        
    Returns:
        SkuMatch or None
    """
    wanted = _key(candidate)
    if not wanted:
        return None
    
    catalog: List[CatalogProduct] = list(products)
    
    exact = [product for product in catalog if _key(product.sku) == wanted]
    if exact:
        if len(exact) > 1:
            logger.warning(
                f"SKU {wanted} matches {len(exact)} catalog entries, "
                f"using first ({exact[0].id})"
            )
        return SkuMatch(exact[0], MatchKind.EXACT)
    
    for product in catalog:
        stored = _key(product.sku)
        if not stored:
            continue
        if stored in wanted or wanted in stored:
            logger.debug(f"Fuzzy match: {wanted} → {stored}")
            return SkuMatch(product, MatchKind.FUZZY)
    
    return None


def resolve_scan(normalized_text: str, products: Iterable[CatalogProduct]) -> Resolution:
    """
    Resolve normalized scan text against a catalog snapshot.
    
    Pure function of its inputs; never raises for malformed scans.
    """
    catalog = list(products)
    decoded = decode(normalized_text)
    
    if decoded.ok:
        candidate = decoded.ref.sku
    else:
        # Malformed payload: the text may still be a legible SKU
        candidate = normalized_text
        logger.debug(f"Payload decode failed ({decoded.error.value}), trying direct SKU match")
    
    found = match_sku(candidate, catalog)
    if found is None:
        return Resolution(
            status=ResolutionStatus.NOT_FOUND,
            candidate=candidate,
            payload=decoded.ref,
            decode_error=decoded.error,
        )
    
    return Resolution(
        status=ResolutionStatus.FOUND,
        candidate=candidate,
        product=found.product,
        match=found.kind,
        payload=decoded.ref,
        decode_error=decoded.error,
    )


class ProductResolver:
    """
    Resolver bound to a catalog collaborator.
    
    Fetches a fresh snapshot for every scan and delegates to resolve_scan().
    
    Example:
        >>> resolver = ProductResolver(LocalCatalogClient(catalog))
        >>> resolution = await resolver.resolve("SR1001|2500|50")
        >>> resolution.product.sku
        'SR1001'
    """
    
    def __init__(self, catalog_client: CatalogClient) -> None:
        self._client = catalog_client
    
    async def resolve(self, normalized_text: str) -> Resolution:
        try:
            products = await self._client.fetch_all_products()
        except CatalogFetchError as e:
            logger.warning(f"Catalog unavailable while resolving scan: {e}")
            return Resolution.failed(ResolutionError.NETWORK_FAILURE, str(e))
        
        resolution = resolve_scan(normalized_text, products)
        logger.info(
            f"Scan {normalized_text!r} → {resolution.status.value}"
            + (f" ({resolution.product.sku}, {resolution.match.value})" if resolution.found else "")
        )
        return resolution
