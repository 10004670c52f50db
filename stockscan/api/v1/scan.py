"""
==============================================================================
Scan Resolution Endpoints
==============================================================================

One-shot scan resolution for clients that do their own debouncing.
Interactive scanning surfaces should use the /ws/scan session instead.

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends

from stockscan.core import exceptions
from stockscan.core.dependencies import get_optical_decoder, get_product_resolver
from stockscan.scanner import (
    ImageDecodeError,
    OpticalDecoder,
    ProductResolver,
    normalize,
)
from stockscan.schemas import ImageScanRequest, ScanRequest, SuccessResponse


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["Scan"])


async def _resolve(resolver: ProductResolver, raw_text: str, symbology: str) -> SuccessResponse:
    normalized = normalize(raw_text)
    resolution = await resolver.resolve(normalized)
    
    return SuccessResponse(data={
        "raw_text": raw_text,
        "normalized_text": normalized,
        "symbology": symbology,
        "resolution": resolution.to_dict()
    })


@router.post("/resolve", response_model=SuccessResponse)
async def resolve_scan(
    request: ScanRequest,
    resolver: ProductResolver = Depends(get_product_resolver)
):
    """
    Resolve raw scanned text to a catalog product.
    
    NOT_FOUND and ERROR outcomes are part of the response body, not HTTP
    errors.
    """
    return await _resolve(resolver, request.raw_text, request.symbology)


@router.post("/image", response_model=SuccessResponse)
async def resolve_image(
    request: ImageScanRequest,
    decoder: OpticalDecoder = Depends(get_optical_decoder),
    resolver: ProductResolver = Depends(get_product_resolver)
):
    """Decode the first barcode in an image and resolve it."""
    try:
        events = decoder.decode_base64(request.image)
    except ImageDecodeError as e:
        raise exceptions.invalid_image(str(e))
    
    if not events:
        raise exceptions.no_barcode_detected()
    
    if len(events) > 1:
        logger.info(f"Image contains {len(events)} barcodes, resolving the first")
    
    event = events[0]
    return await _resolve(resolver, event.raw_text, event.symbology)
