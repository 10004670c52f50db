"""
==============================================================================
Barcode Generation Endpoints
==============================================================================

Producer side of the barcode pipeline: encode (sku, price, quantity) and
render it as a Code128 PNG.

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from stockscan.codec import PayloadEncodeError
from stockscan.core import exceptions
from stockscan.core.dependencies import get_barcode_generator
from stockscan.labels import PNG_MIME_TYPE, BarcodeGenerator, GeneratedBarcode
from stockscan.schemas import (
    BarcodePreviewData,
    BarcodePreviewResponse,
    BarcodeRequest,
    StoredBarcodeData,
    StoredBarcodeResponse,
)


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/barcodes", tags=["Barcodes"])


class BarcodeController:
    """Controller for barcode generation."""
    
    def __init__(self, generator: BarcodeGenerator):
        self._generator = generator
    
    def render(self, request: BarcodeRequest) -> GeneratedBarcode:
        try:
            return self._generator.render(request.to_ref())
        except PayloadEncodeError as e:
            raise exceptions.invalid_sku(request.sku, str(e))
    
    def store(self, request: BarcodeRequest) -> StoredBarcodeData:
        image = self.render(request)
        
        try:
            path = self._generator.save(image)
        except (OSError, RuntimeError) as e:
            logger.error(f"❌ Failed to store barcode for {image.payload!r}: {e}")
            raise exceptions.internal_error("Could not store barcode image")
        
        return StoredBarcodeData(payload=image.payload, barcode_ref=str(path))


@router.post("/preview", response_model=BarcodePreviewResponse)
async def preview_barcode(
    request: BarcodeRequest,
    generator: BarcodeGenerator = Depends(get_barcode_generator)
):
    """Render a barcode and return it as a PNG data URI."""
    image = BarcodeController(generator).render(request)
    return BarcodePreviewResponse(
        data=BarcodePreviewData(payload=image.payload, barcode_preview=image.data_uri)
    )


@router.post("/image")
async def barcode_image(
    request: BarcodeRequest,
    generator: BarcodeGenerator = Depends(get_barcode_generator)
):
    """Render a barcode and return the PNG bytes."""
    image = BarcodeController(generator).render(request)
    return Response(
        content=image.png,
        media_type=PNG_MIME_TYPE,
        headers={"X-Barcode-Payload": image.payload}
    )


@router.post("/store", response_model=StoredBarcodeResponse)
async def store_barcode(
    request: BarcodeRequest,
    generator: BarcodeGenerator = Depends(get_barcode_generator)
):
    """Render a barcode and write it to the barcode directory."""
    data = BarcodeController(generator).store(request)
    return StoredBarcodeResponse(data=data)
