"""
==============================================================================
Barcode Generator Module
==============================================================================

Producer side of the barcode pipeline.

Canonicalizes (sku, price, quantity) through the payload codec and renders
the payload as a Code128 PNG. The generator never builds payload text on
its own: the scanner decodes with the same codec, which is what makes a
printed label resolvable.

Code128 is used because it covers the full printable ASCII set, including
the "|" delimiter.

==============================================================================
"""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import barcode
from barcode.writer import ImageWriter

from stockscan.codec import ProductRef, encode


# Module logger
logger = logging.getLogger(__name__)

PNG_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class GeneratedBarcode:
    """Rendered barcode image and the payload it carries."""
    
    ref: ProductRef
    payload: str
    png: bytes
    
    @property
    def data_uri(self) -> str:
        """PNG as a data URI, for inline previews."""
        return f"data:{PNG_MIME_TYPE};base64,{base64.b64encode(self.png).decode('ascii')}"


def barcode_filename(sku: str) -> str:
    """
    File name for a stored barcode image.
    
    Keeps letters, digits, hyphens and underscores so the SKU is safe to
    use as a path component.
    """
    safe = "".join(c for c in sku if c.isalnum() or c in "-_")
    return f"{safe or 'barcode'}.png"


class BarcodeGenerator:
    """
    Code128 barcode renderer.
    
    Attributes:
        output_dir: Directory used by store()
    
    Example:
        >>> generator = BarcodeGenerator(Path("storage/barcodes"))
        >>> image = generator.render(ProductRef(sku="SR1001", price=2500, quantity=50))
        >>> image.payload
        'SR1001|2500|50'
    """
    
    def __init__(
        self,
        output_dir: Optional[Path] = None,
        module_height: float = 15.0,
        quiet_zone: float = 2.0,
    ) -> None:
        """
        Initialize the generator.
        
        Args:
            output_dir: Directory for stored PNG files
            module_height: Bar height in millimetres
            quiet_zone: Blank space on the left/right of the symbol
        """
        self._output_dir = output_dir
        self._writer_options = {
            "module_height": module_height,
            "quiet_zone": quiet_zone,
            # Human-readable text is rendered by the consuming UI
            "write_text": False,
        }
        self._code128 = barcode.get_barcode_class("code128")
    
    @property
    def output_dir(self) -> Optional[Path]:
        return self._output_dir
    
    def render(self, ref: ProductRef) -> GeneratedBarcode:
        """
        Render a ProductRef as a PNG barcode.
        
        Raises:
            PayloadEncodeError: If the SKU contains the payload delimiter
        """
        payload = encode(ref)
        
        buffer = io.BytesIO()
        self._code128(payload, writer=ImageWriter()).write(buffer, self._writer_options)
        
        logger.debug(f"Rendered barcode for {payload!r} ({buffer.tell()} bytes)")
        return GeneratedBarcode(ref=ref, payload=payload, png=buffer.getvalue())
    
    def store(self, ref: ProductRef) -> Path:
        """
        Render and write the barcode to the output directory.
        
        Returns:
            Path of the written PNG file
        """
        return self.save(self.render(ref))
    
    def save(self, image: GeneratedBarcode) -> Path:
        """Write an already rendered barcode to the output directory."""
        if self._output_dir is None:
            raise RuntimeError("BarcodeGenerator has no output directory")
        
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / barcode_filename(image.ref.sku)
        path.write_bytes(image.png)
        
        logger.info(f"✅ Stored barcode {path} for {image.payload!r}")
        return path
