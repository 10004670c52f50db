"""
==============================================================================
Optical Decoder Module
==============================================================================

Turns camera frames and uploaded images into scan events with OpenCV and
pyzbar.

The decoder only reports what the symbol says. Normalization and catalog
matching happen downstream, so every decoded symbol is emitted as-is.

==============================================================================
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import List

import cv2
import numpy as np


# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanEvent:
    """One decoded symbol as delivered by the optical scanner."""
    
    raw_text: str
    symbology: str = ""


class ImageDecodeError(ValueError):
    """Uploaded data is not a readable image."""


class OpticalDecoder:
    """
    Barcode decoder for frames and images.
    
    Example:
        >>> decoder = OpticalDecoder()
        >>> events = decoder.decode_frame(frame)
        >>> events[0].raw_text
        'SR1001|2500|50'
    """
    
    def decode_frame(self, frame: np.ndarray) -> List[ScanEvent]:
        """
        Decode every symbol visible in a frame.
        
        Args:
            frame: OpenCV image (numpy array)
            
        Returns:
            List of scan events, empty when nothing was decoded
        """
        if frame is None or frame.size == 0:
            return []
        
        # zbar is a system library; load it on first use
        from pyzbar.pyzbar import decode
        
        events = []
        for symbol in decode(frame):
            raw_text = symbol.data.decode("latin-1")
            events.append(ScanEvent(raw_text=raw_text, symbology=symbol.type))
            logger.debug(f"Decoded {symbol.type}: {raw_text!r}")
        
        return events
    
    def decode_image_bytes(self, data: bytes) -> List[ScanEvent]:
        """
        Decode symbols from encoded image bytes (PNG, JPEG, ...).
        
        Raises:
            ImageDecodeError: If the bytes are not an image
        """
        buffer = np.frombuffer(data, np.uint8)
        frame = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None
        
        if frame is None:
            raise ImageDecodeError("Could not decode image data")
        
        return self.decode_frame(frame)
    
    def decode_base64(self, encoded: str) -> List[ScanEvent]:
        """
        Decode symbols from a base64 image (optionally a data URI).
        
        Raises:
            ImageDecodeError: If the text is not base64 image data
        """
        if encoded.startswith("data:") and "," in encoded:
            encoded = encoded.split(",", 1)[1]
        
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageDecodeError(f"Invalid base64 image: {e}") from e
        
        return self.decode_image_bytes(data)
