"""
==============================================================================
Scan Normalizer Module
==============================================================================

Cleans raw decoder output before payload parsing or SKU matching.

Optical decodes pick up surrounding whitespace, stray spacing from
symbol misreads and embedded control characters. Normalization keeps
only printable ASCII with every whitespace character removed.

==============================================================================
"""

from typing import Union

PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E


def normalize(raw: Union[str, bytes]) -> str:
    """
    Normalize raw scan text.
    
    Steps:
        1. Trim leading/trailing whitespace
        2. Remove all internal whitespace
        3. Drop characters outside printable ASCII (0x20-0x7E)
    
    Total and idempotent: normalize(normalize(x)) == normalize(x).
    
    Args:
        raw: Decoder output; bytes are read as latin-1
        
    Returns:
        Normalized text (possibly empty)
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("latin-1")
    
    text = "".join(raw.strip().split())
    return "".join(ch for ch in text if PRINTABLE_MIN <= ord(ch) <= PRINTABLE_MAX)
