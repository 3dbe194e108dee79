"""Percent-escape repair.

First pass of escape normalisation: turns a URL string into a byte buffer in
which every ``%`` starts a valid ASCII escape and every escaped high-order
byte has been replaced by the raw byte, ready for UTF-8 aware re-escaping.
"""

from urlcanon.core.constants import HIGH_BIT, PERCENT

_HEX_BYTES = frozenset(b"0123456789abcdefABCDEF")

_ESCAPED_PERCENT = b"%25"


def is_hex(byte: int) -> bool:
    return byte in _HEX_BYTES


def repair_escapes(url: str) -> bytes:
    """Repair faulty escapes and unescape high-order UTF-8 escapes.
    
    ``%`` signs that do not start a two digit hex escape are escaped
    themselves, so ``12% proof`` becomes ``12%25 proof``. Valid ASCII escapes
    are copied as-is, keeping the casing of their hex digits. Escapes of bytes
    with the high bit set are written as the raw byte.
    
    Args:
        url: URL string
        
    Returns:
        Intermediate byte buffer
    """
    data = url.encode("utf-8", errors="surrogatepass")
    length = len(data)
    buffer = bytearray()
    
    i = 0
    while i < length:
        byte = data[i]
        if byte != PERCENT:
            buffer.append(byte)
            i += 1
        elif i + 2 < length and is_hex(data[i + 1]) and is_hex(data[i + 2]):
            value = int(data[i + 1:i + 3], 16)
            if value & HIGH_BIT:
                buffer.append(value)
            else:
                buffer += data[i:i + 3]
            i += 3
        else:
            buffer += _ESCAPED_PERCENT
            i += 1
    
    return bytes(buffer)
