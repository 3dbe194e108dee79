"""UTF-8 aware re-escaping.

Second pass of escape normalisation. Walks the buffer produced by
:func:`urlcanon.codec.escapes.repair_escapes` and decides per byte (or per
escape) whether to emit it raw, unescaped or freshly escaped. All escapes
written here use lowercase hex digits.
"""

import logging
from typing import Optional

from urlcanon.core.constants import (
    BYTE_CLASS_TABLE,
    CONTROL_BYTES,
    CONTINUATION_BITS,
    CONTINUATION_MASK,
    HEX_DIGITS,
    HIGH_BIT,
    KEEP_ESCAPED,
    MUST_ESCAPE,
    PERCENT,
    PLUS,
    QUESTION,
    SEQUENCE_LENGTHS,
    SPACE,
    ByteClass,
)
from urlcanon.codec.escapes import is_hex

logger = logging.getLogger(__name__)


def classify_byte(byte: int) -> ByteClass:
    """Classify a byte by the role it can play at the start of a sequence."""
    for mask, bits, byte_class in BYTE_CLASS_TABLE:
        if byte & mask == bits:
            return byte_class
    return ByteClass.INVALID


def valid_sequence_length(data: bytes, start: int) -> int:
    """Length of the multi-byte UTF-8 sequence starting at ``start``.
    
    Args:
        data: Byte buffer
        start: Index of the lead byte
        
    Returns:
        2, 3 or 4 for a complete, decodable sequence, 0 otherwise
    """
    length = SEQUENCE_LENGTHS.get(classify_byte(data[start]), 0)
    if not length:
        return 0
    
    sequence = data[start:start + length]
    if len(sequence) < length:
        return 0
    if any(b & CONTINUATION_MASK != CONTINUATION_BITS for b in sequence[1:]):
        return 0
    
    # Overlong forms and surrogates have the right shape but are not UTF-8
    try:
        sequence.decode("utf-8")
    except UnicodeDecodeError:
        return 0
    
    return length


def hex_escape(byte: int, out: bytearray) -> None:
    out.append(PERCENT)
    out.append(HEX_DIGITS[byte >> 4])
    out.append(HEX_DIGITS[byte & 0xF])


def _must_escape(value: int) -> bool:
    return value in MUST_ESCAPE or value in CONTROL_BYTES


def _escaped_value(data: bytes, i: int) -> Optional[int]:
    if i + 2 < len(data) and is_hex(data[i + 1]) and is_hex(data[i + 2]):
        return int(data[i + 1:i + 3], 16)
    return None


def escape_utf8(data: bytes, *, escape_high_order: bool, normalise_low_order: bool) -> str:
    """Produce the final URL string from a repaired byte buffer.
    
    Control characters and DEL are always escaped. Once the first ``?``
    (literal or escaped) has been seen, spaces are written as ``+``. Before
    that they are escaped as ``%20``.
    
    Args:
        data: Byte buffer from escape repair
        escape_high_order: Escape every byte of multi-byte characters instead
            of writing them raw
        normalise_low_order: Unescape ASCII escapes that do not need escaping
        
    Returns:
        Canonical URL string
    """
    out = bytearray()
    param_section = False
    length = len(data)
    
    i = 0
    while i < length:
        byte = data[i]
        
        if byte == PERCENT:
            value = _escaped_value(data, i)
            if value is None:
                hex_escape(byte, out)
                i += 1
                continue
            
            param_section = param_section or value == QUESTION
            if param_section and value == SPACE:
                out.append(PLUS)
            elif (_must_escape(value) or value in KEEP_ESCAPED
                  or not normalise_low_order or value & HIGH_BIT):
                hex_escape(value, out)
            else:
                out.append(value)
            i += 3
            continue
        
        byte_class = classify_byte(byte)
        
        if byte_class is ByteClass.ASCII:
            param_section = param_section or byte == QUESTION
            if param_section and byte == SPACE:
                out.append(PLUS)
            elif _must_escape(byte):
                hex_escape(byte, out)
            else:
                out.append(byte)
            i += 1
        
        elif byte_class is ByteClass.CONTINUATION_STRAY:
            hex_escape(byte, out)
            i += 1
        
        elif byte_class is ByteClass.INVALID:
            logger.debug(
                f"Unexpected byte 0b{byte:08b} where a UTF-8 lead byte was "
                f"expected, writing escape for byte {byte}"
            )
            hex_escape(byte, out)
            i += 1
        
        else:
            sequence_length = valid_sequence_length(data, i)
            if not sequence_length:
                hex_escape(byte, out)
                i += 1
            elif escape_high_order:
                for b in data[i:i + sequence_length]:
                    hex_escape(b, out)
                i += sequence_length
            else:
                out += data[i:i + sequence_length]
                i += sequence_length
    
    return out.decode("utf-8")
