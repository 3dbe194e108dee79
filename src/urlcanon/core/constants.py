"""Constants used throughout urlcanon.

This module contains the fixed escape classification sets, the UTF-8 lead
byte table and static patterns shared by the codec stages.
"""

import re
from enum import Enum


# ============================================================================
# Escape Classification
# ============================================================================

SPACE = 0x20
PERCENT = 0x25
PLUS = 0x2B
QUESTION = 0x3F
HASH = 0x23

# Always escaped, whether they arrive literal or escaped
MUST_ESCAPE = frozenset({SPACE, PERCENT})

# Left escaped if already escaped
KEEP_ESCAPED = frozenset({HASH})

# C0 controls and DEL never appear raw in output
CONTROL_BYTES = frozenset(range(0x20)) | {0x7F}

HEX_DIGITS = b"0123456789abcdef"

HIGH_BIT = 0b10000000


# ============================================================================
# UTF-8 Byte Classes
# ============================================================================

class ByteClass(Enum):
    """Role of a single byte at the start of a UTF-8 sequence."""
    ASCII = "ascii"
    CONTINUATION_STRAY = "continuation_stray"
    LEAD2 = "lead2"
    LEAD3 = "lead3"
    LEAD4 = "lead4"
    INVALID = "invalid"


# (mask, expected bits, class), checked in order
BYTE_CLASS_TABLE = (
    (0b10000000, 0b00000000, ByteClass.ASCII),
    (0b11000000, 0b10000000, ByteClass.CONTINUATION_STRAY),
    (0b11100000, 0b11000000, ByteClass.LEAD2),
    (0b11110000, 0b11100000, ByteClass.LEAD3),
    (0b11111000, 0b11110000, ByteClass.LEAD4),
)

SEQUENCE_LENGTHS = {
    ByteClass.LEAD2: 2,
    ByteClass.LEAD3: 3,
    ByteClass.LEAD4: 4,
}

CONTINUATION_MASK = 0b11000000
CONTINUATION_BITS = 0b10000000


# ============================================================================
# URL Structure
# ============================================================================

# scheme://host with nothing after the authority
DOMAIN_ONLY = re.compile(r"[a-z][a-z0-9+.\-]*://[^/?#]+", re.IGNORECASE)

HAS_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}

# Query parameter names treated as session identifiers
SESSION_PARAMS = frozenset({
    "jsessionid",
    "phpsessid",
    "sid",
    "cfid",
    "cftoken",
})

SESSION_PARAM_PREFIXES = ("aspsessionid",)
