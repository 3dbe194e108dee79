"""URL canonicalisation codec.

This package provides the canonicalisation pipeline for URL lookup keys:
- URLCanonicalizer: Full pipeline with configurable settings
- BasicCanonicalizer: Structural clean-up of scheme, host, port and query
- repair_escapes: Fix faulty %-escapes and unescape high-order bytes
- escape_utf8: UTF-8 aware re-escaping into the final string
"""

from urlcanon.codec.basic import BasicCanonicalizer
from urlcanon.codec.canonicalizer import (
    URLCanonicalizer,
    canonicalise_url,
    fix_url_errors,
    resolve_relative,
)
from urlcanon.codec.escapes import repair_escapes
from urlcanon.codec.utf8 import classify_byte, escape_utf8

__all__ = [
    "URLCanonicalizer",
    "BasicCanonicalizer",
    "canonicalise_url",
    "fix_url_errors",
    "resolve_relative",
    "repair_escapes",
    "escape_utf8",
    "classify_byte",
]
