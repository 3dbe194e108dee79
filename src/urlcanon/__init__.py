"""URL canonicalisation for web archive deduplication, indexing and lookup."""

from urlcanon.codec.canonicalizer import (
    URLCanonicalizer,
    canonicalise_url,
    fix_url_errors,
    resolve_relative,
)
from urlcanon.core.config import Settings, load_settings
from urlcanon.core.exceptions import ConfigError, InvalidReference, UrlCanonError

__all__ = [
    "URLCanonicalizer",
    "canonicalise_url",
    "fix_url_errors",
    "resolve_relative",
    "Settings",
    "load_settings",
    "ConfigError",
    "InvalidReference",
    "UrlCanonError",
]
