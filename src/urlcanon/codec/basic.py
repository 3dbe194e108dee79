"""Structural URL canonicalisation.

This module provides the structural clean-up that runs before escape
normalisation. It handles:
- Scheme defaulting and lowercasing
- Host unescaping and lowercasing, userinfo removal and ``www`` prefix stripping
- Default port removal
- Session identifier removal
- Fragment removal

Percent-escapes in path and query are never touched here.
"""

import logging
import re
from urllib.parse import unquote, urlsplit

from urlcanon.core.constants import (
    DEFAULT_PORTS,
    HAS_SCHEME,
    SESSION_PARAM_PREFIXES,
    SESSION_PARAMS,
)

logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\t\r\n]")
_WWW_PREFIX = re.compile(r"^www\d*\.")
_PATH_SESSION = re.compile(r";jsessionid=[^;/?]*", re.IGNORECASE)
_HOST_ESCAPE = re.compile(r"%([0-9a-fA-F]{2})")
_HOST_DELIMITERS = re.compile(r"[/?#@:\[\]%\s]")
_UNRESERVED = frozenset("-._~")


class BasicCanonicalizer:
    """Aggressive structural canonicaliser.
    
    Steps:
    1. Trim whitespace and drop embedded tabs and line breaks
    2. Default to http:// when no scheme is given
    3. Lowercase scheme and host, drop userinfo
    4. Remove default ports (80 for HTTP, 443 for HTTPS)
    5. Strip www/wwwN host prefixes
    6. Remove session identifiers from path and query
    7. Remove fragment and empty query
    """
    
    def __init__(self, *, strip_www: bool = True, strip_session_ids: bool = True):
        """Initialize BasicCanonicalizer.
        
        Args:
            strip_www: Whether to remove a leading www./wwwN. host label
            strip_session_ids: Whether to remove session id parameters
        """
        self.strip_www = strip_www
        self.strip_session_ids = strip_session_ids
    
    def canonicalize(self, url: str) -> str:
        """Canonicalize the structure of a URL.
        
        Args:
            url: URL to canonicalize
            
        Returns:
            Canonicalized URL, or the trimmed input if it cannot be split
        """
        url = _CONTROL_CHARS.sub("", url.strip())
        if not HAS_SCHEME.match(url):
            url = "http://" + url
        
        try:
            parts = urlsplit(url)
        except ValueError as e:
            logger.debug(f"Leaving unsplittable URL untouched: {url!r} ({e})")
            return url
        
        scheme = parts.scheme.lower()
        netloc = self._normalize_netloc(parts.netloc, scheme)
        path = self._normalize_path(parts.path, netloc)
        query = self._normalize_query(parts.query)
        
        result = f"{scheme}://{netloc}{path}"
        if query:
            result += "?" + query
        return result
    
    def _normalize_netloc(self, netloc: str, scheme: str) -> str:
        """Normalize network location (host:port).
        
        Args:
            netloc: Network location string
            scheme: URL scheme
            
        Returns:
            Normalized netloc
        """
        host = netloc.rpartition("@")[2]
        port = ""
        
        if host.startswith("["):
            end = host.find("]")
            if end != -1 and host[end + 1:].startswith(":"):
                host, port = host[:end + 1], host[end + 2:]
        elif ":" in host:
            host, port = host.rsplit(":", 1)
        
        host = _decode_host(host).lower()
        
        if port.isdigit() and int(port) == DEFAULT_PORTS.get(scheme):
            port = ""
        
        if self.strip_www:
            stripped = _WWW_PREFIX.sub("", host, count=1)
            # Keep www.com as-is
            if "." in stripped:
                host = stripped
        
        return f"{host}:{port}" if port else host
    
    def _normalize_path(self, path: str, netloc: str) -> str:
        if self.strip_session_ids:
            path = _PATH_SESSION.sub("", path)
        if not path and netloc:
            return "/"
        return path
    
    def _normalize_query(self, query: str) -> str:
        """Drop session parameters, keeping order and escaping of the rest."""
        if not query or not self.strip_session_ids:
            return query
        
        kept = []
        for param in query.split("&"):
            name = unquote(param.split("=", 1)[0]).lower()
            if name in SESSION_PARAMS or name.startswith(SESSION_PARAM_PREFIXES):
                continue
            kept.append(param)
        
        return "&".join(kept)


def _decode_host(host: str) -> str:
    """Unescape a host so it can be lowercased.
    
    Escapes that would decode to URL delimiters or whitespace stay escaped;
    in that case only letters, digits and ``-._~`` are unescaped.
    """
    if "%" not in host:
        return host
    
    decoded = unquote(host)
    if not _HOST_DELIMITERS.search(decoded):
        return decoded
    
    return _HOST_ESCAPE.sub(_decode_unreserved, host)


def _decode_unreserved(match: re.Match) -> str:
    char = chr(int(match.group(1), 16))
    if (char.isascii() and char.isalnum()) or char in _UNRESERVED:
        return char
    return match.group(0)
