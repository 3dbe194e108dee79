"""URL canonicalisation for web archive lookups.

Many syntactically different URLs must map to one key when indexing and
looking up archived resources. :class:`URLCanonicalizer` runs the full
pipeline:

1. Structural canonicalisation (:class:`BasicCanonicalizer`)
2. ``https://`` to ``http://``
3. Trailing slash removal, keeping the slash of domain-only URLs
4. Escape repair (:func:`repair_escapes`)
5. UTF-8 aware re-escaping (:func:`escape_utf8`)
"""

from typing import Callable, Optional
from urllib.parse import urljoin, urlsplit

from urlcanon.core.config import Settings
from urlcanon.core.constants import DOMAIN_ONLY
from urlcanon.core.exceptions import InvalidReference
from urlcanon.codec.basic import BasicCanonicalizer
from urlcanon.codec.escapes import repair_escapes
from urlcanon.codec.utf8 import escape_utf8


def normalize_protocol(url: str) -> str:
    """Rewrite a leading https:// to http://."""
    if url.startswith("https://"):
        return "http://" + url[len("https://"):]
    return url


def apply_trailing_slash_policy(url: str) -> str:
    """Strip trailing slashes, keeping exactly one for domain-only URLs.
    
    Args:
        url: Absolute URL
        
    Returns:
        ``http://example.com/foo/`` as ``http://example.com/foo`` and
        ``http://example.com//`` as ``http://example.com/``
    """
    url = url.rstrip("/")
    if DOMAIN_ONLY.fullmatch(url):
        url += "/"
    return url


def merge_reference(base: str, relative: str) -> str:
    """Resolve a relative reference against an absolute base URL.
    
    Raises:
        ValueError: If base is not an absolute URL or either part cannot
            be parsed
    """
    parts = urlsplit(base)
    if not parts.scheme or not parts.netloc:
        raise ValueError("base is not an absolute URL")
    urlsplit(relative)
    return urljoin(base, relative)


class URLCanonicalizer:
    """Canonicalise URLs into lookup keys.
    
    The instance holds its settings, the structural canonicaliser and the
    reference merge function, so the pipeline can be exercised in isolation.
    """
    
    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        basic: Optional[BasicCanonicalizer] = None,
        resolver: Callable[[str, str], str] = merge_reference,
    ):
        """Initialize URLCanonicalizer.
        
        Args:
            settings: Settings instance (defaults enable normalisation)
            basic: Structural canonicaliser (creates default if None)
            resolver: Function merging a base URL and a relative reference
        """
        self.settings = settings or Settings()
        self.basic = basic or BasicCanonicalizer()
        self.resolver = resolver
    
    def canonicalise(
        self,
        url: Optional[str],
        allow_high_order: bool = True,
        create_unambiguous: bool = True,
    ) -> Optional[str]:
        """Canonicalise a URL.
        
        Args:
            url: URL to canonicalise. Empty or None is returned unchanged
            allow_high_order: Write multi-byte UTF-8 characters raw instead
                of escaped. Easier to read, although not strictly valid
            create_unambiguous: Unescape ASCII escapes that need no escaping,
                e.g. ``/%2A.html`` becomes ``/*.html``. If False, valid
                escapes are kept (with lowercase hex digits)
            
        Returns:
            Canonical URL
        """
        if not self.settings.normalise_urls or not url:
            return url
        if not isinstance(url, str):
            raise TypeError(f"URL must be a string, got {type(url).__name__}")
        
        url = self.basic.canonicalize(url)
        url = normalize_protocol(url)
        # Applied regardless of create_unambiguous
        url = apply_trailing_slash_policy(url)
        
        repaired = repair_escapes(url)
        return escape_utf8(
            repaired,
            escape_high_order=not allow_high_order,
            normalise_low_order=create_unambiguous,
        )
    
    def fix_errors(self, url: Optional[str]) -> Optional[str]:
        """Repair faulty escapes such as ``wine 12% proof``.
        
        High-order characters are escaped and existing valid escapes kept.
        """
        return self.canonicalise(url, allow_high_order=False, create_unambiguous=False)
    
    def resolve_relative(self, base: str, relative: str, normalise: bool = True) -> str:
        """Resolve a relative reference against a base URL.
        
        Args:
            base: Absolute base URL
            relative: Reference to resolve
            normalise: Canonicalise the result with the default settings
            
        Returns:
            Absolute URL
            
        Raises:
            InvalidReference: If base or relative cannot be parsed or merged
        """
        try:
            resolved = self.resolver(base, relative)
        except (ValueError, TypeError, AttributeError) as e:
            raise InvalidReference(base, relative, str(e)) from e
        
        return self.canonicalise(resolved) if normalise else resolved


_default = URLCanonicalizer()


def canonicalise_url(
    url: Optional[str],
    allow_high_order: bool = True,
    create_unambiguous: bool = True,
) -> Optional[str]:
    """Canonicalise with the default canonicaliser. Aggressive by default."""
    return _default.canonicalise(url, allow_high_order, create_unambiguous)


def fix_url_errors(url: Optional[str]) -> Optional[str]:
    return _default.fix_errors(url)


def resolve_relative(base: str, relative: str, normalise: bool = True) -> str:
    return _default.resolve_relative(base, relative, normalise)
