"""RichTextExtraction - entity, identifier and OpenGraph extraction from text."""

from typing import Any, Dict, Optional

from .cache import CacheBackend, MemoryCache, OpenGraphService, build_cache_key
from .checksums import luhn_valid, valid_iban, valid_isbn, valid_isbn10, valid_isbn13, valid_issn, valid_vin
from .extractor import Extractor
from .models import CacheOptions, IdentifierSpec, OpenGraphRecord
from .opengraph import OpenGraphFetcher, parse_opengraph
from .patterns import IDENTIFIER_SPECS, validate_identifier
from .registry import ExtractorRegistry, build_default_registry, extract, get_default_registry

__version__ = "0.1.0"


def extract_opengraph(
    url: str,
    cache: Optional[CacheBackend] = None,
    cache_options: Optional[Dict[str, Any]] = None,
    service: Optional[OpenGraphService] = None,
) -> Dict[str, Any]:
    """
    Fetch OpenGraph data for a URL.

    Returns:
        Record dict; contains "error" when the fetch failed
    """
    service = service or OpenGraphService()
    return service.get_or_fetch(url, cache=cache, cache_options=cache_options).to_dict()


__all__ = [
    "CacheBackend",
    "CacheOptions",
    "Extractor",
    "ExtractorRegistry",
    "IDENTIFIER_SPECS",
    "IdentifierSpec",
    "MemoryCache",
    "OpenGraphFetcher",
    "OpenGraphRecord",
    "OpenGraphService",
    "build_cache_key",
    "build_default_registry",
    "extract",
    "extract_opengraph",
    "get_default_registry",
    "luhn_valid",
    "parse_opengraph",
    "valid_iban",
    "valid_isbn",
    "valid_isbn10",
    "valid_isbn13",
    "valid_issn",
    "valid_vin",
    "validate_identifier",
]
