"""Object-oriented interface for extracting entities from one text value."""

from typing import Any, Dict, List, Optional

import structlog

from .cache import CacheBackend, CacheOptionsLike, OpenGraphService
from .extraction import (
    DEFAULT_CONTEXT_LENGTH,
    DEFAULT_EXCERPT_LENGTH,
    create_excerpt,
    extract_mentions_with_context,
    extract_tags_with_context,
)
from .models import ExtractionResult
from .patterns import EXTRACTABLE_IDENTIFIER_KINDS
from .registry import ExtractorRegistry, get_default_registry

logger = structlog.get_logger(__name__).bind(service="extraction")


class Extractor:
    """
    Extract links, tags, mentions and identifiers from a piece of text.

    Every accessor is a pure function of the stored text except
    ``link_objects(with_opengraph=True)``, which fetches OpenGraph data.

    Example:
        >>> extractor = Extractor("Read https://example.com #python @guido")
        >>> extractor.links
        ['https://example.com']
        >>> extractor.tags
        ['python']
    """

    def __init__(
        self,
        text: Any,
        registry: Optional[ExtractorRegistry] = None,
        opengraph: Optional[OpenGraphService] = None,
    ):
        """
        Args:
            text: Text to extract from; non-strings yield empty results
            registry: Extraction registry (built-in kinds when omitted)
            opengraph: OpenGraph service used by link_objects
        """
        self.text = text
        self.registry = registry if registry is not None else get_default_registry()
        self._opengraph = opengraph

    @property
    def opengraph(self) -> OpenGraphService:
        if self._opengraph is None:
            self._opengraph = OpenGraphService()
        return self._opengraph

    def extract(self, kind: str) -> List[Any]:
        """Extract a single registered kind from the text."""
        return self.registry.extract(self.text, kind)

    def extract_all(self) -> ExtractionResult:
        return self.registry.extract_all(self.text)

    @property
    def links(self) -> List[str]:
        return self.extract("links")

    @property
    def tags(self) -> List[str]:
        return self.extract("hashtags")

    @property
    def mentions(self) -> List[str]:
        return self.extract("mentions")

    @property
    def emails(self) -> List[str]:
        return self.extract("emails")

    @property
    def attachments(self) -> List[str]:
        return self.extract("attachments")

    @property
    def phone_numbers(self) -> List[str]:
        return self.extract("phones")

    @property
    def image_urls(self) -> List[str]:
        return self.extract("images")

    @property
    def markdown_links(self) -> List[Dict[str, str]]:
        return self.extract("markdown_links")

    @property
    def twitter_handles(self) -> List[str]:
        return self.extract("twitter_handles")

    @property
    def instagram_handles(self) -> List[str]:
        return self.extract("instagram_handles")

    @property
    def dates(self) -> List[str]:
        return self.extract("dates")

    def identifiers(self) -> ExtractionResult:
        """Every identifier kind with at least one match."""
        found = {}
        for kind in EXTRACTABLE_IDENTIFIER_KINDS:
            matches = self.extract(kind)
            if matches:
                found[kind] = matches
        return found

    def excerpt(self, length: int = DEFAULT_EXCERPT_LENGTH) -> str:
        return create_excerpt(self.text, length)

    def tags_with_context(
        self, context_length: int = DEFAULT_CONTEXT_LENGTH
    ) -> List[Dict[str, str]]:
        """Hashtags with the surrounding text, as {"tag", "context"} dicts."""
        return extract_tags_with_context(self.text, context_length)

    def mentions_with_context(
        self, context_length: int = DEFAULT_CONTEXT_LENGTH
    ) -> List[Dict[str, str]]:
        return extract_mentions_with_context(self.text, context_length)

    def link_objects(
        self,
        with_opengraph: bool = False,
        cache: Optional[CacheBackend] = None,
        cache_options: CacheOptionsLike = None,
    ) -> List[Dict[str, Any]]:
        """
        Describe each link, optionally with its OpenGraph data.

        Args:
            with_opengraph: Fetch OpenGraph data for every link
            cache: Cache backend for OpenGraph lookups
            cache_options: key_prefix and expires_in overrides

        Returns:
            [{"url": ...}] or [{"url": ..., "opengraph": {...}}]; a failed
            lookup keeps its "error" entry in the opengraph dict
        """
        links = self.links
        if not with_opengraph:
            return [{"url": url} for url in links]

        logger.debug("link_objects_fetching_opengraph", links=len(links))
        return [
            {
                "url": url,
                "opengraph": self.opengraph.get_or_fetch(
                    url, cache=cache, cache_options=cache_options
                ).to_dict(),
            }
            for url in links
        ]

    def opengraph_data_for_links(
        self,
        cache: Optional[CacheBackend] = None,
        cache_options: CacheOptionsLike = None,
    ) -> List[Dict[str, Any]]:
        """OpenGraph data for every link in the text."""
        return self.link_objects(with_opengraph=True, cache=cache, cache_options=cache_options)

    def __repr__(self) -> str:
        preview = create_excerpt(self.text, 40) if isinstance(self.text, str) else self.text
        return f"<Extractor {preview!r}>"
