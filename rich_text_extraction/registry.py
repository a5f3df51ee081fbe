"""
Extraction dispatcher: maps a content kind to the function that extracts it.

Example:
    >>> from rich_text_extraction.registry import build_default_registry
    >>>
    >>> registry = build_default_registry()
    >>> registry.extract("Hello #python #rust", "hashtags")
    ['python', 'rust']
    >>>
    >>> # Custom kinds
    >>> registry.register("lower_tags", registry.get("hashtags"),
    ...                   postprocess=lambda tags: [t.lower() for t in tags])
    >>> registry.register("tagged_links", compose=["markdown_code", "links"])
"""

import re
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Pattern, Sequence, Union

import structlog

from . import extraction
from .extraction import extract_pattern, identifier_extractor, unique
from .models import ExtractionResult

logger = structlog.get_logger(__name__).bind(service="extraction")

ExtractorFn = Callable[[str], List[Any]]
PostprocessFn = Callable[[List[Any]], List[Any]]

ALL_KINDS = "all"

# Built-in kind -> extractor
DEFAULT_EXTRACTORS: Dict[str, ExtractorFn] = {
    "links": extraction.extract_links,
    "emails": extraction.extract_emails,
    "phones": extraction.extract_phone_numbers,
    "hashtags": extraction.extract_hashtags,
    "mentions": extraction.extract_mentions,
    "images": extraction.extract_image_urls,
    "attachments": extraction.extract_attachment_urls,
    "dates": extraction.extract_dates,
    "twitter_handles": extraction.extract_twitter_handles,
    "instagram_handles": extraction.extract_instagram_handles,
    "tags_with_context": extraction.extract_tags_with_context,
    "mentions_with_context": extraction.extract_mentions_with_context,
    "markdown_links": extraction.extract_markdown_links,
    "markdown_code": extraction.extract_markdown_code,
    "markdown_tables": extraction.extract_markdown_tables,
    "uuids": identifier_extractor("uuids"),
    "hex_colors": identifier_extractor("hex_colors"),
    "ips": identifier_extractor("ips"),
    "mac_address": identifier_extractor("mac_address"),
    "ean13": identifier_extractor("ean13"),
    "upca": identifier_extractor("upca"),
    "isbn": identifier_extractor("isbn"),
    "vin": identifier_extractor("vin"),
    "issn": identifier_extractor("issn"),
    "iban": identifier_extractor("iban"),
    "credit_cards": identifier_extractor("credit_cards"),
    "luhn": identifier_extractor("credit_cards"),
    "imei": identifier_extractor("imei"),
}


class ExtractorRegistry:
    """Registry of extractors keyed by content kind."""

    def __init__(self, extractors: Optional[Dict[str, ExtractorFn]] = None):
        self._extractors: Dict[str, ExtractorFn] = dict(extractors or {})

    def register(
        self,
        kind: str,
        func: Optional[ExtractorFn] = None,
        *,
        postprocess: Optional[PostprocessFn] = None,
        compose: Optional[Sequence[str]] = None,
    ) -> ExtractorFn:
        """
        Register an extractor for a kind, replacing any existing one.

        Args:
            kind: Content kind (e.g. "hashtags")
            func: Function text -> list of matches. When omitted with
                postprocess, the kind's current extractor is wrapped.
            postprocess: Transform applied to the raw list of matches
            compose: Existing kinds chained left to right; each step's
                matches, joined by newlines, become the next step's text

        Returns:
            The registered extractor

        Raises:
            ValueError: If no function can be resolved, or both func and
                compose are given
            KeyError: If compose names an unregistered kind
        """
        if compose and func is not None:
            raise ValueError(f"Pass either func or compose for kind '{kind}', not both")

        if compose:
            missing = [k for k in compose if k not in self._extractors]
            if missing:
                raise KeyError(f"Cannot compose unknown kinds: {', '.join(missing)}")
            steps = [self._extractors[k] for k in compose]
            func = self._compose(steps)
        elif func is None and postprocess is not None:
            func = self._extractors.get(kind)

        if func is None:
            raise ValueError(f"No extractor function given for kind '{kind}'")

        if postprocess is not None:
            func = self._postprocess(func, postprocess)

        self._extractors[kind] = func
        logger.debug(
            "extractor_registered",
            kind=kind,
            composed=list(compose) if compose else None,
            postprocess=postprocess is not None,
        )
        return func

    @staticmethod
    def _compose(steps: List[ExtractorFn]) -> ExtractorFn:
        def composed(text: str) -> List[Any]:
            result: List[Any] = []
            current = text
            for step in steps:
                result = step(current)
                current = "\n".join(str(item) for item in result)
            return result

        return composed

    @staticmethod
    def _postprocess(func: ExtractorFn, transform: PostprocessFn) -> ExtractorFn:
        def postprocessed(text: str) -> List[Any]:
            return list(transform(func(text)))

        return postprocessed

    def unregister(self, kind: str) -> bool:
        """Remove a kind. Returns True if it was registered."""
        return self._extractors.pop(kind, None) is not None

    def get(self, kind: str) -> Optional[ExtractorFn]:
        return self._extractors.get(kind)

    def has_kind(self, kind: str) -> bool:
        return kind in self._extractors

    def kinds(self) -> List[str]:
        """Registered kinds in registration order."""
        return list(self._extractors.keys())

    def __contains__(self, kind: object) -> bool:
        return kind in self._extractors

    def __len__(self) -> int:
        return len(self._extractors)

    def extract(self, text: Any, kind: Union[str, Pattern[str]] = ALL_KINDS) -> Any:
        """
        Extract one kind, or every kind when kind is "all".

        A compiled regex may be passed instead of a kind name for one-off
        scans. Never raises: unknown kinds and non-string text give [], and
        an extractor that fails is logged and treated as having found nothing.

        Args:
            text: Text to scan
            kind: Registered kind, "all", or a compiled regex

        Returns:
            List of matches, or a kind -> matches mapping for "all"
        """
        if isinstance(kind, re.Pattern):
            return extract_pattern(text, kind)

        if kind == ALL_KINDS:
            return self.extract_all(text)

        if not isinstance(text, str) or not isinstance(kind, str):
            return []

        extractor = self._extractors.get(kind)
        if extractor is None:
            logger.debug("unknown_extraction_kind", kind=kind)
            return []

        try:
            return unique(extractor(text))
        except Exception as e:
            logger.exception("extractor_failed", kind=kind, error=str(e))
            return []

    def extract_all(self, text: Any) -> ExtractionResult:
        """Run every registered extractor over the text."""
        return {kind: self.extract(text, kind) for kind in self.kinds()}


def build_default_registry() -> ExtractorRegistry:
    """Create a registry loaded with the built-in kinds."""
    return ExtractorRegistry(DEFAULT_EXTRACTORS)


@lru_cache(maxsize=1)
def get_default_registry() -> ExtractorRegistry:
    """
    Shared registry of built-in kinds.

    Callers that register their own kinds should build a registry with
    build_default_registry() and pass it explicitly.
    """
    return build_default_registry()


def extract(
    text: Any,
    kind: Union[str, Pattern[str]] = ALL_KINDS,
    registry: Optional[ExtractorRegistry] = None,
) -> Any:
    """
    Extract entities of a kind from text.

    Args:
        text: Text to scan
        kind: Registered kind, "all", or a compiled regex
        registry: Registry to use (defaults to the built-in kinds)

    Returns:
        List of matches, or a kind -> matches mapping for "all"
    """
    if registry is None:
        registry = get_default_registry()
    return registry.extract(text, kind)
