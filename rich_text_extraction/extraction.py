"""Pattern-based extraction of entities from text."""

from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Pattern
from urllib.parse import urlparse

import structlog

from .checksums import ChecksumFn, get_checksum
from .patterns import (
    ATTACHMENT_EXTENSIONS,
    DATE_REGEX,
    EMAIL_REGEX,
    HASHTAG_REGEX,
    IMAGE_EXTENSIONS,
    INSTAGRAM_REGEX,
    LINK_TRAILING_PUNCTUATION,
    MARKDOWN_CODE_REGEX,
    MARKDOWN_LINK_REGEX,
    MARKDOWN_TABLE_REGEX,
    MENTION_REGEX,
    PHONE_REGEX,
    TWITTER_REGEX,
    URL_REGEX,
    get_identifier_spec,
)

logger = structlog.get_logger(__name__).bind(service="extraction")

DEFAULT_EXCERPT_LENGTH = 300

DEFAULT_CONTEXT_LENGTH = 50


def _dedupe_key(item: Any) -> Hashable:
    if isinstance(item, dict):
        return tuple(sorted(item.items()))
    if isinstance(item, list):
        return tuple(item)
    return item


def unique(items: Iterable[Any]) -> List[Any]:
    """
    Remove duplicates, keeping first-appearance order.

    Equality is exact and case-sensitive. Dicts compare by their items.
    """
    seen = set()
    result = []
    for item in items:
        key = _dedupe_key(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def extract_pattern(text: Any, pattern: Pattern[str]) -> List[Any]:
    """
    Scan text with a regex.

    Patterns with no group yield the whole match, one group yields that group,
    several groups yield a tuple of groups.

    Args:
        text: Text to scan
        pattern: Compiled regex

    Returns:
        Ordered, de-duplicated matches; [] for empty or non-string text
    """
    if not isinstance(text, str) or not text:
        return []

    matches = []
    for match in pattern.finditer(text):
        groups = match.groups()
        if not groups:
            value = match.group(0)
        elif len(groups) == 1:
            value = groups[0]
        else:
            value = groups
        if value:
            matches.append(value)
    return unique(matches)


def extract_with_checksum(
    text: Any, pattern: Pattern[str], checksum: Optional[ChecksumFn]
) -> List[str]:
    """
    Scan text and keep only candidates that pass a checksum.

    Args:
        text: Text to scan
        pattern: Structural pre-filter
        checksum: Validator applied to each candidate; None keeps all

    Returns:
        Checksum-valid matches in order of appearance
    """
    candidates = extract_pattern(text, pattern)
    if checksum is None:
        return candidates

    valid = []
    for candidate in candidates:
        if checksum(candidate):
            valid.append(candidate)
        else:
            logger.debug("checksum_rejected", candidate=candidate, checksum=checksum.__name__)
    return valid


def extract_identifier(text: Any, kind: str) -> List[str]:
    """
    Extract identifiers of a registered kind.

    Args:
        text: Text to scan
        kind: Identifier kind from IDENTIFIER_SPECS (e.g. "isbn")

    Returns:
        Matches that pass the kind's pattern and checksum; [] for unknown kinds
    """
    spec = get_identifier_spec(kind)
    if spec is None or spec.pattern is None:
        return []

    checksum = get_checksum(spec.checksum) if spec.checksum else None
    return extract_with_checksum(text, spec.pattern, checksum)


def identifier_extractor(kind: str) -> Callable[[Any], List[str]]:
    """Build a text -> matches function for an identifier kind."""

    def extract(text: Any) -> List[str]:
        return extract_identifier(text, kind)

    extract.__name__ = f"extract_{kind}"
    return extract


# === Links and contact details ===


def _trim_link(url: str) -> str:
    # Drop sentence punctuation and a closing paren that was not opened in the URL
    while True:
        trimmed = LINK_TRAILING_PUNCTUATION.sub("", url)
        if trimmed.endswith(")") and trimmed.count(")") > trimmed.count("("):
            trimmed = trimmed[:-1]
        if trimmed == url:
            return url
        url = trimmed


def extract_links(text: Any) -> List[str]:
    """Extract http(s) URLs with trailing punctuation stripped."""
    urls = extract_pattern(text, URL_REGEX)
    return unique(url for url in (_trim_link(url) for url in urls) if url)


def extract_emails(text: Any) -> List[str]:
    return extract_pattern(text, EMAIL_REGEX)


def extract_phone_numbers(text: Any) -> List[str]:
    return extract_pattern(text, PHONE_REGEX)


def links_with_extension(text: Any, extensions: Iterable[str]) -> List[str]:
    """
    Extract links whose path ends in one of the given file extensions.

    The query string and fragment are ignored, so ``photo.png?w=200`` counts
    as a png. Matching is case-insensitive.

    Args:
        text: Text to scan
        extensions: Extensions without the leading dot

    Returns:
        Full link URLs in order of appearance
    """
    suffixes = tuple(f".{ext.lower()}" for ext in extensions)
    return [url for url in extract_links(text) if urlparse(url).path.lower().endswith(suffixes)]


def extract_image_urls(text: Any) -> List[str]:
    return links_with_extension(text, IMAGE_EXTENSIONS)


def extract_attachment_urls(text: Any) -> List[str]:
    return links_with_extension(text, ATTACHMENT_EXTENSIONS)


def extract_dates(text: Any) -> List[str]:
    return extract_pattern(text, DATE_REGEX)


# === Social ===


def extract_hashtags(text: Any) -> List[str]:
    """Extract #tags without the leading symbol."""
    return extract_pattern(text, HASHTAG_REGEX)


def extract_mentions(text: Any) -> List[str]:
    """Extract @mentions without the leading symbol."""
    return extract_pattern(text, MENTION_REGEX)


def extract_with_context(
    text: Any, pattern: Pattern[str], key: str, context_length: int = DEFAULT_CONTEXT_LENGTH
) -> List[Dict[str, str]]:
    """
    Extract single-group matches together with the text around them.

    Each distinct item is reported once, with the context of its first
    occurrence: up to ``context_length // 2`` characters on either side.

    Args:
        text: Text to scan
        pattern: Regex with one capturing group
        key: Dict key for the captured item (e.g. "tag")
        context_length: Total characters of surrounding text

    Returns:
        List of {key: item, "context": snippet} dicts
    """
    if not isinstance(text, str) or not text:
        return []

    half = max(context_length, 0) // 2
    found: Dict[str, str] = {}
    for match in pattern.finditer(text):
        item = match.group(1)
        if not item or item in found:
            continue
        start = max(match.start() - half, 0)
        end = min(match.end() + half, len(text))
        found[item] = text[start:end].strip()
    return [{key: item, "context": context} for item, context in found.items()]


def extract_tags_with_context(
    text: Any, context_length: int = DEFAULT_CONTEXT_LENGTH
) -> List[Dict[str, str]]:
    return extract_with_context(text, HASHTAG_REGEX, "tag", context_length)


def extract_mentions_with_context(
    text: Any, context_length: int = DEFAULT_CONTEXT_LENGTH
) -> List[Dict[str, str]]:
    return extract_with_context(text, MENTION_REGEX, "mention", context_length)


def extract_twitter_handles(text: Any) -> List[str]:
    return extract_pattern(text, TWITTER_REGEX)


def extract_instagram_handles(text: Any) -> List[str]:
    # A trailing period ends a sentence, not the handle
    return unique(h.rstrip(".") for h in extract_pattern(text, INSTAGRAM_REGEX) if h.rstrip("."))


# === Markdown ===


def extract_markdown_links(text: Any) -> List[Dict[str, str]]:
    """
    Extract markdown ``[text](url)`` links.

    Returns:
        List of {"text": ..., "url": ...} dicts
    """
    return [
        {"text": link_text, "url": url}
        for link_text, url in extract_pattern(text, MARKDOWN_LINK_REGEX)
    ]


def extract_markdown_code(text: Any) -> List[str]:
    return extract_pattern(text, MARKDOWN_CODE_REGEX)


def extract_markdown_tables(text: Any) -> List[str]:
    """Extract the header row of each pipe table."""
    return [row.strip() for row in extract_pattern(text, MARKDOWN_TABLE_REGEX)]


def create_excerpt(text: Any, length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """
    Truncate text to an excerpt.

    Args:
        text: Source text
        length: Maximum number of characters kept before the ellipsis

    Returns:
        The text itself when short enough, otherwise the truncated text with "…"
    """
    if not isinstance(text, str):
        return ""
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "…"
