"""Fetch and parse OpenGraph metadata."""

import time
from typing import Any, Dict, Optional

import httpx
import structlog
from bs4 import BeautifulSoup

from .models import OpenGraphRecord

logger = structlog.get_logger(__name__).bind(service="opengraph")

DEFAULT_TIMEOUT = 15.0  # seconds
DEFAULT_USER_AGENT = "RichTextExtraction/1.0"
DEFAULT_MAX_REDIRECTS = 3

# og:<name> -> OpenGraphRecord field
OG_FIELDS = {
    "og:title": "title",
    "og:description": "description",
    "og:image": "image",
    "og:url": "url",
    "og:site_name": "site_name",
    "og:type": "type",
}


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = " ".join(value.split())
    return value or None


def extract_og_properties(soup: BeautifulSoup) -> Dict[str, str]:
    """
    Collect every ``<meta property="og:*" content="...">`` tag.

    The first occurrence of a property wins.

    Args:
        soup: Parsed HTML document

    Returns:
        Dictionary of og:* property -> content
    """
    properties: Dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = meta.get("property")
        value = _clean(meta.get("content"))
        if key and value and key.startswith("og:") and key not in properties:
            properties[key] = value
    return properties


def parse_opengraph(html: str, url: str) -> OpenGraphRecord:
    """
    Parse OpenGraph metadata from an HTML document.

    Fallbacks: title -> <title>, description -> <meta name="description">,
    url -> the requested URL.

    Args:
        html: HTML body
        url: URL the body was fetched from

    Returns:
        OpenGraphRecord with the parsed fields
    """
    soup = BeautifulSoup(html, "lxml")
    properties = extract_og_properties(soup)

    fields: Dict[str, Any] = {
        field: properties[prop] for prop, field in OG_FIELDS.items() if prop in properties
    }

    if "title" not in fields and soup.title is not None:
        title = _clean(soup.title.get_text())
        if title:
            fields["title"] = title

    if "description" not in fields:
        meta = soup.find("meta", attrs={"name": "description"})
        description = _clean(meta.get("content")) if meta else None
        if description:
            fields["description"] = description

    fields.setdefault("url", url)

    return OpenGraphRecord(properties=properties, **fields)


class OpenGraphFetcher:
    """Fetch a URL and return its OpenGraph metadata."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize fetcher.

        Args:
            timeout: Per-request timeout (seconds)
            user_agent: User-Agent header sent with every request
            max_redirects: Maximum redirects followed before giving up
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_redirects = max_redirects
        self.transport = transport

    @classmethod
    def from_config(
        cls, config: Dict[str, Any], transport: Optional[httpx.BaseTransport] = None
    ) -> "OpenGraphFetcher":
        """Build a fetcher from the ``opengraph`` section of the settings."""
        section = config.get("opengraph") or {}
        return cls(
            timeout=float(section.get("timeout", DEFAULT_TIMEOUT)),
            user_agent=section.get("user_agent") or DEFAULT_USER_AGENT,
            max_redirects=int(section.get("max_redirects", DEFAULT_MAX_REDIRECTS)),
            transport=transport,
        )

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
            },
            transport=self.transport,
        )

    def fetch(self, url: str) -> OpenGraphRecord:
        """
        Fetch a URL and parse its OpenGraph metadata.

        One request, no retries. Failures never raise: a non-success status
        or any exception during fetch or parse is returned in ``error``.

        Args:
            url: Page URL

        Returns:
            OpenGraphRecord, error-tagged on failure
        """
        start_time = time.time()
        logger.debug("opengraph_fetch_started", url=url)

        try:
            with self._client() as client:
                response = client.get(url)

            if not response.is_success:
                logger.warning(
                    "opengraph_fetch_http_error",
                    url=url,
                    status_code=response.status_code,
                )
                return OpenGraphRecord.failure(
                    url, f"HTTP {response.status_code} {response.reason_phrase}".strip()
                )

            record = parse_opengraph(response.text, url)

            logger.info(
                "opengraph_fetch_completed",
                url=url,
                title_found=record.title is not None,
                properties=len(record.properties),
                duration_ms=int((time.time() - start_time) * 1000),
            )
            return record

        except Exception as e:
            error_msg = str(e) or e.__class__.__name__
            logger.warning(
                "opengraph_fetch_failed",
                url=url,
                error=error_msg,
                error_type=e.__class__.__name__,
            )
            return OpenGraphRecord.failure(url, error_msg)
