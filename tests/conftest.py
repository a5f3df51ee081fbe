"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import httpx
import pytest

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich_text_extraction.cache import MemoryCache, OpenGraphService
from rich_text_extraction.opengraph import OpenGraphFetcher
from rich_text_extraction.registry import build_default_registry


SAMPLE_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>Fallback Title</title>
    <meta name="description" content="Fallback description">
    <meta property="og:title" content="Sample Article" />
    <meta property="og:description" content="An article for testing" />
    <meta property="og:image" content="https://example.com/cover.png" />
    <meta property="og:site_name" content="Example" />
    <meta property="og:type" content="article" />
    <meta property="og:locale" content="en_US" />
</head>
<body>
    <h1>Sample Article</h1>
</body>
</html>
"""


BARE_HTML = """
<html>
<head>
    <title>  Plain   Page </title>
    <meta name="description" content="Only a description">
</head>
<body><p>No OpenGraph here</p></body>
</html>
"""


@pytest.fixture
def sample_html():
    """HTML page with a full set of OpenGraph tags."""
    return SAMPLE_HTML


@pytest.fixture
def bare_html():
    """HTML page without OpenGraph tags."""
    return BARE_HTML


class RecordingHandler:
    """httpx.MockTransport handler that serves canned pages and counts requests."""

    def __init__(self, pages=None, status_code=200, error=None):
        self.pages = pages or {}
        self.status_code = status_code
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        body = self.pages.get(str(request.url), SAMPLE_HTML)
        return httpx.Response(
            self.status_code,
            text=body,
            headers={"Content-Type": "text/html; charset=utf-8"},
        )

    @property
    def calls(self) -> int:
        return len(self.requests)


class BrokenCache:
    """Cache backend whose every operation fails."""

    def get(self, key):
        raise ConnectionError("cache down")

    def set(self, key, value, ttl=None):
        raise ConnectionError("cache down")

    def delete(self, key):
        raise ConnectionError("cache down")


@pytest.fixture
def handler():
    """Handler serving SAMPLE_HTML for every URL."""
    return RecordingHandler()


@pytest.fixture
def fetcher(handler):
    """OpenGraphFetcher backed by the recording handler."""
    return OpenGraphFetcher(transport=httpx.MockTransport(handler))


@pytest.fixture
def service(fetcher):
    """OpenGraphService with no ambient application name."""
    return OpenGraphService(fetcher=fetcher)


@pytest.fixture
def memory_cache():
    return MemoryCache()


@pytest.fixture
def registry():
    """Fresh registry per test so registrations do not leak."""
    return build_default_registry()


@pytest.fixture(autouse=True)
def no_app_name(monkeypatch):
    """Keep cache keys independent of the test environment."""
    monkeypatch.delenv("APP_NAME", raising=False)
