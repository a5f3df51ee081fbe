"""Tests for per-kind extraction functions."""

import re

from rich_text_extraction.extraction import (
    create_excerpt,
    extract_attachment_urls,
    extract_dates,
    extract_emails,
    extract_hashtags,
    extract_identifier,
    extract_image_urls,
    extract_instagram_handles,
    extract_links,
    extract_markdown_code,
    extract_markdown_links,
    extract_markdown_tables,
    extract_mentions,
    extract_pattern,
    extract_phone_numbers,
    extract_mentions_with_context,
    extract_tags_with_context,
    extract_twitter_handles,
    extract_with_checksum,
    extract_with_context,
    identifier_extractor,
    unique,
)
from rich_text_extraction.checksums import valid_isbn
from rich_text_extraction.patterns import ISBN_REGEX


class TestUnique:
    """Test order-preserving de-duplication."""

    def test_keeps_first_appearance(self):
        """Test duplicates are dropped and order is kept."""
        assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_case_sensitive(self):
        """Test equality is exact."""
        assert unique(["Rails", "rails"]) == ["Rails", "rails"]

    def test_dicts(self):
        """Test dicts compare by their items."""
        items = [{"text": "a", "url": "u"}, {"url": "u", "text": "a"}, {"text": "b", "url": "u"}]
        assert unique(items) == [{"text": "a", "url": "u"}, {"text": "b", "url": "u"}]


class TestExtractPattern:
    """Test the generic regex scanner."""

    def test_whole_match_without_groups(self):
        """Test a group-less pattern yields the full match."""
        assert extract_pattern("a1 b2 a1", re.compile(r"[a-z]\d")) == ["a1", "b2"]

    def test_single_group(self):
        """Test a single group yields the group."""
        assert extract_pattern("x=1 y=2", re.compile(r"\w=(\d)")) == ["1", "2"]

    def test_multiple_groups(self):
        """Test several groups yield tuples."""
        assert extract_pattern("x=1 y=2", re.compile(r"(\w)=(\d)")) == [("x", "1"), ("y", "2")]

    def test_non_string_and_empty(self):
        """Test non-string and empty text yield nothing."""
        pattern = re.compile(r"\d")
        assert extract_pattern(None, pattern) == []
        assert extract_pattern(123, pattern) == []
        assert extract_pattern("", pattern) == []


class TestLinksAndContacts:
    """Test links, emails, phones, images, attachments and dates."""

    def test_links_strip_trailing_punctuation(self):
        """Test sentence punctuation is not part of the URL."""
        text = "Visit https://example.com. See https://example.com/docs, or https://example.com!"
        assert extract_links(text) == ["https://example.com", "https://example.com/docs"]

    def test_links_keep_query_strings(self):
        """Test query strings survive."""
        assert extract_links("Go to http://example.com/search?q=python&page=2 now") == [
            "http://example.com/search?q=python&page=2"
        ]

    def test_emails(self):
        """Test emails with mixed case."""
        text = "Contact alice@example.com or BOB@Example.ORG, again alice@example.com"
        assert extract_emails(text) == ["alice@example.com", "BOB@Example.ORG"]

    def test_phone_numbers(self):
        """Test a formatted phone number."""
        assert extract_phone_numbers("Call +1 (555) 123-4567 today") == ["+1 (555) 123-4567"]

    def test_short_numbers_are_not_phones(self):
        """Test short digit runs are ignored."""
        assert extract_phone_numbers("Room 42, floor 3") == []

    def test_image_urls(self):
        """Test only image links are returned."""
        text = "Logo https://cdn.example.com/logo.png and page https://example.com/about"
        assert extract_image_urls(text) == ["https://cdn.example.com/logo.png"]

    def test_attachment_urls(self):
        """Test document links."""
        text = "Report: https://example.com/files/report.pdf and https://example.com/a.png"
        assert extract_attachment_urls(text) == ["https://example.com/files/report.pdf"]

    def test_extension_must_end_the_path(self):
        """Test extensions in the host or mid-path do not count."""
        assert extract_image_urls("read https://www.svg.org/about") == []
        assert extract_image_urls("see https://example.png") == []
        assert extract_attachment_urls("see https://download.zip/page") == []
        assert extract_attachment_urls("get https://example.com/report.pdf.exe") == []

    def test_media_urls_are_returned_whole(self):
        """Test the query string stays on the URL and case is ignored."""
        url = "https://example.com/photo.PNG?size=large"
        assert extract_image_urls(f"Look {url} now") == [url]
        assert extract_attachment_urls("https://example.com/a.pdf#page=2") == [
            "https://example.com/a.pdf#page=2"
        ]

    def test_dates(self):
        """Test ISO and day/month/year dates."""
        assert extract_dates("Due 2024-01-15 or 15/01/2024") == ["2024-01-15", "15/01/2024"]


class TestSocial:
    """Test hashtags, mentions and handles."""

    def test_hashtags_deduplicated(self):
        """Test repeated tags appear once in first-appearance order."""
        assert extract_hashtags("#a #a #b") == ["a", "b"]

    def test_hashtags_ignore_url_fragments(self):
        """Test fragments inside URLs are not tags."""
        assert extract_hashtags("See https://example.com/#section and #real") == ["real"]

    def test_mentions_skip_email_domains(self):
        """Test the domain of an email is not a mention."""
        text = "Thanks @alice and @bob, mail alice@example.com"
        assert extract_mentions(text) == ["alice", "bob"]

    def test_twitter_handles_length_limit(self):
        """Test handles longer than 15 characters are ignored."""
        text = "@jack_dorsey and @averyveryverylonghandle"
        assert extract_twitter_handles(text) == ["jack_dorsey"]

    def test_instagram_handles_allow_periods(self):
        """Test periods inside handles are kept and a sentence period is not."""
        assert extract_instagram_handles("Follow @nat.geo.") == ["nat.geo"]

    def test_tags_with_context(self):
        """Test each tag carries the text around its first occurrence."""
        assert extract_tags_with_context("I love #python and #rust", 10) == [
            {"tag": "python", "context": "ove #python and"},
            {"tag": "rust", "context": "and #rust"},
        ]

    def test_context_reported_once_per_item(self):
        """Test a repeated tag is listed once."""
        result = extract_tags_with_context("#a then #a again")
        assert result == [{"tag": "a", "context": "#a then #a again"}]

    def test_mentions_with_context(self):
        """Test mentions with their surrounding text."""
        assert extract_mentions_with_context("ping @alice please") == [
            {"mention": "alice", "context": "ping @alice please"}
        ]

    def test_with_context_non_string(self):
        """Test non-string text yields nothing."""
        assert extract_tags_with_context(None) == []
        assert extract_with_context("", re.compile(r"#(\w+)"), "tag") == []


class TestMarkdown:
    """Test markdown links, code and tables."""

    def test_markdown_links(self):
        """Test links come back as text/url dicts."""
        text = "See [Docs](https://example.com/docs) and [Home](https://example.com)"
        assert extract_markdown_links(text) == [
            {"text": "Docs", "url": "https://example.com/docs"},
            {"text": "Home", "url": "https://example.com"},
        ]

    def test_markdown_code(self):
        """Test inline spans and fenced blocks."""
        text = "Use `pip install` then\n```\nprint(1)\n```\n"
        assert extract_markdown_code(text) == ["`pip install`", "```\nprint(1)\n```"]

    def test_markdown_tables(self):
        """Test the header row of a pipe table."""
        text = "Intro\n| Name | Age |\n| --- | --- |\n| Bob | 3 |\n"
        assert extract_markdown_tables(text) == ["| Name | Age |"]

    def test_pipes_without_separator_are_not_tables(self):
        """Test a lone pipe row is not a table."""
        assert extract_markdown_tables("a | b | c") == []


class TestIdentifiers:
    """Test checksum-filtered identifier extraction."""

    def test_isbn_filters_bad_checksums(self):
        """Test only the valid ISBN is kept."""
        text = "Good 978-3-16-148410-0, bad 978-3-16-148410-1"
        assert extract_identifier(text, "isbn") == ["978-3-16-148410-0"]

    def test_vin(self):
        """Test VIN extraction with checksum filtering."""
        text = "VIN 1HGCM82633A004352 and typo 1HGCM82633A004353"
        assert extract_identifier(text, "vin") == ["1HGCM82633A004352"]

    def test_iban_printed_in_groups(self):
        """Test spaced IBANs are found whole."""
        text = "Pay to GB82 WEST 1234 5698 7654 32 today"
        assert extract_identifier(text, "iban") == ["GB82 WEST 1234 5698 7654 32"]

    def test_credit_card_luhn(self):
        """Test card numbers are Luhn checked."""
        assert extract_identifier("Card 4111 1111 1111 1111 ok", "credit_cards") == [
            "4111 1111 1111 1111"
        ]
        assert extract_identifier("Card 4111 1111 1111 1112 ok", "credit_cards") == []

    def test_issn(self):
        """Test ISSN extraction."""
        assert extract_identifier("ISSN 0378-5955 and 0378-5954", "issn") == ["0378-5955"]

    def test_structural_kinds(self):
        """Test kinds without a checksum."""
        text = "id 123e4567-e89b-12d3-a456-426614174000 at 192.168.1.1 color #1a2b3c"
        assert extract_identifier(text, "uuids") == ["123e4567-e89b-12d3-a456-426614174000"]
        assert extract_identifier(text, "ips") == ["192.168.1.1"]
        assert extract_identifier(text, "hex_colors") == ["#1a2b3c"]

    def test_mac_address(self):
        """Test colon and dash separated MAC addresses."""
        text = "Device 00:1A:2B:3C:4D:5E and 00-1a-2b-3c-4d-5e"
        assert extract_identifier(text, "mac_address") == ["00:1A:2B:3C:4D:5E", "00-1a-2b-3c-4d-5e"]

    def test_barcodes(self):
        """Test EAN-13 and UPC-A are told apart by digit count."""
        assert extract_identifier("Barcode 4006381333931 here", "ean13") == ["4006381333931"]
        assert extract_identifier("Barcode 4006381333931 here", "upca") == []
        assert extract_identifier("UPC 036000291452", "upca") == ["036000291452"]

    def test_imei_luhn(self):
        """Test IMEIs failing the Luhn check are dropped."""
        text = "IMEI 490154203237518 and 490154203237519"
        assert extract_identifier(text, "imei") == ["490154203237518"]

    def test_validate_only_kinds_are_not_extracted(self):
        """Test kinds without a pattern find nothing in free text."""
        assert extract_identifier("number 79927398713", "luhn") == []

    def test_unknown_kind(self):
        """Test an unknown kind yields nothing."""
        assert extract_identifier("978-3-16-148410-0", "passport") == []

    def test_extract_with_checksum_without_validator(self):
        """Test a missing checksum keeps all structural matches."""
        text = "978-3-16-148410-1"
        assert extract_with_checksum(text, ISBN_REGEX, None) == ["978-3-16-148410-1"]
        assert extract_with_checksum(text, ISBN_REGEX, valid_isbn) == []

    def test_identifier_extractor_name(self):
        """Test the generated extractor is named after its kind."""
        extractor = identifier_extractor("isbn")
        assert extractor.__name__ == "extract_isbn"
        assert extractor("ISBN 0306406152") == ["0306406152"]


class TestExcerpt:
    """Test excerpt creation."""

    def test_short_text_unchanged(self):
        """Test text within the limit is returned as is."""
        assert create_excerpt("short", 10) == "short"

    def test_truncation(self):
        """Test long text is cut and marked with an ellipsis."""
        assert create_excerpt("hello world again", 11) == "hello world…"

    def test_non_string(self):
        """Test non-string input gives an empty excerpt."""
        assert create_excerpt(None) == ""
