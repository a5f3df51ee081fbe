"""Regex patterns and the identifier registry.

Patterns here scan free text, so they are bounded with ``\\b`` or lookarounds
instead of being anchored. Whole-value validation goes through
``IdentifierSpec.is_valid`` which applies ``fullmatch``.
"""

import re
from typing import Any, Dict, Optional

from .models import IdentifierSpec

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "svg", "webp")

ATTACHMENT_EXTENSIONS = (
    "pdf", "docx", "doc", "xlsx", "xls", "pptx", "ppt", "txt", "csv", "zip", "rar", "7z",
)

# === Text patterns ===

URL_REGEX = re.compile(r"https?://[^\s<>\"'`]+")

LINK_TRAILING_PUNCTUATION = re.compile(r"[.,!?:;]+$")

EMAIL_REGEX = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)

PHONE_REGEX = re.compile(r"\+?\d[\d\s\-()]{7,}\d")

# The symbol must not follow a word character: keeps email domains out of
# mentions and "&#38;"-style entities or URL fragments out of hashtags
HASHTAG_REGEX = re.compile(r"(?<![\w&/#])#(\w+)")

MENTION_REGEX = re.compile(r"(?<![\w@])@(\w+)")

TWITTER_REGEX = re.compile(r"(?<![\w@])@([A-Za-z0-9_]{1,15})(?!\w)")

INSTAGRAM_REGEX = re.compile(r"(?<![\w@])@([A-Za-z0-9_.]{1,30})")

MARKDOWN_LINK_REGEX = re.compile(r"\[([^\]]+)\]\((https?://[^)\s]+)\)")

MARKDOWN_CODE_REGEX = re.compile(r"```[\s\S]*?```|`[^`\n]+`")

MARKDOWN_TABLE_REGEX = re.compile(
    r"^[ \t]*(\|(?:[^|\n]*\|)+)[ \t]*\n"  # header row
    r"[ \t]*\|(?:[ \t]*:?-+:?[ \t]*\|)+",  # separator row
    re.MULTILINE,
)

DATE_REGEX = re.compile(r"\b\d{4}-\d{2}-\d{2}\b|\b\d{2}/\d{2}/\d{4}\b")

# === Identifier patterns ===

ISBN_REGEX = re.compile(
    r"\b(?:"
    r"97[89][-\s]?\d{1,5}[-\s]?\d{1,7}[-\s]?\d{1,7}[-\s]?\d"  # ISBN-13
    r"|\d{1,5}[-\s]\d{1,7}[-\s]\d{1,7}[-\s][\dXx]"  # hyphenated ISBN-10
    r"|\d{9}[\dXx]"  # compact ISBN-10
    r")(?![\w-])"
)

EAN13_REGEX = re.compile(r"\b\d{13}\b")

UPCA_REGEX = re.compile(r"\b\d{12}\b")

UUID_REGEX = re.compile(
    r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\b"
)

CREDIT_CARD_REGEX = re.compile(r"\b(?:\d[ -]*?){13,16}\b")

HEX_COLOR_REGEX = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}\b")

IP_REGEX = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b")

VIN_REGEX = re.compile(r"\b[A-HJ-NPR-Z0-9]{17}\b", re.IGNORECASE)

IMEI_REGEX = re.compile(r"\b\d{15}\b")

ISSN_REGEX = re.compile(r"\b\d{4}-?\d{3}[\dXx]\b")

MAC_ADDRESS_REGEX = re.compile(r"\b(?:[0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}\b")

# Compact or printed in groups of four
IBAN_REGEX = re.compile(
    r"\b[A-Z]{2}\d{2}(?: ?[A-Z0-9]{4}){2,7}(?: ?[A-Z0-9]{1,4})?\b", re.IGNORECASE
)

# === Whole-value patterns (no symbol prefix) ===

HASHTAG_VALUE_REGEX = re.compile(r"\w+")

MENTION_VALUE_REGEX = re.compile(r"\w+")

TWITTER_HANDLE_VALUE_REGEX = re.compile(r"[A-Za-z0-9_]{1,15}")

INSTAGRAM_HANDLE_VALUE_REGEX = re.compile(r"[A-Za-z0-9_.]{1,30}")

URL_VALUE_REGEX = re.compile(r"https?://\S+")


IDENTIFIER_SPECS: Dict[str, IdentifierSpec] = {
    spec.kind: spec
    for spec in (
        IdentifierSpec(
            kind="isbn",
            pattern=ISBN_REGEX,
            checksum="isbn",
            valid_examples=["0-306-40615-2", "978-3-16-148410-0", "9780306406157"],
            invalid_examples=["0-306-40615-3", "978-3-16-148410-1"],
            error_message="is not a valid ISBN",
            description="ISBN-10 or ISBN-13 (ISO 2108)",
        ),
        IdentifierSpec(
            kind="vin",
            pattern=VIN_REGEX,
            checksum="vin",
            valid_examples=["1HGCM82633A004352", "1M8GDM9AXKP042788"],
            invalid_examples=["1HGCM82633A004353"],
            error_message="is not a valid VIN",
            description="Vehicle Identification Number (ISO 3779)",
        ),
        IdentifierSpec(
            kind="issn",
            pattern=ISSN_REGEX,
            checksum="issn",
            valid_examples=["0378-5955", "2049-3630"],
            invalid_examples=["0378-5954"],
            error_message="is not a valid ISSN",
            description="International Standard Serial Number (ISO 3297)",
        ),
        IdentifierSpec(
            kind="iban",
            pattern=IBAN_REGEX,
            checksum="iban",
            valid_examples=["GB82WEST12345698765432", "DE89370400440532013000"],
            invalid_examples=["GB82WEST12345698765431"],
            error_message="is not a valid IBAN",
            description="International Bank Account Number (ISO 13616)",
        ),
        IdentifierSpec(
            kind="credit_cards",
            pattern=CREDIT_CARD_REGEX,
            checksum="luhn",
            valid_examples=["4111 1111 1111 1111", "5500-0000-0000-0004"],
            invalid_examples=["4111 1111 1111 1112"],
            error_message="is not a valid number (Luhn check failed)",
            description="Payment card number (ISO/IEC 7812)",
        ),
        IdentifierSpec(
            kind="imei",
            pattern=IMEI_REGEX,
            checksum="luhn",
            valid_examples=["490154203237518"],
            invalid_examples=["490154203237519"],
            error_message="is not a valid IMEI",
            description="International Mobile Equipment Identity (3GPP TS 23.003)",
        ),
        IdentifierSpec(
            kind="ean13",
            pattern=EAN13_REGEX,
            valid_examples=["4006381333931"],
            invalid_examples=["400638133393"],
            error_message="is not a valid EAN-13 barcode",
            description="EAN-13 barcode, digit count only",
        ),
        IdentifierSpec(
            kind="upca",
            pattern=UPCA_REGEX,
            valid_examples=["036000291452"],
            invalid_examples=["03600029145"],
            error_message="is not a valid UPC-A barcode",
            description="UPC-A barcode, digit count only",
        ),
        IdentifierSpec(
            kind="uuids",
            pattern=UUID_REGEX,
            valid_examples=["123e4567-e89b-12d3-a456-426614174000"],
            invalid_examples=["123e4567-e89b-12d3-a456-42661417400"],
            error_message="is not a valid UUID",
            description="UUID (RFC 4122)",
        ),
        IdentifierSpec(
            kind="hex_colors",
            pattern=HEX_COLOR_REGEX,
            valid_examples=["#fff", "#1a2B3c"],
            invalid_examples=["#ffff", "fff"],
            error_message="is not a valid hex color",
            description="CSS hex color",
        ),
        IdentifierSpec(
            kind="ips",
            pattern=IP_REGEX,
            valid_examples=["192.168.1.1"],
            invalid_examples=["192.168.1"],
            error_message="is not a valid IPv4 address",
            description="IPv4 dotted quad",
        ),
        IdentifierSpec(
            kind="mac_address",
            pattern=MAC_ADDRESS_REGEX,
            valid_examples=["00:1A:2B:3C:4D:5E", "00-1a-2b-3c-4d-5e"],
            invalid_examples=["00:1A:2B:3C:4D", "00:1A:2B:3C:4D:5Z", "123"],
            error_message="is not a valid MAC address",
            description="MAC address, colon or dash separated",
        ),
        # Bare Luhn check on any digit string, no length constraint
        IdentifierSpec(
            kind="luhn",
            checksum="luhn",
            valid_examples=["79927398713", "4111 1111 1111 1111"],
            invalid_examples=["79927398710", "abc"],
            error_message="is not a valid number (Luhn check failed)",
            description="Any number protected by the Luhn check digit",
        ),
        IdentifierSpec(
            kind="hashtag",
            pattern=HASHTAG_VALUE_REGEX,
            valid_examples=["hashtag", "test123"],
            invalid_examples=["#hashtag", "test 123", ""],
            error_message="is not a valid hashtag",
            description="Hashtag text without the leading #",
        ),
        IdentifierSpec(
            kind="mention",
            pattern=MENTION_VALUE_REGEX,
            valid_examples=["mention", "user123"],
            invalid_examples=["@mention", "user name", ""],
            error_message="is not a valid mention",
            description="Mention text without the leading @",
        ),
        IdentifierSpec(
            kind="twitter_handle",
            pattern=TWITTER_HANDLE_VALUE_REGEX,
            valid_examples=["jack", "user123"],
            invalid_examples=["user_name_too_long_for_twitter", ""],
            error_message="is not a valid Twitter handle",
            description="Twitter handle, up to 15 characters",
        ),
        IdentifierSpec(
            kind="instagram_handle",
            pattern=INSTAGRAM_HANDLE_VALUE_REGEX,
            valid_examples=["instauser", "user123", "nat.geo"],
            invalid_examples=[
                "user_name_that_is_way_too_long_for_instagram_because_it_is_over_30_chars",
                "",
            ],
            error_message="is not a valid Instagram handle",
            description="Instagram handle, up to 30 characters",
        ),
        IdentifierSpec(
            kind="url",
            pattern=URL_VALUE_REGEX,
            valid_examples=["https://example.com", "http://test.com"],
            invalid_examples=["not a url", "ftp://example.com"],
            error_message="is not a valid URL",
            description="http or https URL",
        ),
    )
}

# Kinds that are found in free text, as opposed to whole-value only kinds
EXTRACTABLE_IDENTIFIER_KINDS = (
    "isbn", "vin", "issn", "iban", "credit_cards", "imei",
    "ean13", "upca", "uuids", "hex_colors", "ips", "mac_address",
)


def get_identifier_spec(kind: str) -> Optional[IdentifierSpec]:
    """Look up an IdentifierSpec by kind."""
    if not isinstance(kind, str):
        return None
    return IDENTIFIER_SPECS.get(kind)


def validate_identifier(kind: str, value: Any) -> bool:
    """
    Validate a whole value as an identifier of the given kind.

    Args:
        kind: Identifier kind (e.g. "isbn", "iban")
        value: Candidate value

    Returns:
        True if valid, False for invalid values and unknown kinds
    """
    spec = get_identifier_spec(kind)
    if spec is None:
        return False
    return spec.is_valid(value)
