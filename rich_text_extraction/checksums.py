"""Checksum validation for well-known identifier formats.

Every validator takes a string and returns a bool. Malformed input of any kind
returns False; nothing in this module raises to its caller.
"""

import re
from typing import Any, Callable, Dict, Optional

ChecksumFn = Callable[[Any], bool]

# ISO 3779 transliteration; I, O and Q never appear in a VIN
VIN_TRANSLITERATION: Dict[str, int] = {
    "A": 1, "B": 2, "C": 3, "D": 4, "E": 5, "F": 6, "G": 7, "H": 8,
    "J": 1, "K": 2, "L": 3, "M": 4, "N": 5, "P": 7, "R": 9,
    "S": 2, "T": 3, "U": 4, "V": 5, "W": 6, "X": 7, "Y": 8, "Z": 9,
}

VIN_WEIGHTS = (8, 7, 6, 5, 4, 3, 2, 10, 0, 9, 8, 7, 6, 5, 4, 3, 2)

VIN_CHECK_INDEX = 8

IBAN_MIN_LENGTH = 5
IBAN_MAX_LENGTH = 34


def _isbn_characters(value: Any) -> Optional[str]:
    """Keep digits and X, uppercased. None for non-strings."""
    if not isinstance(value, str):
        return None
    return re.sub(r"[^0-9Xx]", "", value).upper()


def _isbn10_sum(chars: str) -> int:
    # Position i (0-based) carries weight 10 - i; X stands for 10
    return sum((10 if c == "X" else int(c)) * (10 - i) for i, c in enumerate(chars))


def _isbn13_sum(chars: str) -> int:
    # Alternating weights 1, 3, 1, 3, ...
    return sum(int(c) * (1 if i % 2 == 0 else 3) for i, c in enumerate(chars))


def valid_isbn10(value: Any) -> bool:
    """
    Validate an ISBN-10 (ISO 2108).

    Args:
        value: ISBN with or without hyphens/spaces

    Returns:
        True if the weighted sum is divisible by 11
    """
    chars = _isbn_characters(value)
    if chars is None or len(chars) != 10:
        return False
    return _isbn10_sum(chars) % 11 == 0


def valid_isbn13(value: Any) -> bool:
    """
    Validate an ISBN-13 (ISO 2108).

    Args:
        value: ISBN with or without hyphens/spaces

    Returns:
        True if the 1-3 weighted sum is divisible by 10
    """
    chars = _isbn_characters(value)
    if chars is None or len(chars) != 13 or not chars.isdigit():
        return False
    return _isbn13_sum(chars) % 10 == 0


def valid_isbn(value: Any) -> bool:
    """Validate an ISBN-10 or ISBN-13, chosen by length."""
    chars = _isbn_characters(value)
    if chars is None:
        return False
    if len(chars) == 10:
        return valid_isbn10(chars)
    if len(chars) == 13:
        return valid_isbn13(chars)
    return False


def vin_check_character(vin: str) -> Optional[str]:
    """
    Compute the expected check character of a 17 character VIN.

    Args:
        vin: Uppercased VIN

    Returns:
        "0".."9" or "X", or None when a character cannot be transliterated
    """
    total = 0
    for char, weight in zip(vin, VIN_WEIGHTS):
        if char.isdigit():
            value = int(char)
        elif char in VIN_TRANSLITERATION:
            value = VIN_TRANSLITERATION[char]
        else:
            return None
        total += value * weight

    remainder = total % 11
    return "X" if remainder == 10 else str(remainder)


def valid_vin(value: Any) -> bool:
    """
    Validate a Vehicle Identification Number (ISO 3779).

    The 9th character is a check digit over the weighted transliterated sum.

    Args:
        value: 17 character VIN

    Returns:
        True if the check digit matches
    """
    if not isinstance(value, str):
        return False

    vin = value.strip().upper()
    if len(vin) != 17 or not vin.isascii() or not vin.isalnum():
        return False

    expected = vin_check_character(vin)
    return expected is not None and vin[VIN_CHECK_INDEX] == expected


def valid_issn(value: Any) -> bool:
    """
    Validate an ISSN (ISO 3297, mod 11).

    Args:
        value: ISSN such as "0378-5955"

    Returns:
        True if the 8th character matches the computed check character
    """
    if not isinstance(value, str):
        return False

    chars = value.strip().replace("-", "").upper()
    if len(chars) != 8 or not chars[:7].isdigit():
        return False

    # Weights 8 down to 2 over the first seven digits
    total = sum(int(c) * (8 - i) for i, c in enumerate(chars[:7]))
    check = (11 - total % 11) % 11
    expected = "X" if check == 10 else str(check)
    return chars[7] == expected


def iban_to_integer(iban: str) -> int:
    """
    Rearrange an IBAN and convert it to the integer checked by mod 97.

    The first four characters move to the end; letters become
    ``ord(c) - ord('A') + 10``.

    Raises:
        ValueError: If a character is neither a digit nor A-Z
    """
    rearranged = iban[4:] + iban[:4]
    digits = []
    for char in rearranged:
        if char.isdigit():
            digits.append(char)
        elif "A" <= char <= "Z":
            digits.append(str(ord(char) - ord("A") + 10))
        else:
            raise ValueError(f"Invalid IBAN character: {char!r}")
    return int("".join(digits))


def valid_iban(value: Any) -> bool:
    """
    Validate an IBAN (ISO 13616, mod 97).

    Args:
        value: IBAN, whitespace allowed

    Returns:
        True if the rearranged numeral leaves remainder 1 modulo 97
    """
    if not isinstance(value, str):
        return False

    iban = re.sub(r"\s+", "", value).upper()
    if not IBAN_MIN_LENGTH <= len(iban) <= IBAN_MAX_LENGTH:
        return False
    if not iban.isascii() or not iban.isalnum():
        return False

    try:
        return iban_to_integer(iban) % 97 == 1
    except ValueError:
        return False


def luhn_valid(value: Any) -> bool:
    """
    Validate a number with the Luhn algorithm (ISO/IEC 7812).

    Used for credit card numbers and IMEIs. Non-digits are ignored.

    Args:
        value: Number, separators allowed

    Returns:
        True if the Luhn total is divisible by 10
    """
    if not isinstance(value, str):
        return False

    digits = [int(c) for c in value if c.isdigit()]
    if not digits:
        return False

    total = 0
    for index, digit in enumerate(reversed(digits)):
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


CHECKSUMS: Dict[str, ChecksumFn] = {
    "isbn": valid_isbn,
    "isbn10": valid_isbn10,
    "isbn13": valid_isbn13,
    "vin": valid_vin,
    "issn": valid_issn,
    "iban": valid_iban,
    "luhn": luhn_valid,
}


def get_checksum(checksum_id: str) -> Optional[ChecksumFn]:
    """Look up a checksum validator by id."""
    return CHECKSUMS.get(checksum_id)
