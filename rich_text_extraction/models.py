"""Data models for RichTextExtraction."""

from typing import Any, Dict, List, Optional, Pattern, Union

from pydantic import BaseModel, ConfigDict, Field

from .checksums import get_checksum

# Kind -> ordered, de-duplicated matches
ExtractionResult = Dict[str, List[Any]]


class IdentifierSpec(BaseModel):
    """Static description of an identifier kind."""

    model_config = ConfigDict(frozen=True)

    kind: str
    pattern: Optional[Pattern[str]] = None  # scans free text
    checksum: Optional[str] = None  # id in checksums.CHECKSUMS
    valid_examples: List[str] = Field(default_factory=list)
    invalid_examples: List[str] = Field(default_factory=list)
    error_message: str = "is not valid"
    description: Optional[str] = None

    def is_valid(self, value: Any) -> bool:
        """
        Validate a whole value against this spec.

        The pattern must match the entire value; when a checksum is set it
        must also pass. Never raises.

        Args:
            value: Candidate identifier

        Returns:
            True if the value is a valid identifier of this kind
        """
        if not isinstance(value, str) or not value.strip():
            return False

        value = value.strip()
        if self.pattern is not None and not self.pattern.fullmatch(value):
            return False

        if self.checksum:
            checksum = get_checksum(self.checksum)
            return checksum is not None and checksum(value)

        return True


class OpenGraphRecord(BaseModel):
    """OpenGraph metadata for a single URL."""

    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    site_name: Optional[str] = None
    type: Optional[str] = None
    error: Optional[str] = None
    properties: Dict[str, str] = Field(default_factory=dict)  # raw og:* tags

    @property
    def ok(self) -> bool:
        """True when the fetch and parse succeeded."""
        return self.error is None

    @classmethod
    def failure(cls, url: str, error: str) -> "OpenGraphRecord":
        """Build an error-tagged record with no parsed fields."""
        return cls(url=url, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary, omitting unset fields.

        Returns:
            Dict with only the populated fields
        """
        data = self.model_dump(exclude_none=True)
        if not data.get("properties"):
            data.pop("properties", None)
        return data


class CacheOptions(BaseModel):
    """Per-call cache options."""

    key_prefix: Optional[str] = None
    expires_in: Optional[float] = Field(default=None, gt=0)  # seconds

    @classmethod
    def coerce(
        cls, options: Union["CacheOptions", Dict[str, Any], None]
    ) -> "CacheOptions":
        """Accept a CacheOptions, a plain dict, or None."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls(**options)

