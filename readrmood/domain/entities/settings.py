"""User-facing app settings."""

from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator

from .base import Record

DEFAULT_PRIVACY_URL = "https://stakankofe.github.io/MyBookApp/"


def is_valid_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return bool(parsed.scheme) and bool(parsed.netloc)


class AppSettings(Record):
    """Settings persisted alongside the reading data.

    ``privacyURLString`` is accepted as well, the key used by the first
    releases of the app.
    """

    is_dark_mode_enabled: bool = True
    privacy_url: str = Field(
        default=DEFAULT_PRIVACY_URL,
        validation_alias=AliasChoices("privacyUrl", "privacyURLString", "privacy_url"),
        serialization_alias="privacyUrl",
    )

    @field_validator("privacy_url", mode="before")
    @classmethod
    def _default_bad_url(cls, value):
        if not isinstance(value, str) or not is_valid_url(value):
            return DEFAULT_PRIVACY_URL
        return value.strip()
