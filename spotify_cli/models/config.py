"""
Pydantic model for client configuration.
Provides validation for all settings that shape a request.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://api.spotify.com/v1/"
DEFAULT_USER_AGENT = "spotify-cli"


class ClientConfig(BaseModel):
    """A validated, read-only configuration for the API client."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    # Authentication & API
    base_url: str = DEFAULT_BASE_URL
    token: str = Field(default="", repr=False)

    # Transport
    request_timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensures the prefix is absolute and ends with a slash."""
        if not v:
            raise ValueError("Base URL cannot be empty.")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must start with http:// or https://, got: {v}")
        return v if v.endswith("/") else v + "/"

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        """A timeout of zero or less means no timeout."""
        if v is not None and v <= 0:
            return None
        return v

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
