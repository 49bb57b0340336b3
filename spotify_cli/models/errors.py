"""
Pydantic models for the two error-object shapes returned by the Spotify API.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError


class RegularApiError(BaseModel):
    """The regular error object: ``{"status": 404, "message": "..."}``."""

    model_config = ConfigDict(frozen=True)

    status: int
    message: str

    def __str__(self) -> str:
        return f"{self.status}: {self.message}"


class PlayerApiError(BaseModel):
    """The player error object, which adds a machine-readable ``reason``."""

    model_config = ConfigDict(frozen=True)

    status: int
    message: str
    reason: str

    def __str__(self) -> str:
        return f"{self.status} ({self.reason}): {self.message}"


ApiError = Union[RegularApiError, PlayerApiError]


def api_error_from_dict(data: Any) -> Optional[ApiError]:
    """
    Builds an ApiError from a decoded JSON body.

    Accepts both the bare object and the form nested under an ``"error"`` key.
    The presence of ``reason`` selects the player variant.
    Returns None if the data matches neither shape.
    """
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        data = data["error"]
    if not isinstance(data, dict):
        return None

    model = PlayerApiError if "reason" in data else RegularApiError
    try:
        return model.model_validate(data)
    except ValidationError:
        return None
