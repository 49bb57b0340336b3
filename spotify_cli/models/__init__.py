"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application, such as configuration and API error objects.
"""

from .config import ClientConfig
from .errors import ApiError, PlayerApiError, RegularApiError

__all__ = ["ApiError", "ClientConfig", "PlayerApiError", "RegularApiError"]
