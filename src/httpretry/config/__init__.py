"""Configuration management utilities."""

from .settings import HttpRetrySettings, get_settings

__all__ = [
    "HttpRetrySettings",
    "get_settings",
]
