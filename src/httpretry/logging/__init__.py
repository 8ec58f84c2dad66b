"""Structured logging utilities with per-attempt request IDs."""

from .setup import (
    get_logger,
    get_request_id,
    new_request_id,
    reset_request_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_request_id",
    "new_request_id",
    "reset_request_id",
]
