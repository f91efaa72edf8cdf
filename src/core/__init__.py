"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Request tracing middleware
- Normalization helpers for raw catalog rows
"""

from core.logging import configure_logging, get_logger
from core.utils import normalize_id, normalize_ids, safe_get, safe_text, to_number

__all__ = [
    "configure_logging",
    "get_logger",
    "normalize_id",
    "normalize_ids",
    "safe_get",
    "safe_text",
    "to_number",
]
