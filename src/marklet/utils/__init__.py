"""Utility modules for Marklet.

Provides:
- hashing: hash_str for content fingerprinting
- logger: get_logger for logging
"""

from marklet.utils.hashing import hash_str
from marklet.utils.logger import get_logger

__all__ = [
    "get_logger",
    "hash_str",
]
