"""Exception classes for Marklet.

Malformed markup never raises: unmatched markers, broken links and unknown
placeholders all degrade to literal text. The exceptions here cover
configuration mistakes and internal invariant violations only.
"""

from __future__ import annotations


class MarkletError(Exception):
    """Base exception for all Marklet errors.

    Subclass this for specific error categories.
    """

    pass


class InvariantError(MarkletError):
    """An internal parsing invariant was violated.

    Only raised when ``ParseConfig.debug_checks`` is enabled. Reaching this
    from any input string is a bug in the tokenizer or pair matcher, not a
    user error.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        """Initialize invariant error with optional source position.

        Args:
            message: Description of the violated invariant
            position: Offset into the source text, when known
        """
        self.message = message
        self.position = position
        location = f" (at offset {position})" if position is not None else ""
        super().__init__(f"{message}{location}")


class ConfigError(MarkletError):
    """Invalid configuration value.

    Raised when a ParseConfig or cache is constructed with values that
    cannot work (negative depth, non-positive cache size, ...).
    """

    def __init__(self, field_name: str, message: str) -> None:
        """Initialize config error.

        Args:
            field_name: Name of the offending setting
            message: Description of the problem
        """
        self.field_name = field_name
        super().__init__(f"Config '{field_name}': {message}")
