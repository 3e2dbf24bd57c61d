"""ContextVar-based parse configuration for Marklet.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per session or call, read by the tokenizer, pair matcher
and tree builder in the same context.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage, so no
    locks are needed.

Usage:
    from marklet.config import ParseConfig, parse_config_context

    with parse_config_context(ParseConfig(max_nesting_depth=3)):
        nodes = parse("***deep _nesting_ ~~here~~***", style)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from marklet.errors import ConfigError


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Frozen dataclass ensures thread-safety (immutable after creation) and
    value equality, so two equal configs share cache entries.

    Attributes:
        max_nesting_depth: Maximum simultaneously open formatting scopes.
            Pairs that would open deeper are rendered as literal text.
        default_url_scheme: Prefix added to link targets without a scheme.
        default_font_size: Logical font size assumed when a style has none.
            Used to size and offset superscript/subscript runs.
        debug_checks: Verify tokenizer and pair matcher invariants on every
            parse and raise InvariantError on violation.
        max_cache_entries: Default capacity for LRUParseCache.
        max_cache_text_length: Texts longer than this bypass the cache.

    """

    max_nesting_depth: int = 2
    default_url_scheme: str = "https://"
    default_font_size: float = 14.0
    debug_checks: bool = False
    max_cache_entries: int = 200
    max_cache_text_length: int = 1000

    def __post_init__(self) -> None:
        if self.max_nesting_depth < 0:
            raise ConfigError("max_nesting_depth", "must be >= 0")
        if self.default_font_size <= 0:
            raise ConfigError("default_font_size", "must be > 0")
        if self.max_cache_entries < 1:
            raise ConfigError("max_cache_entries", "must be >= 1")
        if self.max_cache_text_length < 0:
            raise ConfigError("max_cache_text_length", "must be >= 0")

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from dictionary.

        Only includes keys that are valid ParseConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ParseConfig attribute names.

        Returns:
            New ParseConfig instance with values from dict.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "max_nesting_depth": 3,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.max_nesting_depth
            3

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

# Thread-local configuration via ContextVar
_parse_config: ContextVar[ParseConfig] = ContextVar(
    "parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current parse configuration (thread-local).

    Returns:
        The active ParseConfig for this thread/context.

    """
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for current context.

    Args:
        config: ParseConfig instance to use for this context.

    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.

    """
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: ParseConfig to use within the context.

    Yields:
        None

    Example:
        >>> with parse_config_context(ParseConfig(max_nesting_depth=1)):
        ...     nodes = parse("**bold _not italic_**", style)
        >>> # Automatically reset to previous config

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
