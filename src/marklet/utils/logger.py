"""Logging helpers for Marklet.

Every module logs through a standard library logger named under ``marklet.``
so hosts can tune the whole package with one ``logging`` call. Malformed
markup never logs above DEBUG. What is logged:

- marklet.parsing.pairing: markers demoted by the nesting limit or by a
  crossing pair
- marklet.cache: LRU evictions, oversized texts that bypass the cache, and
  invalidations

Example:
    >>> import logging
    >>> logging.getLogger("marklet").setLevel(logging.DEBUG)
    >>> get_logger("marklet.cache").isEnabledFor(logging.DEBUG)
    True
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Return the stdlib logger for ``name`` under the ``marklet.`` namespace.

    Names already inside the namespace (typically ``__name__``) are used
    as they are.

    Example:
        >>> get_logger("mymodule").name
        'marklet.mymodule'
    """
    if not (name == "marklet" or name.startswith("marklet.")):
        name = f"marklet.{name}"
    return logging.getLogger(name)
