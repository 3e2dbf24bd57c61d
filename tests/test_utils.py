"""Tests for Marklet utility modules."""

import logging


class TestHashStr:
    def test_sha256_digest(self) -> None:
        from marklet.utils.hashing import hash_str

        assert hash_str("hello") == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"

    def test_truncate(self) -> None:
        from marklet.utils.hashing import hash_str

        assert hash_str("hello", truncate=16) == "2cf24dba5fb0a30e"

    def test_lone_surrogate(self) -> None:
        """Strings that are not valid UTF-8 still hash."""
        from marklet.utils.hashing import hash_str

        assert len(hash_str("a\ud800b")) == 64
        assert hash_str("a\ud800b") != hash_str("ab")


class TestGetLogger:
    def test_adds_prefix(self) -> None:
        from marklet.utils.logger import get_logger

        logger = get_logger("mymodule")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "marklet.mymodule"

    def test_keeps_package_names(self) -> None:
        from marklet.utils.logger import get_logger

        assert get_logger("marklet").name == "marklet"
        assert get_logger("marklet.parsing.pairing").name == "marklet.parsing.pairing"
