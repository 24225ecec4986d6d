"""Unit tests for application configuration."""

from pathlib import Path
from unittest.mock import patch

from mdblog.config import Settings


class TestSettings:
    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            s = Settings()
            assert s.content_dir == Path("content")
            assert s.content_pattern == "*.md"
            assert s.debug is False
            assert s.app_title == "renvins' thoughts blog"
            assert s.host == "127.0.0.1"
            assert s.port == 8080
            assert s.log_level == "INFO"

    def test_from_env(self):
        env = {
            "MDBLOG_CONTENT_DIR": "/tmp/posts",
            "MDBLOG_CONTENT_PATTERN": "*.markdown",
            "MDBLOG_DEBUG": "true",
            "MDBLOG_APP_TITLE": "My Blog",
            "MDBLOG_PORT": "9000",
            "MDBLOG_LOG_LEVEL": "DEBUG",
        }
        with patch.dict("os.environ", env, clear=True):
            s = Settings()
            assert s.content_dir == Path("/tmp/posts")
            assert s.content_pattern == "*.markdown"
            assert s.debug is True
            assert s.app_title == "My Blog"
            assert s.port == 9000
            assert s.log_level == "DEBUG"

    def test_debug_false_values(self):
        with patch.dict("os.environ", {"MDBLOG_DEBUG": "false"}, clear=True):
            s = Settings()
            assert s.debug is False
