"""Tests for utils/sanitize.py."""

from __future__ import annotations

from autogrc.utils.sanitize import sanitize_error


class TestSanitizeError:
    def test_bearer_token(self):
        assert sanitize_error("Bearer abc.def") == "Bearer [REDACTED]"

    def test_query_credentials(self):
        message = "GET /register?email=x&apiKey=s3cret&password=hunter2 failed"
        result = sanitize_error(message)
        assert "s3cret" not in result
        assert "hunter2" not in result
        assert "apiKey=[REDACTED]" in result

    def test_email(self):
        assert sanitize_error("no such user ops@example.com") == "no such user [REDACTED_EMAIL]"

    def test_home_path(self, monkeypatch):
        monkeypatch.delenv("USERPROFILE", raising=False)
        monkeypatch.setenv("HOME", "/home/grc")
        assert sanitize_error("cannot open /home/grc/data.yaml") == "cannot open [USER_HOME]/data.yaml"

    def test_empty(self):
        assert sanitize_error("") == ""
