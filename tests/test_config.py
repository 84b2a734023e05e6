"""Tests for endpoint construction and settings defaults."""

from core.config import Settings


def test_defaults():
    cfg = Settings()

    assert cfg.stream_scheme == "https"
    assert cfg.stream_path == "/events"
    assert cfg.dashboard_title == "Jamulus stream"
    assert cfg.retries_forever


def test_stream_url_from_bare_host():
    cfg = Settings()

    assert cfg.stream_url("jamulus.example.org") == "https://jamulus.example.org/events"
    assert cfg.stream_url("localhost:8123/") == "https://localhost:8123/events"


def test_stream_url_keeps_explicit_scheme():
    cfg = Settings()

    assert cfg.stream_url("http://127.0.0.1:8000") == "http://127.0.0.1:8000/events"


def test_stream_url_respects_overrides():
    cfg = Settings(STREAM_SCHEME="http", STREAM_PATH="feed")

    assert cfg.stream_url("host") == "http://host/feed"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MAX_RECONNECT_ATTEMPTS", "3")
    monkeypatch.setenv("DASHBOARD_TITLE", "Rehearsal")

    cfg = Settings()

    assert cfg.max_reconnect_attempts == 3
    assert cfg.dashboard_title == "Rehearsal"
    assert not cfg.retries_forever
