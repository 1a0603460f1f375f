"""
Pytest configuration and fixtures.
"""

import os

import pytest

from tests.unit.engine import FakeClock, login_form


@pytest.fixture
def settings():
    """Provide test settings."""
    from cognito_ui.config import Settings, BrowserSettings, LocatorSettings

    return Settings(
        browser=BrowserSettings(headless=True),
        locator=LocatorSettings(max_retries=1, timeout_ms=2000),
    )


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory without COGNITO__ variables."""
    for key in list(os.environ):
        if key.upper().startswith("COGNITO__"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fake_page():
    """Provide the in-memory login form."""
    return login_form()


@pytest.fixture
def fake_clock():
    """Provide a clock that only advances when slept on."""
    return FakeClock()
