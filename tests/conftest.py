from __future__ import annotations

from typing import Any

import pytest

from config.settings import Settings


@pytest.fixture
def make_settings():
    def _make(**overrides: Any) -> Settings:
        settings = Settings()
        settings.google_api_key = "test-key"
        settings.request_timeout = 2.0
        settings.max_concurrent_requests = 4
        settings.history_max_turns = 6
        for key, value in overrides.items():
            setattr(settings, key, value)
        return settings

    return _make
