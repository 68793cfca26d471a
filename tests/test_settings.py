"""Unit tests for environment-driven settings."""

import logging

from settings import (
    DEFAULT_API_BASE,
    DEFAULT_BLUR_DELAY,
    DEFAULT_CANDIDATE_LIMIT,
    Settings,
    configure_logging,
    load_settings,
)


def test_defaults():
    assert load_settings({}) == Settings()
    assert Settings().api_base == DEFAULT_API_BASE
    assert Settings().candidate_limit == DEFAULT_CANDIDATE_LIMIT


def test_overrides():
    settings = load_settings(
        {
            "POKEDEX_API_BASE": "http://localhost:8000/api/v2/",
            "POKEDEX_CANDIDATE_LIMIT": "151",
            "POKEDEX_TIMEOUT": "2.5",
            "POKEDEX_BLUR_DELAY": "0.25",
            "POKEDEX_LOG_LEVEL": "debug",
        }
    )
    assert settings.api_base == "http://localhost:8000/api/v2"
    assert settings.candidate_limit == 151
    assert settings.timeout == 2.5
    assert settings.blur_delay == 0.25
    assert settings.log_level == "DEBUG"


def test_invalid_values_fall_back(caplog):
    with caplog.at_level(logging.WARNING):
        settings = load_settings(
            {
                "POKEDEX_CANDIDATE_LIMIT": "lots",
                "POKEDEX_BLUR_DELAY": "-1",
                "POKEDEX_LOG_LEVEL": "chatty",
            }
        )
    assert settings.candidate_limit == DEFAULT_CANDIDATE_LIMIT
    assert settings.blur_delay == DEFAULT_BLUR_DELAY
    assert settings.log_level == "INFO"
    assert "POKEDEX_CANDIDATE_LIMIT" in caplog.text


def test_configure_logging_installs_one_handler():
    root = logging.getLogger()
    for h in root.handlers[:]:
        if getattr(h, "_pokedex_handler", False):
            root.removeHandler(h)
    before = list(root.handlers)
    level = root.level
    try:
        configure_logging("WARNING")
        configure_logging("DEBUG")
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert root.level == logging.DEBUG
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
        root.setLevel(level)
