from __future__ import annotations

import datetime as dt
import logging

import numpy as np
import pandas as pd
import pytest

from settings import DEFAULT_DATA_URL, Settings
from utils.dates import parse_date, parse_filter_date
from utils.formatting import display_str, format_tick_date, json_safe
from utils.log import configure_logging


def test_settings_defaults():
    settings = Settings.from_env({})

    assert settings.data_url == DEFAULT_DATA_URL
    assert settings.fetch_timeout == 60.0
    assert settings.description_max_points == 50
    assert settings.log_level == "INFO"


def test_settings_from_env():
    settings = Settings.from_env(
        {
            "DATA_URL": "https://example.test/x.json",
            "OPENAI_MODEL": "some-model",
            "FETCH_TIMEOUT_SECONDS": "5.5",
            "DESCRIPTION_MAX_POINTS": "10",
            "LOG_LEVEL": "debug",
        }
    )

    assert settings.data_url == "https://example.test/x.json"
    assert settings.openai_model == "some-model"
    assert settings.fetch_timeout == 5.5
    assert settings.description_max_points == 10
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["", "0"])
def test_timeout_can_be_disabled(raw):
    assert Settings.from_env({"FETCH_TIMEOUT_SECONDS": raw}).fetch_timeout is None


@pytest.mark.parametrize(
    "env",
    [
        {"FETCH_TIMEOUT_SECONDS": "soon"},
        {"FETCH_TIMEOUT_SECONDS": "-1"},
        {"DESCRIPTION_MAX_POINTS": "0"},
        {"DESCRIPTION_MAX_POINTS": "many"},
    ],
)
def test_invalid_settings_name_the_variable(env):
    with pytest.raises(ValueError) as exc_info:
        Settings.from_env(env)

    assert next(iter(env)) in str(exc_info.value)


def test_parse_date():
    assert parse_date("2024-01-02") == pd.Timestamp("2024-01-02")
    assert parse_date("2024-01-02T10:00:00+02:00") == pd.Timestamp("2024-01-02T10:00:00")
    assert parse_date("not a date") is None
    assert parse_date(None) is None
    assert parse_date(True) is None
    assert parse_date({"a": 1}) is None


def test_parse_filter_date():
    assert parse_filter_date("2024-03-01") == dt.date(2024, 3, 1)
    assert parse_filter_date("  ") is None
    assert parse_filter_date("clear") is None

    with pytest.raises(ValueError):
        parse_filter_date("someday")


def test_display_str():
    assert display_str(None) == "null"
    assert display_str(False) == "false"
    assert display_str(100.0) == "100"
    assert display_str(1.5) == "1.5"
    assert display_str("T-Bill") == "T-Bill"


def test_json_safe():
    assert json_safe(np.int64(3)) == 3
    assert json_safe(np.float64("nan")) is None
    assert json_safe(float("inf")) is None
    assert json_safe(pd.Timestamp("2024-01-02")) == "2024-01-02"


def test_format_tick_date():
    assert format_tick_date("2024-01-02") == "Jan 24"
    assert format_tick_date("n/a") == "n/a"


def test_configure_logging_replaces_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging("debug")
        logger = configure_logging("warning")

        assert logger.name == "viewer"
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
