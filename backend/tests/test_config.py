import logging
import subprocess
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.core.errors import UploadTooLarge
from app.core.logging import configure_logging

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.mark.parametrize(("raw", "expected"), [("debug", "DEBUG"), ("Warning", "WARNING"), ("INFO", "INFO")])
def test_log_level_normalized(monkeypatch, raw, expected):
    monkeypatch.setenv("LOG_LEVEL", raw)
    assert Settings().log_level == expected


@pytest.mark.parametrize("raw", ["verbose", "trace", "10"])
def test_unknown_log_level_rejected(monkeypatch, raw):
    monkeypatch.setenv("LOG_LEVEL", raw)
    with pytest.raises(ValidationError):
        Settings()


def test_configure_logging_applies_level():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("WARNING")
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)


@pytest.mark.parametrize("raw", ["0", "-1"])
def test_non_positive_upload_cap_rejected(monkeypatch, raw):
    monkeypatch.setenv("MAX_UPLOAD_BYTES", raw)
    with pytest.raises(ValidationError):
        Settings()


def test_upload_cap_default_is_800_mib(monkeypatch):
    monkeypatch.delenv("MAX_UPLOAD_BYTES", raising=False)
    assert Settings().max_upload_bytes == 800 * 1024 * 1024


def test_too_large_status_is_413():
    assert UploadTooLarge.status_code == 413


def test_errors_module_uses_current_status_names():
    code = (
        "import warnings\n"
        "warnings.filterwarnings('error', message='.*HTTP_413_REQUEST_ENTITY_TOO_LARGE')\n"
        "import app.core.errors\n"
    )
    result = subprocess.run(
        [sys.executable, "-c", code],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
