"""Unit tests for logging helpers.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import logging
import logging.handlers

from mail_relay.core.logger import (
    get_logs_directory,
    log_context,
    mask_secret,
    setup_logging,
)


def test_log_context_formats_metadata():
    """Test context strings carry origin, operation, recipient and extras."""
    assert log_context("origin_check", origin="https://a.example.com", decision="denied") == (
        "[https://a.example.com] | origin_check (decision=denied)"
    )
    assert log_context("dispatch", recipient="a@x.com", provider="Brevo") == (
        "dispatch | →a@x.com (provider=Brevo)"
    )
    assert log_context("credential_check") == "credential_check"


def test_mask_secret():
    """Test secrets are never printed in full."""
    assert mask_secret("") == "(not set)"
    assert mask_secret("ab") == "***"
    assert mask_secret("secret") == "s****t"


def test_setup_logging_file_handlers(tmp_path):
    """Test file logging creates the rotating main and error handlers."""
    setup_logging(log_dir=tmp_path, enable_file=True, max_size_mb=1, backup_count=2)

    root = logging.getLogger()
    rotating = [
        h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    try:
        assert get_logs_directory() == tmp_path
        assert {h.baseFilename for h in rotating} == {
            str(tmp_path / "mail_relay.log"),
            str(tmp_path / "mail_relay.error.log"),
        }
        main_handler = next(h for h in rotating if h.baseFilename.endswith("mail_relay.log"))
        assert main_handler.maxBytes == 1024 * 1024
        assert main_handler.backupCount == 2
    finally:
        for handler in rotating:
            root.removeHandler(handler)
            handler.close()


def test_setup_logging_console_only(tmp_path):
    """Test no files are written when file logging is disabled."""
    setup_logging(log_dir=tmp_path / "logs", enable_file=False)

    assert not (tmp_path / "logs").exists()
