"""
Test that backend_turboauth.logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger and use the logger."""
    from backend_turboauth.logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_json_logs_carry_event_type(capsys):
    import json

    from backend_turboauth.logging import get_logger
    from backend_turboauth.logging.logger import configure_structlog

    configure_structlog(level="INFO", fmt="json")
    try:
        get_logger("test").info("registry_saved", wallets=2)
        line = capsys.readouterr().out.strip().splitlines()[-1]
    finally:
        with capsys.disabled():
            configure_structlog()
    payload = json.loads(line)
    assert payload["event_type"] == "registry_saved"
    assert payload["wallets"] == 2
    assert payload["level"] == "info"
    assert "timestamp" in payload
