import json

import structlog

from acquisitions.core.config import Settings
from acquisitions.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)


def test_json_logs_written_to_log_file(tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    settings = Settings(
        _env_file=None,
        environment="testing",
        log_format="json",
        log_level="INFO",
        log_file=str(log_file),
    )

    try:
        configure_logging(settings)
        bind_correlation_id("cid_test")
        get_logger("acquisitions.test").info("User signed in", email="alice@x.com")
    finally:
        clear_context()
        structlog.reset_defaults()

    line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "User signed in"
    assert record["email"] == "alice@x.com"
    assert record["correlation_id"] == "cid_test"
    assert record["level"] == "info"


def test_console_logging_for_testing_environment(capsys):
    settings = Settings(_env_file=None, environment="testing", log_format="console")

    try:
        configure_logging(settings)
        get_logger("acquisitions.test").warning("Console entry")
    finally:
        structlog.reset_defaults()

    assert "Console entry" in capsys.readouterr().out
