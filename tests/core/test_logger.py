"""Tests for loguru setup."""

from loguru import logger

from app.core.logger import setup_logger


def test_structured_context_is_written_after_message(tmp_path):
    log_file = tmp_path / "logs" / "service.log"

    setup_logger(level="DEBUG", log_file=str(log_file))
    try:
        logger.info("Training started", execution_id="te-1", user_id="u-1")
        logger.debug("Plain message")
    finally:
        # Detaches (and closes) the file sink
        setup_logger(level="INFO")

    lines = log_file.read_text().splitlines()
    assert any(line.endswith("Training started execution_id=te-1 user_id=u-1") for line in lines)
    assert any(line.endswith("Plain message") for line in lines)
    assert not any("service=" in line for line in lines)


def test_without_log_file_no_file_is_created(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    setup_logger(level="WARNING")
    setup_logger(level="INFO")

    assert list(tmp_path.iterdir()) == []
