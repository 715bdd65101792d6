import logging

from vpacker.config.schema import LoggingConfig
from vpacker.utils.logging import EmojiFormatter, RUN_MARKER, configure_logging, get_logger


def test_emoji_formatter():
    fmt = EmojiFormatter("%(emoji)s %(levelname)s: %(message)s")
    record = logging.LogRecord("vpacker.x", logging.ERROR, __file__, 1, "boom", None, None)
    assert fmt.format(record) == "❌ ERROR: boom"


def test_configure_logging_files(tmp_path):
    cfg = LoggingConfig(level="WARNING", file=str(tmp_path / "run.log"), debug_file=str(tmp_path / "debug.log"))
    logger = configure_logging(cfg)
    get_logger("packer").info("planning")
    get_logger("packer").warning("careful")
    for handler in logger.handlers:
        handler.flush()

    run_log = (tmp_path / "run.log").read_text(encoding="utf-8")
    debug_log = (tmp_path / "debug.log").read_text(encoding="utf-8")
    assert "careful" in run_log and "planning" not in run_log
    assert RUN_MARKER in debug_log and "planning" in debug_log

    # a second call replaces the handlers instead of stacking them
    logger = configure_logging(LoggingConfig())
    assert logger.handlers == []
