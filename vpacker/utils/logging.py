"""
Configure project-wide logging.
"""
import logging
from datetime import datetime

from rich.logging import RichHandler
from rich.text import Text

# Emoji icons for log levels to enhance readability
LEVEL_EMOJI = {
    "DEBUG":    "🐛",
    "INFO":     "ℹ️",
    "WARNING":  "⚠️",
    "ERROR":    "❌",
    "CRITICAL": "🔥",
}

RUN_MARKER = "VPACKER RUN START"


class EmojiFormatter(logging.Formatter):
    """
    Logging Formatter that injects an emoji based on the log level.
    """
    def format(self, record):
        record.emoji = LEVEL_EMOJI.get(record.levelname, "")
        return super().format(record)


class EmojiRichHandler(RichHandler):
    """RichHandler whose level column is prefixed with the level's emoji."""

    def get_level_text(self, record):  # noqa: A003
        level = record.levelname
        style = f"logging.level.{level.lower()}"
        emoji = LEVEL_EMOJI.get(level, "")
        # pad level name to width 8
        padded = level.ljust(8)
        return Text.assemble((emoji + ' ' + padded, style))


def configure_logging(cfg, verbose=False):
    """
    Configure the ``vpacker`` logger:
      - rich console handler at DEBUG if verbose
      - file handler at cfg.level if cfg.file
      - debug file handler at DEBUG if cfg.debug_file
    Returns the ``vpacker`` logger.
    """
    logger = logging.getLogger("vpacker")
    logger.setLevel(logging.DEBUG)
    # drop handlers from a previous configure_logging call in the same process
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt_str = "%(emoji)s %(asctime)s %(name)s %(levelname)s: %(message)s"
    fmt = EmojiFormatter(fmt_str, datefmt="[%X]")

    if verbose:
        logger.addHandler(EmojiRichHandler(
            level=logging.DEBUG,
            markup=False,
            show_time=True,
            show_level=True,
            show_path=False,
        ))
    if getattr(cfg, 'file', None):
        fh = logging.FileHandler(cfg.file, encoding="utf-8")
        fh.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    if getattr(cfg, 'debug_file', None):
        dfh = logging.FileHandler(cfg.debug_file, encoding="utf-8")
        dfh.setLevel(logging.DEBUG)
        dfh.setFormatter(fmt)
        logger.addHandler(dfh)

    # ------------------------------------------------------------------
    # Big ASCII header at the beginning of every run so runs appended to
    # the same log file stay distinguishable.
    # ------------------------------------------------------------------
    run_header = (
        "=" * 80 +
        f"\n{RUN_MARKER} {datetime.now():%Y-%m-%d %H:%M:%S}\n" +
        "=" * 80
    )
    logger.info(run_header)
    return logger


def get_logger(name: str):
    return logging.getLogger(f"vpacker.{name}")
