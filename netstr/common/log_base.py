"""
Logging setup based on Loguru.

The library is silent until ``setup_logging`` is called; applications that
embed netstr can instead call ``logger.enable("netstr")`` with their own
sinks.
"""

import sys
from datetime import datetime
from pathlib import Path

from loguru import logger


class LogConfig:
    """Log formatting helpers."""

    VALID_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

    @staticmethod
    def _format_extra(record):
        """Render bound extra fields as key=value pairs."""
        extra = {k: v for k, v in record["extra"].items() if k != "component"}
        if not extra:
            return ""
        return " | ".join(f"{k}={v}" for k, v in extra.items())

    @staticmethod
    def console_formatter(record):
        """Colored console format: time | level | module:function:line | message"""
        base = (
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

        extra_str = LogConfig._format_extra(record)
        if extra_str:
            # escape braces so loguru does not treat values as format fields
            extra_str = extra_str.replace("{", "{{").replace("}", "}}")
            base += f" | <dim>{extra_str}</dim>"

        return base + "\n{exception}"

    @staticmethod
    def file_formatter(record):
        """Plain file format, one record per line."""
        base = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"

        extra_str = LogConfig._format_extra(record)
        if extra_str:
            extra_str = extra_str.replace("{", "{{").replace("}", "}}")
            base += f" | {extra_str}"

        return base + "\n{exception}"


def setup_logging(
    level: str = "INFO", log_dir: str | Path | None = None, environment: str = "development"
) -> None:
    """
    Configure Loguru sinks and enable netstr log output.

    Args:
        level: Minimum log level
        log_dir: Directory for the rotating log file (None = no file)
        environment: "production" logs to file only, without diagnostics
    """
    level = level.upper()
    if level not in LogConfig.VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Must be one of {LogConfig.VALID_LEVELS}"
        )

    logger.remove()
    production = environment == "production"

    # stdout carries frame data in the CLI, so the console sink uses stderr
    if not production or log_dir is None:
        logger.add(
            sys.stderr,
            format=LogConfig.console_formatter,
            level=level,
            colorize=None,
            backtrace=not production,
            diagnose=not production,
        )

    if log_dir is not None:
        log_dir_path = Path(log_dir)
        log_dir_path.mkdir(parents=True, exist_ok=True)

        today = datetime.now().strftime("%Y%m%d")
        logger.add(
            str(log_dir_path / f"netstr_{today}.log"),
            format=LogConfig.file_formatter,
            level=level,
            rotation="1 day",
            retention="30 days",
            compression="gz",
            encoding="utf-8",
            backtrace=not production,
            diagnose=False,
        )

    logger.enable("netstr")


def get_logger(name: str):
    """Return the shared logger bound to a component name."""
    return logger.bind(component=name)


__all__ = [
    "setup_logging",
    "get_logger",
    "logger",
]
