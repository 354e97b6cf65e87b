"""
Logging Setup
loguru sinks: result line on stdout, diagnostics on stderr, optional log file
"""

import sys
from typing import Optional
from loguru import logger

STDERR_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def _is_result(record) -> bool:
    return record["extra"].get("result", False)


def _is_diagnostic(record) -> bool:
    return not record["extra"].get("result", False)


def configure_logging(level: str = "WARNING", log_file: Optional[str] = None):
    """
    Replace loguru's default handler with the deployer's sinks

    Args:
        level: Minimum level for stderr
        log_file: Path of an additional DEBUG log file (None = no file)
    """
    logger.remove()

    # Only records bound with result=True reach stdout
    logger.add(
        sys.stdout,
        format="{message}",
        filter=_is_result,
        level="TRACE",
        colorize=False
    )
    # diagnose=False keeps local variables (private keys) out of tracebacks
    logger.add(
        sys.stderr,
        format=STDERR_FORMAT,
        filter=_is_diagnostic,
        level=level.upper(),
        backtrace=False,
        diagnose=False
    )

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format=FILE_FORMAT,
            level="DEBUG",
            diagnose=False
        )


def log_result(message: str):
    """Write a line to stdout through the result sink"""
    logger.bind(result=True).success(message)
