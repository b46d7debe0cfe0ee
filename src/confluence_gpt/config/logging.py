"""Loguru sink configuration."""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


def mask_secret(secret: str) -> str:
    if len(secret) <= 9:
        return "***"
    return f"{secret[:5]}...{secret[-4:]}"
