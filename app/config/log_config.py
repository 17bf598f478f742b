"""Logging setup from settings.LOGGING"""
import logging.config

from config import settings


def configure_logging() -> None:
    """Apply the LOGGING dict from settings"""
    logging.config.dictConfig(settings.LOGGING)
