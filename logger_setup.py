# logger_setup.py
"""Configures the application logger."""

import logging

from config import LOG_LEVEL

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Create specific logger instance
logger = logging.getLogger('chef_nano')

def get_logger():
    """Returns the configured logger instance."""
    return logger
