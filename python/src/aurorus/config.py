"""
aurorus Logging Configuration

Simple structured logging shared by every aurorus module.
"""

import logging
import os

import structlog

logging.basicConfig(
    level=os.getenv("AURORUS_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

aurorus_logger = structlog.get_logger("aurorus")
