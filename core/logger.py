import sys
import os
from loguru import logger
from core.config import BASE_DIR, settings

LOG_FILE = os.path.join(BASE_DIR, settings.LOG_FILE)

# Configure logger
logger.remove()  # Remove default handler
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level=settings.LOG_LEVEL,
)
# File logging with rotation and retention
logger.add(
    LOG_FILE,
    rotation="5 MB",
    retention="7 days",
    level=settings.LOG_LEVEL,
    compression="zip"
)
