import os
import sys
from pathlib import Path

from loguru import logger

log_dir_setting = os.getenv("DOCSYNC_LOG_DIR", "logs")
log_level = os.getenv("DOCSYNC_LOG_LEVEL", "INFO").upper()

logger.remove()
logger.add(
    sys.stderr,
    level=log_level,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
)

# An empty DOCSYNC_LOG_DIR turns the file sink off.
if log_dir_setting:
    log_file = Path(log_dir_setting) / "docsync_{time}.log"
    logger.add(
        log_file,
        rotation="256 MB",
        retention="10 days",
        compression="zip",
        encoding="utf-8",
        level="DEBUG",
    )

if __name__ == "__main__":
    logger.debug("debug message")
    logger.info("info message")
    logger.success("success message")
    logger.warning("warning message")
    logger.error("error message")
