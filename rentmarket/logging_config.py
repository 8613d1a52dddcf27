import logging
import logging.handlers
from pathlib import Path
from typing import Optional


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    file_level: Optional[str] = None,
) -> None:
    """
    Configure logging for rental market simulation runs.

    The root logger and console use `log_level`. The rotating log file uses
    `file_level` when given (e.g. "DEBUG" to keep per-agent events on disk
    while the console stays quiet), otherwise `log_level`.
    """
    log_dir = Path(log_dir) if log_dir is not None else Path("logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "rentmarket.log"

    # Root logger
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return  # Already configured

    level = getattr(logging, log_level.upper(), logging.INFO)
    file_log_level = getattr(logging, file_level.upper(), level) if file_level else level
    root_logger.setLevel(min(level, file_log_level))

    # File handler with rotation (5MB max, keep 3 backups)
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3
    )
    file_handler.setLevel(file_log_level)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info("Logging initialized (level=%s)", log_level)
