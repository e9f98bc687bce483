"""
Path utility module
Resolves the data directory used for the database, logs and exported reports
"""

from pathlib import Path
from typing import Optional

from seizuretrack.config.loader import get_app_home
from seizuretrack.core.logger import get_logger

logger = get_logger(__name__)


def ensure_dir(dir_path: Path) -> Path:
    """
    Ensure directory exists, create if it doesn't

    Args:
        dir_path: Directory path

    Returns:
        Directory path
    """
    dir_path = Path(dir_path)
    if not dir_path.exists():
        dir_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created directory: {dir_path}")
    return dir_path


def get_data_dir(subdir: Optional[str] = None) -> Path:
    """
    Get data directory (for storing the database, logs, reports)

    Uses ``$SEIZURETRACK_HOME`` when set, otherwise ``~/.config/seizuretrack``.

    Args:
        subdir: Optional subdirectory name

    Returns:
        Data directory path
    """
    data_dir = get_app_home()
    logger.debug(f"Using data directory: {data_dir}")

    if subdir:
        data_dir = data_dir / subdir

    return ensure_dir(data_dir)


def get_logs_dir() -> Path:
    """Get logs directory"""
    return get_data_dir("logs")


def get_reports_dir() -> Path:
    """Get default directory for exported reports"""
    return get_data_dir("reports")


def get_db_path(db_name: str = "seizuretrack.db") -> Path:
    """
    Get database file path

    Args:
        db_name: Database file name

    Returns:
        Database file path
    """
    return get_data_dir() / db_name
