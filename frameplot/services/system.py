import logging
import os
import time

import psutil

from frameplot.core.config import TEMP_DIR

logger = logging.getLogger(__name__)


def log_mem(msg: str) -> None:
    """Log RSS memory usage in MB with a short message.

    Args:
        msg: Context string to prefix the memory log.
    """
    process = psutil.Process(os.getpid())
    mem_mb = process.memory_info().rss / 1024**2
    logger.debug("%s - Memory usage: %.2f MB", msg, mem_mb)


def ensure_temp_dir(temp_dir: str = TEMP_DIR) -> str:
    os.makedirs(temp_dir, exist_ok=True)
    return temp_dir


def cleanup_old_files(
    temp_dir: str = TEMP_DIR, max_age_seconds: int = 86400, prefix: str = ""
) -> int:
    """Delete stale animation files from the private temp directory.

    Args:
        temp_dir: Directory holding temporary animation outputs.
        max_age_seconds: Max age threshold; older files are removed.
        prefix: Only file names starting with this are considered.

    Returns:
        Number of files removed.
    """
    if not os.path.isdir(temp_dir):
        return 0
    now = time.time()
    removed = 0
    for fname in os.listdir(temp_dir):
        if not fname.startswith(prefix):
            continue
        fpath = os.path.join(temp_dir, fname)
        if os.path.isfile(fpath) and (now - os.path.getmtime(fpath)) > max_age_seconds:
            try:
                os.remove(fpath)
                removed += 1
            except OSError as e:
                logger.warning("could not remove stale file %s: %s", fpath, e)
    return removed
