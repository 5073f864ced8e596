import os
import logging

logger = logging.getLogger(__name__)

def ensure_directory(path: str) -> bool:
    """Creates a directory (and any missing parents) if it doesn't exist."""
    if not os.path.exists(path):
        os.makedirs(path)
        logger.info(f"Created directory: {path}")
        return True
    return False

def create_file_if_missing(path: str, content: str) -> bool:
    """Writes a starter file unless one is already there. Returns True if written."""
    if os.path.exists(path):
        logger.debug(f"Keeping existing file: {path}")
        return False
    parent = os.path.dirname(path)
    if parent:
        ensure_directory(parent)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info(f"Created file: {path}")
    return True
