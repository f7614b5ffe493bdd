"""
File handling utilities and path operations
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

# Containers handled by the filter
MEDIA_EXTS = {'.mkv', '.mp4'}

TEMP_SUFFIX = '.temp'
BACKUP_SUFFIX = '.backup'


def format_file_size(size_bytes):
    """Convert bytes to human readable format"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"


def is_media_file(path: Path) -> bool:
    return path.suffix.lower() in MEDIA_EXTS


def find_media_files(root: Path) -> List[Path]:
    """Recursively collect MKV/MP4 files (extension case-insensitive), each once"""
    if root.is_file():
        return [root] if is_media_file(root) else []

    media_files = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if is_media_file(path) and path.is_file():
                media_files.append(path)
    return media_files


def _transient_path(src: Path, suffix: str, token: Optional[str] = None) -> Path:
    name = src.name + (f'.{token}' if token else '') + suffix
    return src.with_name(name)


def temp_path_for(src: Path, token: Optional[str] = None) -> Path:
    """`<file>.temp`, or `<file>.<token>.temp` when a run token is given"""
    return _transient_path(src, TEMP_SUFFIX, token)


def backup_path_for(src: Path, token: Optional[str] = None) -> Path:
    """`<file>.backup`, or `<file>.<token>.backup` when a run token is given"""
    return _transient_path(src, BACKUP_SUFFIX, token)


def remove_transient(path: Path) -> bool:
    """Delete a temp/backup file if present; failures are logged, not raised"""
    try:
        if path.exists():
            path.unlink()
            logger.debug("Removed %s", path)
        return True
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return False
