"""
Safe resolution of requested filenames inside the image directory.
"""
import logging
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Optional, Union

logger = logging.getLogger(__name__)


def safe_join(base: Union[str, Path], filename: str) -> Optional[Path]:
    """
    Resolve `filename` inside `base`.

    Rejects empty names, absolute paths, `..` segments and anything whose real
    path (symlinks followed) lands outside `base`.

    Args:
        base: Directory the file must live in
        filename: Name taken from the request path

    Returns:
        Path: Resolved path inside base, or None if the name was rejected
    """
    if not filename or "\x00" in filename:
        return None

    posix = PurePosixPath(filename)
    windows = PureWindowsPath(filename)
    if posix.is_absolute() or windows.is_absolute() or windows.drive:
        logger.warning(f"Rejected absolute image path: {filename!r}")
        return None
    if ".." in posix.parts or ".." in windows.parts:
        logger.warning(f"Rejected parent traversal in image path: {filename!r}")
        return None

    root = Path(base).resolve()
    candidate = (root / filename).resolve()
    if candidate != root and root not in candidate.parents:
        logger.warning(f"Rejected image path escaping {root}: {filename!r}")
        return None
    return candidate
