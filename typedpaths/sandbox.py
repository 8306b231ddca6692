"""Pre-flight check that keeps changes to the file system inside the working directory."""

from __future__ import annotations

import logging
from typing import Optional

from .context import PathContext, get_context
from .errors import OutsideSandboxError
from .paths import DirectoryPath, Path

logger = logging.getLogger(__name__)


def is_in_sandbox(path: Path, *, context: Optional[PathContext] = None) -> bool:
    """
    Whether ``path`` may be changed.

    True if the sandbox is disabled, or if the current working directory is a
    parent of the path itself or of the path with its symbolic links
    resolved. The working directory itself is not inside the sandbox.
    """
    ctx = context or get_context()
    if not ctx.sandbox:
        return True

    current = DirectoryPath.current(context=ctx)
    if current.is_a_parent_of(path):
        return True
    return current.is_a_parent_of(path.resolving_symlinks(context=ctx))


def verify_is_in_sandbox(path: Path, *, context: Optional[PathContext] = None) -> None:
    """
    Raise unless ``path`` may be changed.

    This is cooperative: the file system can change between this check and
    the operation it guards.

    Raises:
        OutsideSandboxError: If the sandbox is enabled and ``path`` is outside it.
    """
    ctx = context or get_context()
    if is_in_sandbox(path, context=ctx):
        return

    current = ctx.current_directory()
    logger.warning(
        "sandbox_rejected",
        extra={"path": path.absolute_string, "current_directory": current},
    )
    raise OutsideSandboxError(path, current_directory=current)
