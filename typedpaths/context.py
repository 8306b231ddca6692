"""Process-wide state consulted when paths are built and when the sandbox is checked."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from . import system
from .config import get_settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PathContext:
    """
    The working directory, home directory and sandbox flag of this process.

    Reads go straight to the OS every time, so a path captures the current
    directory at the moment it is built and never again. Nothing here is
    synchronized: changing the working directory while other threads build
    relative paths is a race the caller has to prevent.
    """

    sandbox: bool = True

    def current_directory(self) -> str:
        return system.current_directory()

    def change_directory(self, path: str | os.PathLike[str]) -> None:
        system.change_directory(path)
        logger.debug("current_directory_changed", extra={"path": os.fspath(path)})

    def home_directory(self) -> str:
        return system.home_directory()

    def resolve_symlinks(self, path: str | os.PathLike[str]) -> str:
        return system.resolve_symlinks(path)


@lru_cache
def get_context() -> PathContext:
    """Return the shared context, seeded from the settings on first use."""

    return PathContext(sandbox=get_settings().sandbox)
