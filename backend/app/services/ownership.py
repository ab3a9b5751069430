import logging
import os
import shutil
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class OwnershipAdjuster(Protocol):
    def adjust(self, path: Path) -> None: ...


class NoopOwnership:
    """Leaves ownership untouched."""

    def adjust(self, path: Path) -> None:
        return None


class ChownOwnership:
    """Hands written files to the web server's user, best effort.

    ``owner`` is ``user`` or ``user:group``. Failures are logged and
    swallowed so an upload never fails on this step.
    """

    def __init__(self, owner: str) -> None:
        user, _, group = owner.partition(":")
        self.user = user or None
        self.group = group or None

    def adjust(self, path: Path) -> None:
        if not hasattr(os, "chown"):
            return
        try:
            shutil.chown(path, user=self.user, group=self.group)
        except (OSError, LookupError, ValueError) as exc:
            logger.warning("Failed to chown %r (not critical): %s", str(path), exc)
        else:
            logger.info("Changed ownership of %r to %s:%s", str(path), self.user or "", self.group or "")


def build_ownership_adjuster(owner: str | None) -> OwnershipAdjuster:
    if not owner or owner == ":":
        return NoopOwnership()
    return ChownOwnership(owner)
