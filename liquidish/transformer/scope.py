"""
Scope stack for the Liquidish transformer.

Holds the variable frames pushed by rendered components and loop
iterations, and tracks which file is currently being transformed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

# Frame key carrying the file a rendered component was loaded from
PATH_KEY = "path"

ScopeFrame = Dict[str, Any]


class ScopeStack:
    """
    Ordered stack of variable frames.

    The flattened view overlays frames bottom-to-top, so frames pushed
    later win on key collisions. Owned by a single transformer instance.
    """

    def __init__(self, base_path: Optional[str] = None):
        """
        Initialize an empty stack.

        Args:
            base_path: Path of the top-level invocation (used by is_at_root)
        """
        self.base_path = base_path
        self._frames: List[ScopeFrame] = []

    def push(self, frame: ScopeFrame) -> ScopeFrame:
        """Push a frame and return it."""
        self._frames.append(frame)
        logger.debug(f"Pushed scope frame #{len(self._frames)} with {len(frame)} keys")
        return frame

    def peek(self) -> Optional[ScopeFrame]:
        """Innermost frame, or None for an empty stack."""
        if not self._frames:
            return None
        return self._frames[-1]

    def pop(self) -> ScopeFrame:
        """Remove the innermost frame; an empty stack yields an empty frame."""
        if not self._frames:
            return {}
        logger.debug(f"Popped scope frame #{len(self._frames)}")
        return self._frames.pop()

    @contextmanager
    def pushed(self, frame: ScopeFrame) -> Iterator[ScopeFrame]:
        """Push a frame for the duration of the block, popping it even on errors."""
        depth = len(self._frames)
        self.push(frame)
        try:
            yield frame
        finally:
            del self._frames[depth:]

    def flatten(self) -> ScopeFrame:
        """Merge all frames into one mapping, later frames overriding earlier ones."""
        scope: ScopeFrame = {}
        for frame in self._frames:
            scope.update(frame)
        return scope

    def current_path(self) -> Optional[str]:
        """Path of the file currently being transformed."""
        for frame in reversed(self._frames):
            path = frame.get(PATH_KEY)
            if path:
                return path
        return self.base_path

    def is_at_root(self) -> bool:
        """True when no rendered component has switched the current path."""
        return self.current_path() == self.base_path

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self) -> str:
        return f"ScopeStack(depth={len(self)}, path={self.current_path()!r})"


__all__ = ["PATH_KEY", "ScopeFrame", "ScopeStack"]
