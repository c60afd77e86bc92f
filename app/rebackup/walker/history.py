"""Visit history for a single walk.

Tracks the paths already processed so that each filesystem item is walked
at most once, even when symbolic links make the same location reachable
through several paths.
"""

from pathlib import Path


class VisitHistory:
    """Set of paths already walked on.

    A history belongs to exactly one walk: it is created when the walk
    starts, passed explicitly down the recursion, and discarded afterwards.
    Rules never get access to it.
    """

    def __init__(self) -> None:
        self._visited: set[Path] = set()

    def try_visit(self, path: Path) -> bool:
        """Register a path.

        Args:
            path: Absolute path to register.

        Returns:
            True if this is the first visit (the path is now registered),
            False if the path was already registered.
        """
        if path in self._visited:
            return False
        self._visited.add(path)
        return True

    def __contains__(self, path: object) -> bool:
        return path in self._visited

    def __len__(self) -> int:
        return len(self._visited)
