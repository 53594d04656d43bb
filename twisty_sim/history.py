"""Linear move history with undo/redo."""

from __future__ import annotations

from .moves import Move


class MoveHistory:
    """Pointer-addressed move log.

    ``pointer`` is the index of the last applied entry, ``-1`` before the first.
    Appending while entries exist past the pointer discards that redo branch.
    ``limit`` bounds the number of kept entries; the oldest is evicted first.
    """

    def __init__(self, limit: int | None = None):
        if limit is not None and (not isinstance(limit, int) or limit < 1):
            raise ValueError("History limit must be a positive integer or None")
        self.limit = limit
        self._entries: list[Move] = []
        self._pointer = -1

    @property
    def pointer(self) -> int:
        return self._pointer

    @property
    def can_undo(self) -> bool:
        return self._pointer >= 0

    @property
    def can_redo(self) -> bool:
        return self._pointer < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> tuple[Move, ...]:
        return tuple(self._entries)

    def applied(self) -> tuple[Move, ...]:
        return tuple(self._entries[: self._pointer + 1])

    def append(self, move: Move) -> None:
        del self._entries[self._pointer + 1 :]
        self._entries.append(move)
        if self.limit is not None and len(self._entries) > self.limit:
            del self._entries[: len(self._entries) - self.limit]
        self._pointer = len(self._entries) - 1

    def undo(self) -> Move | None:
        if not self.can_undo:
            return None
        move = self._entries[self._pointer]
        self._pointer -= 1
        return move

    def redo(self) -> Move | None:
        if not self.can_redo:
            return None
        self._pointer += 1
        return self._entries[self._pointer]

    def clear(self) -> None:
        self._entries = []
        self._pointer = -1
