# crflearn/data/dictionary.py
from __future__ import annotations

from typing import Dict, List


class Dictionary:
    """
    String <-> dense id symbol table (attributes or labels).

    Semantics:
    - ids are assigned 0, 1, 2, ... in first-seen order
    - shared by every ingestion call and by the trainer
    - not thread-safe
    """

    def __init__(self):
        self._ids: Dict[str, int] = {}
        self._strings: List[str] = []
        self.released = False

    # --------------------------------------------------
    def get(self, s: str) -> int:
        """Return the id of ``s``, interning it when unseen."""
        self._check_alive()
        sid = self._ids.get(s)
        if sid is None:
            sid = len(self._strings)
            self._ids[s] = sid
            self._strings.append(s)
        return sid

    def to_id(self, s: str) -> int:
        """Lookup only; -1 when ``s`` was never interned."""
        return self._ids.get(s, -1)

    def to_string(self, sid: int) -> str:
        if sid < 0 or sid >= len(self._strings):
            raise KeyError(f"No string for id {sid}")
        return self._strings[sid]

    def num(self) -> int:
        return len(self._strings)

    def __len__(self) -> int:
        return len(self._strings)

    def __contains__(self, s: object) -> bool:
        return s in self._ids

    # --------------------------------------------------
    def release(self) -> None:
        if self.released:
            return
        self._ids.clear()
        self._strings.clear()
        self.released = True

    def _check_alive(self) -> None:
        if self.released:
            raise RuntimeError("Dictionary already released")
