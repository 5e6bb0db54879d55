"""Pick-mode letter assignment."""

from __future__ import annotations

from collections.abc import Iterable

VALID_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


class LetterRegistry:
    """Hands out one pick letter per element id.

    A letter is kept for as long as its id stays alive, so a buffer shows the
    same hint on every redraw. The first character of the element name is
    preferred when it is free.
    """

    def __init__(self, alphabet: str = VALID_LETTERS) -> None:
        self.alphabet = alphabet
        self._by_id: dict[int, str] = {}
        self._taken: dict[str, int] = {}

    def get(self, element_id: int, name: str = "") -> str:
        """Return the letter for ``element_id``, assigning one if needed.

        Returns an empty string once the alphabet is exhausted.
        """
        letter = self._by_id.get(element_id)
        if letter is not None:
            return letter

        first = name[:1]
        candidates = [first] if first and first in self.alphabet else []
        candidates.extend(self.alphabet)
        for candidate in candidates:
            if candidate not in self._taken:
                self._by_id[element_id] = candidate
                self._taken[candidate] = element_id
                return candidate
        return ""

    def retain(self, alive: Iterable[int]) -> None:
        """Free letters of ids that no longer exist."""
        keep = set(alive)
        for element_id in [i for i in self._by_id if i not in keep]:
            letter = self._by_id.pop(element_id)
            del self._taken[letter]

    def find(self, letter: str) -> int | None:
        """Return the id holding ``letter``."""
        return self._taken.get(letter)

    def __len__(self) -> int:
        return len(self._by_id)
