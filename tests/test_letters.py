"""Tests for pick letters."""

from __future__ import annotations

from bufferbar.letters import VALID_LETTERS, LetterRegistry


class TestLetterRegistry:
    """Tests for letter assignment."""

    def test_prefers_first_character(self):
        registry = LetterRegistry()
        assert registry.get(1, "main.py") == "m"
        assert registry.get(2, "models.py") == "a"

    def test_stable_per_id(self):
        """An id keeps its letter across calls, whatever the name."""
        registry = LetterRegistry()
        letter = registry.get(1, "main.py")
        assert registry.get(1, "other.py") == letter
        assert registry.find(letter) == 1

    def test_non_letter_names_use_alphabet(self):
        registry = LetterRegistry()
        assert registry.get(1, "[No Name]") == "a"
        assert registry.get(2, "_init.py") == "b"

    def test_retain_frees_letters(self):
        """Closed ids give their letter back."""
        registry = LetterRegistry()
        registry.get(1, "main.py")
        registry.get(2, "util.py")
        registry.retain([2])
        assert len(registry) == 1
        assert registry.find("m") is None
        assert registry.get(3, "make.py") == "m"

    def test_exhausted_alphabet(self):
        registry = LetterRegistry(alphabet="ab")
        assert registry.get(1) == "a"
        assert registry.get(2) == "b"
        assert registry.get(3) == ""
        assert len(registry) == 2

    def test_default_alphabet(self):
        assert len(VALID_LETTERS) == 52
