"""Fixed character universe for generated secrets."""

from __future__ import annotations

LOWER_CASE_LETTERS = "abcdefghijklmnopqrstuvwxyz"
UPPER_CASE_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NUMBERS = "0123456789"
SPECIAL_CHARS = "~!@#$%^&*()_-+=[]{}/\\|?,.<>'\""

CHARACTER_CLASSES = (LOWER_CASE_LETTERS, UPPER_CASE_LETTERS, NUMBERS, SPECIAL_CHARS)
CHARACTER_UNIVERSE = "".join(CHARACTER_CLASSES)
