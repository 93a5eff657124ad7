"""Name normalisation and display casing for critter and category names."""

from __future__ import annotations

import unicodedata


def normalize_name_key(value: str) -> str:
    """Return the lookup key used to compare category, group and species names.

    Keys are NFKC-normalised, case-folded and have their whitespace collapsed, so
    ``"  Sea   Stars"`` and ``"sea stars"`` share one key.
    """

    text = unicodedata.normalize("NFKC", value)
    text = text.casefold()
    return " ".join(text.split())


def title_case(value: str) -> str:
    """Capitalise every word (and every hyphenated part of a word)."""

    words = value.split()
    return " ".join("-".join(_capitalize(part) for part in word.split("-")) for word in words)


def sentence_case(value: str) -> str:
    """Capitalise the first word only, e.g. ``"chromodoris Annae"`` -> ``"Chromodoris annae"``."""

    text = " ".join(value.split()).lower()
    return _capitalize(text)


def _capitalize(word: str) -> str:
    if not word:
        return word
    return word[0].upper() + word[1:].lower()
