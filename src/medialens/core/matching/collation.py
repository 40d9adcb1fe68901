"""Collation keys for lenient word comparison.

Two words collate equal when they differ only in case, accents or Unicode
compatibility forms, e.g. ``Amélie`` and ``AMELIE``.
"""

from __future__ import annotations

import threading
import unicodedata

from medialens.core.normalization import normalize_punctuation


def collate(word: str) -> str:
    """Primary-strength collation string of a word."""
    decomposed = unicodedata.normalize("NFKD", word)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


class CollationKey:
    """Hashable, pre-computed comparison key of a single word.

    Attributes:
        source: The original word
        key: Its collation string
    """

    __slots__ = ("_hash", "key", "source")

    def __init__(self, source: str) -> None:
        self.source = source
        self.key = collate(source)
        self._hash = hash(self.key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CollationKey):
            return NotImplemented
        return self._hash == other._hash and self.key == other.key

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"CollationKey({self.source!r})"


class CollationDictionary:
    """Word -> CollationKey cache shared by every matcher."""

    def __init__(self) -> None:
        self._keys: dict[str, CollationKey] = {}
        self._lock = threading.Lock()

    def get(self, word: str) -> CollationKey:
        key = self._keys.get(word)
        if key is None:
            key = CollationKey(word)
            with self._lock:
                key = self._keys.setdefault(word, key)
        return key

    def keys_for(self, words: list[str]) -> tuple[CollationKey, ...]:
        return tuple(self.get(w) for w in words)

    def __len__(self) -> int:
        return len(self._keys)

    def clear(self) -> None:
        with self._lock:
            self._keys.clear()


_dictionary = CollationDictionary()


def split_keys(sequence: str) -> tuple[CollationKey, ...]:
    """Split on whitespace and key each word without further normalization."""
    return _dictionary.keys_for(sequence.split())


def tokenize_and_key(name: str) -> tuple[CollationKey, ...]:
    """Punctuation-normalize a name and return the collation key of each word.

    Example:
        >>> [k.key for k in tokenize_and_key("Amélie.Poulain")]
        ['amelie', 'poulain']
    """
    return split_keys(normalize_punctuation(name))


def synthesize(keys: tuple[CollationKey, ...] | None) -> str | None:
    """Join the source words of a key sequence with single spaces."""
    if keys is None:
        return None
    return " ".join(k.source for k in keys)


__all__ = [
    "CollationDictionary",
    "CollationKey",
    "collate",
    "split_keys",
    "synthesize",
    "tokenize_and_key",
]
