"""
Fuzzy token matching for OCR-garbled menu words.

Similarity is normalised edit distance:

    similarity(a, b) = 1 - levenshtein(longer, shorter) / len(longer)

"fryes" vs "fries" -> one substitution over five chars -> 0.8, a match.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Sequence

FUZZY_MATCH_THRESHOLD = 0.7   # similarity strictly above this is a match

_WHITESPACE_RE = re.compile(r"\s+")


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance (insert / delete / substitute, unit cost)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        cur = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                cur[j] = prev[j - 1]
            else:
                cur[j] = min(prev[j - 1], cur[j - 1], prev[j]) + 1
        prev = cur
    return prev[len(b)]


def similarity(a: str, b: str) -> float:
    """Return similarity ratio (0.0-1.0) between two tokens."""
    longer, shorter = (a, b) if len(a) > len(b) else (b, a)
    if not longer:
        return 1.0
    return (len(longer) - edit_distance(longer, shorter)) / len(longer)


def is_fuzzy_match(a: str, b: str) -> bool:
    return similarity(a, b) > FUZZY_MATCH_THRESHOLD


def tokenize(text: str) -> List[str]:
    """Whitespace-split, lowercased token stream."""
    return [t for t in _WHITESPACE_RE.split(text.lower()) if t]


def find_similar_word(word: str, tokens: Iterable[str]) -> bool:
    """True if any token in the stream fuzzy-matches `word`."""
    return any(is_fuzzy_match(word, tok) for tok in tokens)


def word_overlap(name: str, text: str, tokens: Sequence[str] | None = None) -> int:
    """
    Count how many of `name`'s words occur in `text`.

    A word counts when it appears verbatim (as a substring of the lowercased
    text) or, failing that, fuzzy-matches one of the text's tokens.
    """
    haystack = text.lower()
    if tokens is None:
        tokens = tokenize(haystack)
    hits = 0
    for word in tokenize(name):
        if word in haystack or find_similar_word(word, tokens):
            hits += 1
    return hits
