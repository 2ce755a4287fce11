"""
Duplicate removal for parsed transcripts.

Auto-generated captions roll each line forward into the next cue, so the
same sentence or the same few words show up again and again. Cleaning runs
in three passes:

1. sentence dedup (case-insensitive, first occurrence and its casing kept)
2. n-gram dedup for n = 5, 4, 3, 2 in that order; later occurrences of a
   repeated window are removed as a union of word positions
3. punctuation and whitespace normalization, terminal period

The passes repeat until the text is stable.

The decreasing n order matters: a repeated 5-word run is removed as a whole
before its 2-word pieces get a chance to be flagged on their own.
"""

from __future__ import annotations

import re
from typing import Dict, List, Set

SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
WHITESPACE_PATTERN = re.compile(r"\s+")
DOUBLE_PERIOD_PATTERN = re.compile(r"\s*\.\s*\.")
PUNCTUATION_SPACING_PATTERN = re.compile(r"\s*([.!?])\s*")
TERMINAL_PUNCTUATION = (".", "!", "?")

NGRAM_SIZES = (5, 4, 3, 2)
REPETITION_WARNING_THRESHOLD = 3.0


def dedupe_sentences(text: str) -> List[str]:
    """Split on sentence punctuation and keep the first copy of each sentence."""
    seen: Set[str] = set()
    unique: List[str] = []
    for sentence in SENTENCE_SPLIT_PATTERN.split(text):
        sentence = sentence.strip()
        normalized = sentence.lower()
        if normalized and normalized not in seen:
            seen.add(normalized)
            unique.append(sentence)
    return unique


def remove_repeated_ngrams(text: str, n: int) -> str:
    """
    Drop every repeat of a word n-gram after its first occurrence.

    Windows slide by one word and compare case-insensitively. Overlapping
    repeats are handled by collecting positions into a set before filtering.
    """
    words = text.split()
    if len(words) < n:
        return " ".join(words)

    occurrences: Dict[str, List[int]] = {}
    for start in range(len(words) - n + 1):
        window = " ".join(words[start:start + n]).lower()
        occurrences.setdefault(window, []).append(start)

    to_remove: Set[int] = set()
    for starts in occurrences.values():
        for start in starts[1:]:
            to_remove.update(range(start, start + n))

    return " ".join(word for index, word in enumerate(words) if index not in to_remove)


def _normalize_punctuation(text: str) -> str:
    text = DOUBLE_PERIOD_PATTERN.sub(".", text)
    text = WHITESPACE_PATTERN.sub(" ", text)
    text = PUNCTUATION_SPACING_PATTERN.sub(r"\1 ", text)
    return text.strip()


def _clean_pass(text: str) -> str:
    result = ". ".join(dedupe_sentences(text))

    for n in NGRAM_SIZES:
        result = remove_repeated_ngrams(result, n)

    result = _normalize_punctuation(result)
    if result and not result.endswith(TERMINAL_PUNCTUATION):
        result += "."
    return result


def clean_transcript(text: str) -> str:
    """
    Return text with duplicate sentences and repeated n-grams removed.

    N-gram removal can leave two sentences identical, so passes repeat until
    the text stops changing. Every pass after the first either drops words
    or returns its input, so the loop ends, and the result is a fixed point:
    cleaning it again returns it unchanged.
    """
    if not text or not text.strip():
        return ""

    result = _clean_pass(WHITESPACE_PATTERN.sub(" ", text).strip())
    while True:
        again = _clean_pass(result)
        if again == result:
            return result
        result = again


def repetition_ratio(text: str) -> float:
    """Words per distinct (lowercased) word; 0.0 for empty text."""
    words = text.split()
    if not words:
        return 0.0
    return len(words) / len({word.lower() for word in words})
