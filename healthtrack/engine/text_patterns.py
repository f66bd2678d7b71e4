"""
Free-text pattern helpers.

Used to spot recurring symptoms, foods and lifestyle factors in the notes
people attach to their readings.
"""

import re
from collections import Counter
from typing import Iterable, List, Optional, Set


STOP_WORDS = frozenset({
    "this", "that", "with", "from", "have", "after", "before", "because",
    "could", "would", "should", "their", "other", "there", "about",
})

MIN_WORD_LENGTH = 4
MAX_COMMON_TERMS = 3

EXERCISE_TERMS = ("exercise", "walk", "gym", "workout", "run", "jog", "swim", "bike", "cycling")
STRESS_TERMS = ("stress", "anxious", "anxiety", "worried", "tense", "nervous", "upset")
SLEEP_TERMS = ("sleep", "tired", "insomnia", "rest", "fatigue", "exhausted")

_PUNCTUATION = re.compile(r"[^\w\s]")


def tokenize(text: str) -> List[str]:
    """
    Split free text into candidate terms.

    Lowercases, strips punctuation, keeps words longer than 3 characters
    and drops stop words.
    """
    cleaned = _PUNCTUATION.sub("", (text or "").lower())
    return [
        word for word in cleaned.split()
        if len(word) >= MIN_WORD_LENGTH and word not in STOP_WORDS
    ]


def token_set(text: str) -> Set[str]:
    return set(tokenize(text))


def find_common_terms(texts: Iterable[str], limit: Optional[int] = MAX_COMMON_TERMS) -> List[str]:
    """
    Find terms that show up in at least two different texts.

    Terms are ranked by how many texts mention them; ties keep the order
    in which the terms were first seen.

    Returns:
        Up to `limit` terms (all of them when limit is None)
    """
    texts = list(texts)
    if len(texts) < 2:
        return []

    counts: Counter = Counter()
    for text in texts:
        # Count each term once per text
        counts.update(dict.fromkeys(tokenize(text), 1))

    common = [(term, n) for term, n in counts.items() if n >= 2]
    common.sort(key=lambda item: item[1], reverse=True)
    return [term for term, _ in common[:limit]]


def count_term_mentions(texts: Iterable[str], terms: Iterable[str]) -> int:
    """Count the texts that mention at least one of the terms (substring match)."""
    terms = [t.lower() for t in terms]
    count = 0
    for text in texts:
        lowered = (text or "").lower()
        if any(term in lowered for term in terms):
            count += 1
    return count
