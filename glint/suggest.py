"""Did-you-mean suggestions based on Levenshtein edit distance."""

from __future__ import annotations

from typing import Iterable, List, Optional


def edit_distance(a: str, b: str) -> int:
    """Return the Levenshtein distance between `a` and `b`."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1,         # deletion
                               current[j - 1] + 1,      # insertion
                               previous[j - 1] + cost))  # substitution
        previous = current
    return previous[-1]


def default_threshold(name: str) -> int:
    # one edit for short names, two from six characters on
    return max(1, min(2, len(name) // 3))


def suggest(name: str, candidates: Iterable[str], max_distance: Optional[int] = None) -> List[str]:
    """Return candidates close to `name`, best match first.

    A candidate qualifies when its distance is within `max_distance`
    (derived from the length of `name` when omitted) and strictly smaller
    than the longer of the two strings, so single letters never "match"
    each other. Ties are broken alphabetically.
    """
    limit = default_threshold(name) if max_distance is None else max_distance
    scored = []
    for candidate in set(candidates):
        if candidate == name:
            continue
        distance = edit_distance(name, candidate)
        if distance <= limit and distance < max(len(name), len(candidate)):
            scored.append((distance, candidate))
    scored.sort()
    return [candidate for _, candidate in scored]
