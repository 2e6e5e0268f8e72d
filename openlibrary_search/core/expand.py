from __future__ import annotations

from typing import List

from openlibrary_search.core.models import CandidatePair


def generate_candidate_pairs(search_string: str) -> List[CandidatePair]:
    """
    Guess (title, author) splits for a free-text search string.

    Open Library ranks poorly when title and author share one field, so the
    trailing one and two words are offered as a candidate author:

        "Swift Programming" -> ("Swift Programming", "")
                               ("Swift", "Programming")
                               ("", "Swift Programming")

    Only "" short-circuits. Whitespace is not trimmed, and words come from
    splitting on single spaces, so "  " yields degenerate pairs.
    """
    if search_string == "":
        return []

    words = search_string.split(" ")
    pairs = [CandidatePair(title=search_string, author="")]
    if len(words) >= 1:
        pairs.append(CandidatePair(title=" ".join(words[:-1]), author=words[-1]))
    if len(words) >= 2:
        pairs.append(CandidatePair(title=" ".join(words[:-2]), author=" ".join(words[-2:])))
    return pairs
