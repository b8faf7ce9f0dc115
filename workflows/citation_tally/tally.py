"""Citation tally merging."""

from collections.abc import Iterable

from .types import CitationTally


def merge_tallies(*tallies: CitationTally) -> CitationTally:
    """Sum counts per title across tallies.

    Associative and commutative in value; key order follows first
    appearance across the arguments, left to right. Inputs are not mutated.
    """
    merged: CitationTally = {}
    for tally in tallies:
        for title, count in tally.items():
            merged[title] = merged.get(title, 0) + count
    return merged


def fold_tallies(tallies: Iterable[CitationTally]) -> CitationTally:
    """merge_tallies over an iterable (e.g. per-child results)."""
    return merge_tallies(*tallies)
