"""Ranked text rendering of a citation tally."""

from .types import AnalysisResult, CitationTally

TOP_N = 10


def top_cited(tally: CitationTally, limit: int = TOP_N) -> list[tuple[str, int]]:
    """Most frequent titles, count descending.

    sorted() is stable, so equal counts keep tally (first-encountered) order.
    """
    ranked = sorted(tally.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def format_report(result: AnalysisResult, limit: int = TOP_N) -> str:
    if not result.ok or result.tally is None:
        return f"Error: {result.error}"

    lines = []
    for index, (title, count) in enumerate(top_cited(result.tally, limit), start=1):
        lines.append(f"{index}. {title}")
        lines.append(f"   Cited {count} times")
    return "\n".join(lines)
