"""Merging of per-chunk analyses into one result."""

from collections.abc import Iterable, Sequence

from answerlens.analysis.models import AnalysisResult, ModelMetadata, Suggestion


def dedup_key(suggestion: Suggestion, prefix_length: int) -> tuple[str, str]:
    """Category plus the whitespace-normalized, lower-cased leading content."""
    normalized = " ".join(suggestion.content.lower().split())
    return suggestion.category.value, normalized[:prefix_length]


def deduplicate_suggestions(
    suggestions: Iterable[Suggestion], prefix_length: int = 50
) -> list[Suggestion]:
    """Drop suggestions whose dedup key was already seen. First occurrence wins."""
    seen: set[tuple[str, str]] = set()
    unique: list[Suggestion] = []
    for suggestion in suggestions:
        key = dedup_key(suggestion, prefix_length)
        if key in seen:
            continue
        seen.add(key)
        unique.append(suggestion)
    return unique


def _unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


def synthesize(
    chunk_results: Sequence[tuple[int, AnalysisResult]],
    *,
    prefix_length: int = 50,
) -> AnalysisResult:
    """Combine (chunk_index, result) pairs, already in chunk order.

    Summaries are labelled with their 1-based section number so a reader can
    map them back to the document.
    """
    sections = "\n\n".join(
        f"Section {index + 1}: {result.summary}" for index, result in chunk_results
    )
    results = [result for _, result in chunk_results]
    return AnalysisResult(
        summary=f"Document Analysis ({len(results)} sections):\n\n{sections}",
        suggestions=deduplicate_suggestions(
            (s for r in results for s in r.suggestions), prefix_length
        ),
        insights=_unique(i for r in results for i in r.insights),
        study_tips=_unique(t for r in results for t in r.study_tips),
        related_concepts=_unique(c for r in results for c in r.related_concepts),
        metadata=ModelMetadata(
            model=next((r.metadata.model for r in results if r.metadata.model), ""),
            tokens_in=sum(r.metadata.tokens_in for r in results),
            tokens_out=sum(r.metadata.tokens_out for r in results),
            chunk_count=len(results),
            parse_mode="synthesized",
        ),
    )
