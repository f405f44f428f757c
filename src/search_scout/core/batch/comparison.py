"""Cross-search comparison for batch results."""

from typing import Any, List, Sequence, Tuple

from search_scout.core.batch.models import BatchComparison, BatchSearchResult, SearchTask


def _shared_terms(queries: Sequence[str]) -> List[str]:
    term_sets = [set(query.lower().split()) for query in queries]
    shared = set.intersection(*term_sets) if term_sets else set()
    # Keep first-query order so output is stable.
    ordered: List[str] = []
    for term in queries[0].lower().split():
        if term in shared and term not in ordered:
            ordered.append(term)
    return ordered


def _shared_tags(results: Sequence[BatchSearchResult]) -> List[str]:
    shared = set(results[0].tags)
    for result in results[1:]:
        shared &= set(result.tags)
    return [tag for tag in results[0].tags if tag in shared]


def _result_spread(results: Sequence[BatchSearchResult]) -> List[str]:
    lowest = min(results, key=lambda r: r.result_count)
    highest = max(results, key=lambda r: r.result_count)
    if lowest.result_count == highest.result_count:
        return []
    return [
        f"Result counts range from {lowest.result_count} ({lowest.name})"
        f" to {highest.result_count} ({highest.name})"
    ]


def _filter_differences(tasks: Sequence[SearchTask]) -> List[str]:
    keys: List[str] = []
    for task in tasks:
        for key in task.filters:
            if key not in keys:
                keys.append(key)

    differences = []
    for key in keys:
        values: List[Tuple[str, Any]] = [(task.name, task.filters.get(key)) for task in tasks]
        if len({repr(value) for _, value in values}) <= 1:
            continue
        rendered = ", ".join(
            f"{name}={value if value not in (None, '', [], ()) else '(none)'}"
            for name, value in values
        )
        differences.append(f"Filter '{key}' differs: {rendered}")
    return differences


def build_comparisons(
    tasks: Sequence[SearchTask], results: Sequence[BatchSearchResult]
) -> List[BatchComparison]:
    """Compare the searches of a batch.

    Args:
        tasks: Tasks that ran, in order, one per result.
        results: Their results.

    Returns:
        A single "Overall Analysis" comparison, or an empty list when fewer
        than two searches ran.
    """
    if len(results) < 2:
        return []

    total = sum(result.result_count for result in results)
    counts = ", ".join(f"{result.name}: {result.result_count}" for result in results)
    comparison = BatchComparison(
        name="Overall Analysis",
        search_names=[result.name for result in results],
        summary=f"Analyzed {len(results)} searches with {total} total results ({counts})",
    )

    terms = _shared_terms([result.query for result in results])
    if terms:
        comparison.common_patterns.append(f"Shared query terms: {', '.join(terms)}")
    tags = _shared_tags(results)
    if tags:
        comparison.common_patterns.append(f"Shared tags: {', '.join(tags)}")

    comparison.key_differences.extend(_result_spread(results))
    comparison.key_differences.extend(_filter_differences(tasks))

    return [comparison]

