"""Hybrid search ranking: merges semantic and lexical hits into one list."""
from typing import List, Sequence

from app.core.enums import ResultType
from app.schemas.search import LexicalMatch, SearchResult, SemanticMatch

SIMILARITY_FLOOR = 0.3
LEXICAL_FALLBACK_THRESHOLD = 5
MAX_RESULTS = 20


def needs_lexical_fallback(semantic_count: int) -> bool:
    """Lexical matches are only consulted when semantic search found fewer than 5 hits."""
    return semantic_count < LEXICAL_FALLBACK_THRESHOLD


def filter_semantic(
    semantic_results: Sequence[SemanticMatch],
    similarity_floor: float = SIMILARITY_FLOOR,
) -> List[SemanticMatch]:
    return [m for m in semantic_results if m.similarity >= similarity_floor]


def _sort_key(indexed):
    position, result = indexed
    if result.similarity is None:
        return (1, 0.0, position)
    return (0, -result.similarity, position)


def rank_results(
    query: str,
    semantic_results: Sequence[SemanticMatch],
    lexical_results: Sequence[LexicalMatch],
    similarity_floor: float = SIMILARITY_FLOOR,
) -> List[SearchResult]:
    if not query or not query.strip():
        return []

    results: List[SearchResult] = []
    seen = set()

    kept = filter_semantic(semantic_results, similarity_floor)
    for match in kept:
        if match.id in seen:
            continue
        seen.add(match.id)
        results.append(SearchResult(
            id=match.id,
            type=ResultType.SERVICE,
            title=match.title,
            description=match.description,
            price=match.price,
            similarity=match.similarity,
            data={**match.data, "semantic_match": True},
        ))

    if needs_lexical_fallback(len(results)):
        for match in lexical_results:
            if match.id in seen:
                continue
            seen.add(match.id)
            data = dict(match.data)
            if match.type == ResultType.SERVICE:
                data["semantic_match"] = False
            results.append(SearchResult(
                id=match.id,
                type=match.type,
                title=match.title,
                description=match.description,
                image=match.image,
                price=match.price,
                rating=match.rating,
                data=data,
            ))

    ordered = sorted(enumerate(results), key=_sort_key)
    return [result for _, result in ordered][:MAX_RESULTS]
