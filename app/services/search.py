"""Hybrid search: semantic lookup first, lexical lookup only when it falls short."""
import logging
from typing import List, Optional

from app.clients.backend import BackendClient
from app.core.config import settings
from app.core.enums import ResultType
from app.core.metrics import search_requests
from app.schemas.search import LexicalMatch, SearchResult, SemanticMatch
from app.services.ranking import needs_lexical_fallback, rank_results

logger = logging.getLogger(__name__)

DEFAULT_POPULAR_SEARCHES = ["Electricista", "Plomero", "Carpintero", "Pintor", "Limpieza", "Climatización"]


def _price(value) -> Optional[str]:
    return None if value is None else str(value)


def _service_description(row: dict) -> str:
    return row.get("description") or f"Servicio de {row.get('discipline')}"


class SearchService:

    def __init__(self, backend: BackendClient, similarity_floor: Optional[float] = None):
        self.backend = backend
        self.similarity_floor = settings.SEARCH_SIMILARITY_FLOOR if similarity_floor is None else similarity_floor

    async def _semantic_matches(self, query: str) -> List[SemanticMatch]:
        hits = await self.backend.find_similar_services(query, settings.SEARCH_SEMANTIC_LIMIT)

        matches = []
        for hit in hits:
            similarity = hit.get("similarity") or 0.0
            if similarity < self.similarity_floor:
                continue
            row = await self.backend.get_catalog_service(hit["service_id"])
            if not row:
                continue
            matches.append(SemanticMatch(
                id=str(row["id"]),
                title=row.get("service_name") or "",
                description=_service_description(row),
                price=_price(hit.get("min_price") if hit.get("min_price") is not None else row.get("min_price")),
                similarity=similarity,
                data=row,
            ))
        return matches

    async def _lexical_matches(self, term: str) -> List[LexicalMatch]:
        matches = []

        try:
            services = await self.backend.search_services(term, settings.SEARCH_LEXICAL_LIMIT)
        except Exception as e:
            logger.warning(f"Service text search failed: {e}")
            services = []
        for row in services:
            try:
                matches.append(LexicalMatch(
                    id=str(row["id"]),
                    type=ResultType.SERVICE,
                    title=row.get("service_name") or "",
                    description=_service_description(row),
                    price=_price(row.get("min_price")),
                    data=row,
                ))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed service row: {e}")

        try:
            professionals = await self.backend.search_professionals(term, settings.SEARCH_LEXICAL_LIMIT)
        except Exception as e:
            logger.warning(f"Professional text search failed: {e}")
            professionals = []
        for row in professionals:
            try:
                matches.append(LexicalMatch(
                    id=str(row["user_id"]),
                    type=ResultType.PROFESSIONAL,
                    title=row.get("full_name") or "",
                    description=row.get("specialties"),
                    image=row.get("avatar_url"),
                    rating=row.get("rating"),
                    data=row,
                ))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed professional row: {e}")

        return matches

    async def search(self, query: str, use_semantic: bool = True) -> List[SearchResult]:
        if not query or not query.strip():
            return []

        term = query.strip().lower()

        try:
            semantic: List[SemanticMatch] = []
            if use_semantic and len(query.strip()) >= settings.SEARCH_SEMANTIC_MIN_QUERY_LENGTH:
                try:
                    semantic = await self._semantic_matches(query)
                except Exception as e:
                    logger.warning(f"Semantic search failed, falling back to text search: {e}")
                    semantic = []

            lexical: List[LexicalMatch] = []
            fallback = needs_lexical_fallback(len({m.id for m in semantic}))
            if fallback:
                lexical = await self._lexical_matches(term)

            search_requests.labels(lexical_fallback=str(fallback).lower()).inc()
            return rank_results(query, semantic, lexical, self.similarity_floor)
        except Exception as e:
            logger.error(f"Search failed for {query!r}: {e}", exc_info=True)
            return []

    async def popular_searches(self) -> List[str]:
        try:
            names = await self.backend.popular_categories(6)
        except Exception as e:
            logger.warning(f"Popular searches unavailable: {e}")
            return list(DEFAULT_POPULAR_SEARCHES)
        return names or list(DEFAULT_POPULAR_SEARCHES)
