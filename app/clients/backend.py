"""Async client for the managed backend (PostgREST tables, RPC functions and edge functions)."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.errors import BackendError
from app.core.metrics import backend_calls

logger = logging.getLogger(__name__)

EMBEDDING_DIMENSIONS = 384

CATALOG_COLUMNS = "id,service_name,description,discipline,min_price,price_type,is_active"
PROFESSIONAL_COLUMNS = "user_id,full_name,avatar_url,specialties,rating,completed_jobs"


class BackendClient:
    """Thin wrapper over the backend REST surface. Every non-2xx answer raises BackendError."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers=headers,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, params=params, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            backend_calls.labels(operation=operation, status="error").inc()
            logger.error(f"Backend {operation} failed with status {exc.response.status_code}")
            raise BackendError(
                f"Backend {operation} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            backend_calls.labels(operation=operation, status="error").inc()
            logger.error(f"Unable to reach backend for {operation}: {exc}")
            raise BackendError(f"Unable to reach backend for {operation}") from exc

        backend_calls.labels(operation=operation, status="success").inc()
        if not response.content:
            return None
        return response.json()

    async def get_catalog_service(self, service_id: str) -> Optional[Dict[str, Any]]:
        rows = await self._request(
            "get_catalog_service",
            "GET",
            "/rest/v1/service_catalog",
            params={
                "select": CATALOG_COLUMNS,
                "id": f"eq.{service_id}",
                "is_active": "eq.true",
                "limit": 1,
            },
        )
        return rows[0] if rows else None

    async def generate_embedding(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise BackendError("Text is required to generate embedding")

        result = await self._request(
            "generate_embedding",
            "POST",
            "/functions/v1/generate-embedding",
            json={"text": text.strip(), "type": "query"},
        )
        embedding = (result or {}).get("embedding")
        if not isinstance(embedding, list):
            raise BackendError("Invalid embedding format received")
        if len(embedding) != EMBEDDING_DIMENSIONS:
            logger.warning(f"Expected {EMBEDDING_DIMENSIONS} embedding dimensions, got {len(embedding)}")
        return embedding

    async def find_similar_services(
        self,
        query: str,
        limit: int = 10,
        discipline: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Rows of {service_id, service_name, discipline, similarity, min_price}."""
        embedding = await self.generate_embedding(query)
        rows = await self._request(
            "find_similar_services",
            "POST",
            "/rest/v1/rpc/find_similar_services",
            json={
                "query_embedding": embedding,
                "limit_count": limit,
                "discipline_filter": discipline,
            },
        )
        return rows or []

    async def search_services(self, term: str, limit: int = 10) -> List[Dict[str, Any]]:
        rows = await self._request(
            "search_services",
            "GET",
            "/rest/v1/service_catalog",
            params={
                "select": CATALOG_COLUMNS,
                "is_active": "eq.true",
                "service_name": f"ilike.*{term}*",
                "limit": limit,
            },
        )
        return rows or []

    async def search_professionals(self, term: str, limit: int = 10) -> List[Dict[str, Any]]:
        rows = await self._request(
            "search_professionals",
            "GET",
            "/rest/v1/profiles",
            params={
                "select": PROFESSIONAL_COLUMNS,
                "user_type": "eq.professional",
                "or": f"(full_name.ilike.*{term}*,specialties.ilike.*{term}*)",
                "limit": limit,
            },
        )
        return rows or []

    async def get_client_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        rows = await self._request(
            "get_client_profile",
            "GET",
            "/rest/v1/profiles",
            params={"select": "full_name,whatsapp,phone", "user_id": f"eq.{user_id}", "limit": 1},
        )
        return rows[0] if rows else None

    async def insert_lead(self, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._request(
            "insert_lead",
            "POST",
            "/rest/v1/leads",
            json=row,
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise BackendError("Lead insert returned no row")
        return rows[0]

    async def update_lead(self, lead_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._request(
            "update_lead",
            "PATCH",
            "/rest/v1/leads",
            params={"id": f"eq.{lead_id}"},
            json=fields,
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise BackendError(f"Lead {lead_id} not found", status_code=404)
        return rows[0]

    async def list_client_leads(self, client_id: str) -> List[Dict[str, Any]]:
        rows = await self._request(
            "list_client_leads",
            "GET",
            "/rest/v1/leads",
            params={"select": "*", "cliente_id": f"eq.{client_id}", "order": "created_at.desc"},
        )
        return rows or []

    async def popular_categories(self, limit: int = 6) -> List[str]:
        rows = await self._request(
            "popular_categories",
            "GET",
            "/rest/v1/service_categories",
            params={"select": "name", "order": "popularity.desc", "limit": limit},
        )
        return [row["name"] for row in rows or []]
