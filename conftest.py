import pytest
import asyncio
import uuid
from typing import Any, Dict, List, Optional
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.api.dependencies import get_backend
from app.core import redis as redis_module
from app.core.config import settings
from app.core.errors import BackendError


class FakeBackend:
    """In-memory stand-in for BackendClient. Operations listed in `failing` raise BackendError."""

    def __init__(self):
        self.catalog: Dict[str, Dict[str, Any]] = {}
        self.similar: List[Dict[str, Any]] = []
        self.services: List[Dict[str, Any]] = []
        self.professionals: List[Dict[str, Any]] = []
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.leads: List[Dict[str, Any]] = []
        self.categories: List[str] = []
        self.failing: set = set()
        self.calls: List[str] = []

    def _call(self, operation: str):
        self.calls.append(operation)
        if operation in self.failing:
            raise BackendError(f"Backend {operation} returned 500", status_code=500)

    async def get_catalog_service(self, service_id: str) -> Optional[Dict[str, Any]]:
        self._call("get_catalog_service")
        return self.catalog.get(service_id)

    async def find_similar_services(self, query: str, limit: int = 10, discipline=None):
        self._call("find_similar_services")
        return self.similar[:limit]

    async def search_services(self, term: str, limit: int = 10):
        self._call("search_services")
        return self.services[:limit]

    async def search_professionals(self, term: str, limit: int = 10):
        self._call("search_professionals")
        return self.professionals[:limit]

    async def get_client_profile(self, user_id: str):
        self._call("get_client_profile")
        return self.profiles.get(user_id)

    async def insert_lead(self, row: Dict[str, Any]) -> Dict[str, Any]:
        self._call("insert_lead")
        lead = {"id": str(uuid.uuid4()), **row}
        self.leads.append(lead)
        return lead

    async def update_lead(self, lead_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._call("update_lead")
        for lead in self.leads:
            if lead["id"] == lead_id:
                lead.update(fields)
                return lead
        raise BackendError(f"Lead {lead_id} not found", status_code=404)

    async def list_client_leads(self, client_id: str):
        self._call("list_client_leads")
        return [lead for lead in reversed(self.leads) if lead.get("cliente_id") == client_id]

    async def popular_categories(self, limit: int = 6):
        self._call("popular_categories")
        return self.categories[:limit]

    async def close(self):
        pass


class FakeRedis:
    def __init__(self):
        self.store: Dict[str, Any] = {}
        self.expiry: Dict[str, Any] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value.encode() if isinstance(value, str) else value
        self.expiry[key] = ex
        return True

    async def delete(self, key):
        self.store.pop(key, None)


@pytest.fixture
def catalog_row():
    return {
        "id": "svc-ac-install",
        "service_name": "Instalación de minisplit",
        "description": "Instalación de aire acondicionado tipo minisplit",
        "discipline": "aire-acondicionado",
        "min_price": 100.0,
        "price_type": "fixed",
        "is_active": True,
    }


@pytest.fixture
def backend(catalog_row):
    fake = FakeBackend()
    fake.catalog[catalog_row["id"]] = catalog_row
    fake.profiles["client-1"] = {"full_name": "Ana López", "whatsapp": "5215550000000", "phone": None}
    return fake


@pytest.fixture
def fake_redis():
    client = FakeRedis()
    redis_module.set_redis(client)
    yield client
    redis_module.set_redis(None)


@pytest.fixture(autouse=True)
def no_redis_by_default():
    previous = redis_module.get_redis()
    redis_module.set_redis(None)
    yield
    redis_module.set_redis(previous)


@pytest.fixture(autouse=True)
def no_webhook(monkeypatch):
    monkeypatch.setattr(settings, "WEBHOOK_URL", "")


@pytest.fixture
async def test_client(backend):
    app.dependency_overrides[get_backend] = lambda: backend
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def valid_form_data():
    return {
        "description": "El equipo actual gotea y hace ruido al encender",
        "service_type": "Instalar",
        "needs_uninstall": True,
    }


@pytest.fixture
def valid_lead_data(catalog_row, valid_form_data):
    return {
        "client_id": "client-1",
        "service_id": catalog_row["id"],
        "form_data": valid_form_data,
        "immediate_service": True,
        "appointment_at": "2026-11-02T10:00:00",
        "location": {"lat": 19.4326, "lng": -99.1332, "address": "Av. Reforma 222, CDMX"},
    }


@pytest.fixture
def valid_idempotency_key():
    return str(uuid.uuid4())


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "search: marks tests related to search ranking"
    )
    config.addinivalue_line(
        "markers", "validation: marks tests related to request validation"
    )
    config.addinivalue_line(
        "markers", "webhooks: marks tests related to webhooks"
    )
    config.addinivalue_line(
        "markers", "idempotency: marks tests related to idempotency"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
