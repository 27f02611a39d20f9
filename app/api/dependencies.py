from fastapi import BackgroundTasks, Depends, Request
from app.clients.backend import BackendClient
from app.services.leads import LeadService
from app.services.search import SearchService


def get_backend(request: Request) -> BackendClient:
    return request.app.state.backend


def get_search_service(backend: BackendClient = Depends(get_backend)) -> SearchService:
    return SearchService(backend)


def get_lead_service(
    background_tasks: BackgroundTasks,
    backend: BackendClient = Depends(get_backend),
) -> LeadService:
    # webhook delivery runs after the response is sent
    return LeadService(backend, schedule=background_tasks.add_task)
