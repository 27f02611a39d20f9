from typing import List
from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_search_service
from app.schemas.search import SearchResult
from app.services.search import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/", response_model=List[SearchResult])
async def search(
    q: str = Query("", max_length=200),
    semantic: bool = Query(True),
    service: SearchService = Depends(get_search_service),
):
    return await service.search(q, use_semantic=semantic)


@router.get("/popular", response_model=List[str])
async def popular_searches(service: SearchService = Depends(get_search_service)):
    return await service.popular_searches()
