from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from app.core.enums import ResultType


class SemanticMatch(BaseModel):
    """An embedding-similarity hit, already joined with its catalog row."""
    id: str
    title: str
    description: Optional[str] = None
    price: Optional[str] = None
    similarity: float
    data: Dict[str, Any] = Field(default_factory=dict)


class LexicalMatch(BaseModel):
    id: str
    type: ResultType = ResultType.SERVICE
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[str] = None
    rating: Optional[float] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class SearchResult(BaseModel):
    id: str
    type: ResultType
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[str] = None
    rating: Optional[float] = None
    similarity: Optional[float] = None
    data: Dict[str, Any] = Field(default_factory=dict)
