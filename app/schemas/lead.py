from pydantic import BaseModel, Field
from typing import Any, Dict, Literal, Optional
from datetime import datetime
from app.schemas.quote import Quote


class LeadLocation(BaseModel):
    lat: float
    lng: float
    address: str


class AIPrefill(BaseModel):
    descripcion: Optional[str] = None
    urgencia: Optional[Literal["baja", "media", "alta"]] = None


class LeadCreate(BaseModel):
    client_id: str
    service_id: str
    form_data: Dict[str, Any] = Field(default_factory=dict)
    immediate_service: bool = False
    appointment_at: Optional[datetime] = None
    location: Optional[LeadLocation] = None
    ai_prefill: Optional[AIPrefill] = None


class QuoteDecision(BaseModel):
    accepted: bool
    professional_id: Optional[str] = None


class LeadWithQuote(BaseModel):
    lead: Dict[str, Any]
    quote: Quote
