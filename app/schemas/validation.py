from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from app.schemas.quote import Quote


class ValidationState(BaseModel):
    is_valid: bool
    missing_fields: List[str] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)
    can_submit: bool


class ValidationRequest(BaseModel):
    form_data: Dict[str, Any] = Field(default_factory=dict)
    quote: Optional[Quote] = None
    service: Optional[Dict[str, Any]] = None
    selected_date: Optional[str] = None
