from fastapi import APIRouter

from app.schemas.validation import ValidationRequest, ValidationState
from app.services.validation import validate

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("/validate", response_model=ValidationState)
async def validate_request(req: ValidationRequest):
    return validate(req.form_data, req.quote, req.service, req.selected_date)
