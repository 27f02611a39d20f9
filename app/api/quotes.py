"""Quote endpoints: pricing with Redis caching and quote-to-lead submission"""
import json
import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Header, HTTPException

from app.api.dependencies import get_lead_service
from app.schemas.lead import LeadCreate, LeadWithQuote, QuoteDecision
from app.schemas.quote import Quote, QuoteRequest
from app.services.leads import LeadService
from app.services.pricing import compute_quote
from app.core.redis import get_redis
from app.core.config import settings
from app.core.errors import BackendError, RequestInvalid, ServiceNotFound
from app.core.metrics import quote_cache, quotes_computed
from app.utils.hashing import cache_key
from app.utils.idempotency import get_idempotent, set_idempotent

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/calc", response_model=Quote)
async def calc_quote(req: QuoteRequest):

    key = cache_key("quote", req.model_dump())
    redis = get_redis()

    if redis is not None:
        try:
            cached = await redis.get(key)
            if cached:
                quote_cache.labels(result="hit").inc()
                return Quote.model_validate(json.loads(cached))
        except Exception as e:
            logger.warning(f"Cache retrieval failed: {e}")

    quote_cache.labels(result="miss").inc()
    result = compute_quote(
        req.base_price,
        req.form_data,
        req.immediate_service,
        immediate_fee=settings.QUOTE_IMMEDIATE_FEE,
        promo_discount=settings.QUOTE_PROMO_DISCOUNT,
        tax_rate=settings.QUOTE_TAX_RATE,
    )
    quotes_computed.labels(immediate=str(req.immediate_service).lower()).inc()

    if redis is not None:
        try:
            await redis.set(key, result.model_dump_json(), ex=settings.QUOTE_CACHE_TTL)
        except Exception as e:
            logger.warning(f"Cache write failed: {e}")

    return result


@router.post("/", response_model=LeadWithQuote)
async def create_quote_and_lead(
    payload: LeadCreate,
    idempotency_key: Optional[str] = Header(None),
    leads: LeadService = Depends(get_lead_service),
):
    if idempotency_key:
        prev = await get_idempotent(idempotency_key)
        if prev:
            return prev

    try:
        out = await leads.create_quote_and_lead(payload)
    except ServiceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RequestInvalid as e:
        raise HTTPException(status_code=422, detail=e.state.model_dump())
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if idempotency_key:
        await set_idempotent(idempotency_key, out.model_dump(mode="json"))
    return out


@router.get("/client/{client_id}", response_model=List[Dict[str, Any]])
async def list_client_quotes(client_id: str, leads: LeadService = Depends(get_lead_service)):
    return await leads.get_client_quotes(client_id)


@router.post("/{lead_id}/respond")
async def respond_to_quote(
    lead_id: str,
    decision: QuoteDecision,
    leads: LeadService = Depends(get_lead_service),
):
    try:
        return await leads.respond_to_quote(lead_id, decision.accepted, decision.professional_id)
    except BackendError as e:
        status = 404 if e.status_code == 404 else 502
        raise HTTPException(status_code=status, detail=str(e))
