"""Turns a priced service request into a lead on the backend."""
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from app.clients.backend import BackendClient
from app.core.config import settings
from app.core.enums import LeadEvent, LeadStatus
from app.core.errors import RequestInvalid, ServiceNotFound
from app.core.metrics import quotes_computed
from app.schemas.lead import LeadCreate, LeadWithQuote
from app.schemas.quote import Quote
from app.services.pricing import compute_quote
from app.services.validation import validate
from app.services.webhook import send_webhook

logger = logging.getLogger(__name__)


def problem_description(payload: LeadCreate) -> str:
    if payload.ai_prefill and payload.ai_prefill.descripcion:
        return payload.ai_prefill.descripcion
    form = payload.form_data
    for key in ("problem_description", "description", "additionalInfo"):
        value = form.get(key)
        if isinstance(value, str) and value:
            return value
    return json.dumps(form, sort_keys=True, ensure_ascii=False, default=str)


def quote_for_service(service: Dict[str, Any], form_data: Dict[str, Any], immediate_service: bool) -> Quote:
    quote = compute_quote(
        float(service.get("min_price") or 0.0),
        form_data,
        immediate_service,
        immediate_fee=settings.QUOTE_IMMEDIATE_FEE,
        promo_discount=settings.QUOTE_PROMO_DISCOUNT,
        tax_rate=settings.QUOTE_TAX_RATE,
    )
    quotes_computed.labels(immediate=str(immediate_service).lower()).inc()
    return quote


def build_lead_row(
    payload: LeadCreate,
    service: Dict[str, Any],
    profile: Optional[Dict[str, Any]],
    quote: Quote,
) -> Dict[str, Any]:
    profile = profile or {}
    location = payload.location
    return {
        "cliente_id": payload.client_id,
        "nombre_cliente": profile.get("full_name"),
        "whatsapp": profile.get("whatsapp") or profile.get("phone"),
        "servicio": service.get("discipline"),
        "servicio_solicitado": service.get("service_name"),
        "descripcion_proyecto": problem_description(payload),
        "ubicacion_lat": location.lat if location else None,
        "ubicacion_lng": location.lng if location else None,
        "ubicacion_direccion": location.address if location else None,
        "fecha_cita": payload.appointment_at.isoformat() if payload.appointment_at else None,
        "estado": "Nuevo",
        "status": LeadStatus.PENDING.value,
        "price": quote.base_price,
        "agreed_price": quote.total_with_tax,
        "ai_suggested_price_min": quote.base_price,
        "ai_suggested_price_max": quote.total_with_tax,
        "disciplina_ia": service.get("discipline"),
    }


class LeadService:

    def __init__(self, backend: BackendClient, schedule: Optional[Callable[..., Any]] = None):
        """schedule(func, payload) defers webhook delivery, e.g. BackgroundTasks.add_task."""
        self.backend = backend
        self.schedule = schedule

    async def _notify(self, payload: Dict[str, Any]) -> None:
        if self.schedule is not None:
            self.schedule(send_webhook, payload)
            return
        await send_webhook(payload)

    async def create_quote_and_lead(self, payload: LeadCreate) -> LeadWithQuote:
        service = await self.backend.get_catalog_service(payload.service_id)
        if not service:
            raise ServiceNotFound(payload.service_id)

        quote = quote_for_service(service, payload.form_data, payload.immediate_service)

        form_data = dict(payload.form_data)
        if payload.ai_prefill and payload.ai_prefill.descripcion and not form_data.get("description"):
            form_data["description"] = payload.ai_prefill.descripcion
        state = validate(form_data, quote, service, payload.appointment_at)
        if not state.can_submit:
            raise RequestInvalid(state)

        try:
            profile = await self.backend.get_client_profile(payload.client_id)
        except Exception as e:
            logger.warning(f"Client profile unavailable for {payload.client_id}: {e}")
            profile = None

        lead = await self.backend.insert_lead(build_lead_row(payload, service, profile, quote))
        logger.info(f"Lead {lead.get('id')} created for service {payload.service_id}")

        await self._notify({
            "event": LeadEvent.CREATED.value,
            "lead_id": lead.get("id"),
            "service_id": payload.service_id,
            "total_with_tax": quote.total_with_tax,
        })

        return LeadWithQuote(lead=lead, quote=quote)

    async def get_client_quotes(self, client_id: str) -> List[Dict[str, Any]]:
        try:
            return await self.backend.list_client_leads(client_id)
        except Exception as e:
            logger.error(f"Error fetching quotes for client {client_id}: {e}")
            return []

    async def respond_to_quote(
        self,
        lead_id: str,
        accepted: bool,
        professional_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        update: Dict[str, Any] = {
            "status": (LeadStatus.ACCEPTED if accepted else LeadStatus.REJECTED).value,
        }
        if accepted and professional_id:
            update["professional_id"] = professional_id

        lead = await self.backend.update_lead(lead_id, update)

        await self._notify({
            "event": (LeadEvent.ACCEPTED if accepted else LeadEvent.REJECTED).value,
            "lead_id": lead_id,
            "professional_id": update.get("professional_id"),
        })
        return lead
