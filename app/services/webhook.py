import httpx
import asyncio
import logging
from app.core.config import settings
from app.core.metrics import webhook_deliveries

logger = logging.getLogger(__name__)


async def send_webhook(payload: dict, retries: int | None = None) -> bool:
    """Post a lead event downstream. Disabled when WEBHOOK_URL is empty; never raises."""
    if not settings.WEBHOOK_URL:
        return False

    if retries is None:
        retries = settings.WEBHOOK_RETRIES

    backoff = 1.0
    event = payload.get("event")
    lead_id = payload.get("lead_id")

    for attempt in range(1, retries + 1):
        try:
            async with httpx.AsyncClient(timeout=settings.WEBHOOK_TIMEOUT) as client:
                response = await client.post(settings.WEBHOOK_URL, json=payload)

                if 200 <= response.status_code < 300:
                    webhook_deliveries.labels(status="success").inc()
                    logger.info(f"Webhook {event} delivered for lead {lead_id}")
                    return True
                else:
                    logger.warning(
                        f"Webhook {event} failed (attempt {attempt}/{retries}): "
                        f"Status {response.status_code} for lead {lead_id}"
                    )
        except httpx.TimeoutException:
            logger.warning(f"Webhook {event} timeout (attempt {attempt}/{retries}) for lead {lead_id}")
        except httpx.HTTPError as e:
            logger.warning(f"Webhook {event} error (attempt {attempt}/{retries}): {e} for lead {lead_id}")

        webhook_deliveries.labels(status="retry" if attempt < retries else "failed").inc()
        if attempt < retries:
            await asyncio.sleep(backoff)
            backoff *= 2.0

    logger.error(f"Webhook {event} failed after {retries} attempts for lead {lead_id}")
    return False
