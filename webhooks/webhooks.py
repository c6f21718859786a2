import hmac
import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from booking_schemas import PaymentEvent
from persistence.crud import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_callback_token(expected: Optional[str], received: Optional[str]):
    if not expected:
        # no token configured: accept unverified callbacks (local dev only, NOT for prod)
        return
    if not received or not hmac.compare_digest(expected, received):
        raise HTTPException(status_code=400, detail="Invalid callback token")


@router.post("/webhook")
def xendit_webhook(
    request: Request,
    payload: Any = Body(None),
    x_callback_token: Optional[str] = Header(None),
):
    """
    Invoice callback from Xendit.

    Anything we recognise (including PAID events we cannot map to a booking)
    is answered with 200 so the provider stops redelivering. Only a store
    failure returns 500, which makes the provider retry later.
    """
    _check_callback_token(request.app.state.settings.xendit_callback_token, x_callback_token)
    if isinstance(payload, dict):
        event = PaymentEvent.model_validate(payload)
    else:
        event = PaymentEvent(body=payload)
    logger.info(
        "Received webhook",
        extra={"status": event.status, "external_id": event.external_id, "invoice_id": event.id},
    )

    service = request.app.state.reconciliation
    try:
        result = service.handle_event(event)
    except StoreError as exc:
        logger.error("Error updating booking", extra={"external_id": event.external_id, "error": str(exc)})
        return JSONResponse(status_code=500, content={"error": "Database update failed"})

    return {"received": True, "result": result.outcome.value}
