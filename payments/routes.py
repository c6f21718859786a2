import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from booking_schemas import CheckoutRequest
from payments.checkout import ProviderError
from persistence.crud import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-checkout-session")
def create_checkout_session(body: CheckoutRequest, request: Request):
    provider = request.app.state.provider
    try:
        invoice = provider.create_invoice(
            booking_id=body.booking_id,
            amount=body.amount,
            description=body.description,
            customer_email=body.customer_email,
            remarks=body.remarks,
        )
    except ProviderError as exc:
        logger.error("Error creating invoice", extra={"booking_id": body.booking_id, "error": str(exc)})
        return JSONResponse(status_code=500, content={"error": "Failed to create invoice"})

    # shape expected by the booking frontend
    return {
        "data": {
            "attributes": {
                "checkout_url": invoice.checkout_url,
                "invoice_id": invoice.invoice_id,
            }
        }
    }


@router.get("/verify-payment/{invoice_id}")
def verify_payment(invoice_id: str, request: Request):
    """Manual status check, used by the frontend after the checkout redirect."""
    service = request.app.state.reconciliation
    try:
        result = service.verify_invoice(invoice_id)
    except (ProviderError, StoreError) as exc:
        logger.error("Error verifying payment", extra={"invoice_id": invoice_id, "error": str(exc)})
        return JSONResponse(status_code=500, content={"error": "Verification failed"})

    if result.resolved:
        return {"status": result.status, "booking_id": result.booking_id}
    return {"status": result.status}
