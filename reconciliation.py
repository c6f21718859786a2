import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from booking_schemas import PaymentEvent
from payments.correlation import resolve_booking_id

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    IGNORED = "ignored"                  # status other than PAID
    UNRESOLVED = "unresolved"            # PAID but no booking id in the event
    APPLIED = "applied"                  # this call confirmed the booking
    ALREADY_APPLIED = "already_applied"  # booking was confirmed earlier
    NOT_FOUND = "not_found"              # booking id resolved but no such row


@dataclass
class Reconciliation:
    outcome: Outcome
    status: Any
    booking_id: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.booking_id is not None and self.outcome != Outcome.UNRESOLVED


class ReconciliationService:
    """
    Applies provider payment status to bookings.

    Both the webhook push and the manual verify pull go through handle_event,
    so whichever observes PAID first confirms the booking and the other one
    becomes a no-op. Provider must implement .fetch_invoice_status(invoice_id);
    store must implement .mark_paid_and_confirmed(id) and .booking_exists(id).

    ProviderError and StoreError are not caught here.
    """

    def __init__(self, provider, store):
        self.provider = provider
        self.store = store

    def handle_event(self, event: PaymentEvent) -> Reconciliation:
        if not event.is_paid:
            if event.invoice_status is None:
                logger.warning("Unknown invoice status", extra={"payload": event.model_dump()})
            else:
                logger.info(
                    "Payment event passed through",
                    extra={"status": event.invoice_status.value, "external_id": event.external_id},
                )
            return Reconciliation(Outcome.IGNORED, event.status)

        booking_id = resolve_booking_id(event.external_id, event.metadata)
        if booking_id is None:
            # acknowledged anyway, otherwise the provider keeps redelivering it
            logger.warning("Unresolved payment event", extra={"payload": event.model_dump()})
            return Reconciliation(Outcome.UNRESOLVED, event.status)

        updated = self.store.mark_paid_and_confirmed(booking_id)
        if updated:
            logger.info("Booking confirmed", extra={"booking_id": booking_id, "invoice_id": event.id})
            return Reconciliation(Outcome.APPLIED, event.status, booking_id)

        if self.store.booking_exists(booking_id):
            logger.info("Booking already confirmed", extra={"booking_id": booking_id})
            return Reconciliation(Outcome.ALREADY_APPLIED, event.status, booking_id)

        logger.warning(
            "Paid invoice for unknown booking",
            extra={"booking_id": booking_id, "external_id": event.external_id},
        )
        return Reconciliation(Outcome.NOT_FOUND, event.status, booking_id)

    def verify_invoice(self, invoice_id: str) -> Reconciliation:
        event = self.provider.fetch_invoice_status(invoice_id)
        return self.handle_event(event)
