import logging
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from booking_schemas import BookingStatus, PaymentStatus
from .models import BookingModel

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """The booking store rejected or failed an operation."""


class BookingStore:
    """
    Booking persistence as seen by the payments backend: read a booking and
    flip it to paid. Nothing here creates or deletes bookings.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def mark_paid_and_confirmed(self, booking_id: str) -> int:
        """
        Set payment_status=Paid and status=Confirmed on one booking.

        Rows already in that state are left untouched, so the return value is 1
        for the call that actually confirmed the booking and 0 for every
        repeat (or for an unknown id, see booking_exists).
        """
        stmt = (
            update(BookingModel)
            .where(BookingModel.id == str(booking_id))
            .where(
                or_(
                    BookingModel.payment_status.is_distinct_from(PaymentStatus.PAID.value),
                    BookingModel.status.is_distinct_from(BookingStatus.CONFIRMED.value),
                )
            )
            .values(
                payment_status=PaymentStatus.PAID.value,
                status=BookingStatus.CONFIRMED.value,
            )
            .execution_options(synchronize_session=False)
        )
        with self.session_factory() as db:
            try:
                result = db.execute(stmt)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise StoreError(f"failed to confirm booking {booking_id}: {exc}") from exc
        return result.rowcount or 0

    def booking_exists(self, booking_id: str) -> bool:
        return self.get_booking(booking_id) is not None

    def get_booking(self, booking_id: str) -> Optional[BookingModel]:
        with self.session_factory() as db:
            try:
                return db.scalar(select(BookingModel).where(BookingModel.id == str(booking_id)))
            except SQLAlchemyError as exc:
                raise StoreError(f"failed to load booking {booking_id}: {exc}") from exc
