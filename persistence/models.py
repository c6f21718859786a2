from sqlalchemy import Column, String

from booking_schemas import BookingStatus, PaymentStatus
from .db import Base


class BookingModel(Base):
    __tablename__ = "bookings"

    # assigned by the booking frontend, never generated here
    id = Column(String, primary_key=True, index=True)
    payment_status = Column(String(32), default=PaymentStatus.UNPAID.value, nullable=False)
    status = Column(String(32), default=BookingStatus.PENDING.value, nullable=False)
