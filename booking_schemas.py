from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentStatus(str, Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class InvoiceStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    SETTLED = "SETTLED"
    EXPIRED = "EXPIRED"


class CheckoutRequest(BaseModel):
    booking_id: Union[int, str]
    amount: float = Field(gt=0)
    description: Optional[str] = None
    remarks: Optional[str] = None
    customer_email: Optional[str] = None

    @field_validator("booking_id")
    @classmethod
    def booking_id_as_str(cls, v):
        v = str(v).strip()
        if not v:
            raise ValueError("booking_id must not be empty")
        return v


class InvoiceReference(BaseModel):
    external_id: str        # booking_<id>_<timestamp>
    invoice_id: str         # provider invoice id
    checkout_url: str


class PaymentEvent(BaseModel):
    """
    Invoice status as seen by the provider, either polled or pushed by webhook.

    Webhook payloads are not under our control, so nothing here is strictly
    typed: a missing status or a non-string external id still parses and is
    dealt with by reconciliation. Extra keys from the payload are kept as-is.
    """
    model_config = ConfigDict(extra="allow")

    id: Any = None
    status: Any = None
    external_id: Any = None
    metadata: Any = None

    @property
    def invoice_status(self) -> Optional[InvoiceStatus]:
        """Known status, or None for a missing or unrecognised one."""
        if self.status is None:
            return None
        try:
            return InvoiceStatus(str(self.status))
        except ValueError:
            return None

    @property
    def is_paid(self) -> bool:
        return self.invoice_status == InvoiceStatus.PAID
