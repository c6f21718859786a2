"""
Correlation between provider invoices and bookings.

The invoice external id is the only thing the provider is guaranteed to echo
back on webhooks, so the booking id travels inside it:

    booking_<booking_id>_<unix millis>

The timestamp keeps the id unique when a booking is re-invoiced.
"""

import time
from typing import Any, Mapping, Optional

EXTERNAL_ID_PREFIX = "booking_"


def build_external_id(booking_id, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{EXTERNAL_ID_PREFIX}{booking_id}_{timestamp_ms}"


def extract_booking_id(external_id: Any) -> Optional[str]:
    """
    Return the booking id embedded in an external id, or None when the id was
    not issued by us. Never raises.
    """
    if not isinstance(external_id, str) or not external_id.startswith(EXTERNAL_ID_PREFIX):
        return None
    parts = external_id.split("_")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def resolve_booking_id(external_id: Any, metadata: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    booking_id = extract_booking_id(external_id)
    if booking_id:
        return booking_id
    # invoice metadata is only echoed back when enabled on the provider dashboard
    if isinstance(metadata, Mapping):
        candidate = metadata.get("booking_id")
        if candidate is not None and str(candidate).strip():
            return str(candidate).strip()
    return None
